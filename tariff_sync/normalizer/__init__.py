"""
Normalizer package.

Pure helpers that turn the provider's string encodings (comma decimal
separators, "-" sentinels) into typed values.
"""

from .normalize import clean_optional_text, parse_number

__all__ = ["parse_number", "clean_optional_text"]
