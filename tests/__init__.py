"""WB Tariffs Sync Test Suite.

Test Structure:
- unit/: Unit tests for individual functions and classes (no network, no database)
- integration/: Tests against a real PostgreSQL (skipped when unreachable)
"""
