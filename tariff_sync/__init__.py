"""WB Tariffs Sync Package.

This package contains the services of the tariff synchronization pipeline:
- source_extractor: Fetches box tariffs from the Wildberries API
- normalizer: Converts provider string encodings into typed values
- storage: Persists tariffs to PostgreSQL with idempotent upserts
- publisher_sheets: Publishes the latest snapshot to Google Sheets
- jobs: Fetch/publish jobs, the non-reentrant job runner and the scheduler
"""

__version__ = "0.1.0"
