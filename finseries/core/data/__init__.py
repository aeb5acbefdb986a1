"""Storage, schema and ingestion for financial records."""
