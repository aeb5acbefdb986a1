"""finseries core: models, storage, ingestion and services."""
