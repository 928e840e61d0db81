"""Processing pipelines: card image ingestion and speech production."""
