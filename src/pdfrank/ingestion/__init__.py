"""Source document ingestion."""
