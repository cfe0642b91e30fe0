"""Runtime support: worker pool used by ingestion."""
