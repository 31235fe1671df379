"""Framework adapters serving the ingest endpoints."""
