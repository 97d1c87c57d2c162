"""Search service client and the ingest, cascade and reset operations."""
