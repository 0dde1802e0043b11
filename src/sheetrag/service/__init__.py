"""Service layer: ingestion, chunking, retrieval and chat."""
