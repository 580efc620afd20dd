"""Wire schemas for the indexer and node-bridge services."""
