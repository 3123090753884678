"""HTTP API for graph building, validation and query construction."""
