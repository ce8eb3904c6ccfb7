"""In-memory log storage."""
