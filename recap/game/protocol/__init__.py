"""Battle log parsing and replay retrieval."""
