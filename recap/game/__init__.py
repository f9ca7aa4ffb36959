"""Battle log parsing and summary rendering."""
