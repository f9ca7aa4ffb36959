"""Battle replay summaries."""
