"""Settings and logging setup shared by the whole application."""
