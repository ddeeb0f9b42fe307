"""HTTP API exposed by the FastAPI host application."""
