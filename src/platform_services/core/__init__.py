"""Cross-cutting concerns: logging and context variables."""
