"""Cross-cutting concerns: exceptions and logging configuration."""
