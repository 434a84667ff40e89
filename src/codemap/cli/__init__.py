"""codemap CLI."""
