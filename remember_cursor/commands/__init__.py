"""CLI command groups for remember-cursor."""
