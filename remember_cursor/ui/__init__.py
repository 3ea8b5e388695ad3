"""Editor host for remember-cursor."""
