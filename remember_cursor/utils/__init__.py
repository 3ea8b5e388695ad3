"""Utility modules for remember-cursor."""
