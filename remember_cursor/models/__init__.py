"""Data models for remember-cursor."""

from .positions import CursorPosition, CursorRange, EphemeralState, states_equal

__all__ = ["CursorPosition", "CursorRange", "EphemeralState", "states_equal"]
