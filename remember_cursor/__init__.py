"""
remember-cursor - Remember and restore cursor and scroll positions per document
"""

__version__ = "0.3.0"
