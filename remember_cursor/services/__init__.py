"""Services that record, persist and restore editing positions."""
