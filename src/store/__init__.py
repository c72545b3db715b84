"""Storage layer.

This package persists records as one JSON array per file and implements
create, read, update and remove on top of that file.
"""
