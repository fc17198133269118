"""File maintenance and ZIP archive helpers."""
