"""Minimal OOXML spreadsheet export."""
