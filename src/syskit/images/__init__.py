"""Image re-encoding helpers (Pillow)."""
