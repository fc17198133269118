"""OS and interpreter diagnostics (psutil-backed)."""
