"""Command-line entry point (`syskit <command> [args]`)."""
