"""Daily category log files (LogWriter) and the stdlib logging bridge."""
