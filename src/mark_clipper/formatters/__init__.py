"""Output formatters for clip reports."""
