"""Models whose relation methods are misconfigured."""
