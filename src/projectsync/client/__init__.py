"""Remote endpoint implementations and shared client errors."""
