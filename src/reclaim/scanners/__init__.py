"""Built-in category scanners."""
