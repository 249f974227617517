"""Tweet sentiment pipeline."""
