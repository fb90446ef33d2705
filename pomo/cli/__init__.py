"""Console entry points and presentation."""
