"""Console entry points for the vasu toolkit."""
