"""Models Initialization Module."""
