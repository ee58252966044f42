"""Shared building blocks for the vasu toolkit."""
