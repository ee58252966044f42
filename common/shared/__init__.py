"""Configuration loading and progress helpers."""
