"""Configuration loading for the Pocket Cleaner."""
