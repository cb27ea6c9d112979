"""Configuration: settings loading and logging setup."""
