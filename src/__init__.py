"""E-learning API."""
