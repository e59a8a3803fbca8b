"""Core infrastructure: config-driven logging, request context, storage, errors."""
