"""Core infrastructure: configuration, extensions, logging, errors, signals."""
