"""Core infrastructure: config, exceptions, events, storage, logging, CLI."""
