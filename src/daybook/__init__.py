"""daybook — a three-field diary with fuzzy search, CSV interchange and blob-store sync."""

__version__ = "0.1.0"
