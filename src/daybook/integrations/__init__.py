"""Third-party sync backends.

Each backend lives behind an optional extra and is imported on demand.
"""
