"""
accessctl — client-side management of panel API users.

Lists credentials, issues and rotates secret tokens, toggles activation,
edits per-credential rate limits and deletes credentials behind a
confirmation prompt.
"""

__version__ = "0.1.0"
