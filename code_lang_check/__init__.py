"""Grammar and spell checking for comments, strings and identifiers in source code."""

__version__ = "0.1.0"
