"""Resolve run configurations into terminal commands or debug launch descriptors."""

__version__ = "0.1.0"
