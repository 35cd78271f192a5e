"""producer-export: producer roster spreadsheet -> per-record JSON archives."""

__version__ = "0.1.0"
