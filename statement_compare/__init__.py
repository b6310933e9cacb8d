"""Clean, standardize and compare two spreadsheet account statements."""

__version__ = "0.1.0"
