"""Order History Extractor: scrape, total, and export an account's orders."""

__version__ = "0.1.0"
