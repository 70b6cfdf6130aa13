"""career-watch: track company career pages and export their job postings."""

__version__ = "0.1.0"
