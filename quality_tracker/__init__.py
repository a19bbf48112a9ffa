"""Code quality tracker: ingest PHPCS JSON reports, score them, keep history."""

__version__ = "1.0.0"
