"""
Core module for the education board result scraper.

This package contains configuration, validation, remote config loading,
error definitions, logging and terminal output used by the scraper.

Submodules:
    config: Local settings (``ScraperSettings``) and the immutable
        ``RemoteSettings`` / ``RequestInput`` models via Pydantic.
    errors: ``ScraperError`` hierarchy and ``ErrorType`` classification.
    validation: Exam / year / board / roll / reg checks.
    remote_config: ``RemoteConfigLoader`` for the selector service.
    extractor: ``DataExtractor`` text normalisation helpers.
    display: ``ResultPrinter`` rich terminal output.
    logging_setup: Compressed rotating file + console logging.
"""
