"""Cross-origin policy enforcement layer for HTTP APIs."""

__version__ = "1.0.0"
