"""pdfrank - TF-IDF search over local PDF collections."""

__version__ = "0.1.0"
