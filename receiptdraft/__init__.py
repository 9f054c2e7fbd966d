"""Reconstruct editable receipt drafts from on-device OCR text blocks."""

__version__ = "0.1.0"
