"""Bookmark content extraction and LLM summarization pipeline."""

__version__ = "0.1.0"
