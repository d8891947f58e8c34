"""Suggest English variable names for Chinese terms via an OpenAI-compatible chat API."""

__version__ = "0.1.0"
__all__ = ["__version__"]