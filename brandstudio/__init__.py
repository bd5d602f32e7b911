"""Brand-consistent asset generation on top of Gemini image and Veo video models."""

__version__ = "0.1.0"
