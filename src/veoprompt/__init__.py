"""Prompt composition and generation for Veo videos and Imagen images."""

__version__ = "0.1.0"
