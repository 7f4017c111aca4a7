"""Generative media tool server backed by Vertex AI and Cloud Text-to-Speech."""

__version__ = "0.1.0"
