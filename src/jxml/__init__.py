"""JXML: a build-time template preprocessor for XML game content."""

__version__ = "0.1.0"
