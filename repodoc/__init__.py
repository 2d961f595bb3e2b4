"""Documentation synthesis for Java repositories."""

__version__ = "0.1.0"
