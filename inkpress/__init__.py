"""inkpress: black-and-white page conversion for e-ink displays."""

__version__ = "0.1.0"
