"""dailyprog -- scaffold a dated project directory from a template catalog."""

__version__ = "1.0.0"
