"""Mark Clipper: clip content engine and diagnostics CLI."""

__version__ = "0.1.0"
