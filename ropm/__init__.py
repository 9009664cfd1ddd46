"""ROPM Generator - PDF bulletins for military police incident records."""

__version__ = "1.0.0"
