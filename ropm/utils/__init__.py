"""
Utility modules for the ROPM generator.

This package contains the custom exceptions and static asset lookup
(insignia images and TrueType fonts) shared across the generator.
"""

from ropm.utils.assets import FontSet, resolve_font_set, resolve_image
from ropm.utils.exceptions import ConfigError, RecordError, RenderError, ROPMError

__all__ = [
    # Exceptions
    "ROPMError",
    "RecordError",
    "RenderError",
    "ConfigError",
    # Assets
    "FontSet",
    "resolve_font_set",
    "resolve_image",
]
