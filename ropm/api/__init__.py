"""HTTP API for the ROPM generator."""

from ropm.api.app import ERROR_PREFIX, create_app

__all__ = [
    "ERROR_PREFIX",
    "create_app",
]
