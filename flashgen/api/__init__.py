"""API routers package."""

from flashgen.api import generations, system

__all__ = [
    "generations",
    "system",
]
