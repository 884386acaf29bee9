"""Interactive installer for PHP and Laravel applications."""

from __future__ import annotations

from .core import __version__

__all__ = ["__version__"]
