"""Project core.

This package hosts the stable, non-domain-specific building blocks (settings,
errors, shared types, and the CLI entrypoint).
"""

from __future__ import annotations

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
