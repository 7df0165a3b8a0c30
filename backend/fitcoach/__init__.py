"""Expose the application factory at package level.

Callers can ``from fitcoach import create_app`` without traversing the
package structure.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .factory import create_app  # noqa: E402

__all__ = ["__version__", "create_app"]
