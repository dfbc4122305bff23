"""Transient floating text overlay that clears itself and exits."""
from __future__ import annotations

__version__ = "0.1.0"
