"""
modelgraph CLI - Command line tools for checking schema documents.
"""

from __future__ import annotations

from .main import app, main

__all__ = ["main", "app"]
