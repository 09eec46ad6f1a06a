"""
minquote - Shortest shell quoting.

Quotes a shell word with as few bytes as possible, breaking ties toward the
form a person would write.
"""

from __future__ import annotations

__version__ = "0.1.0"

from minquote.core.quoter import quote

__all__ = ["quote", "__version__"]
