"""Narrow risky C "long" declarations and printf/scanf length modifiers."""

from __future__ import annotations

__version__ = "0.1.0"


def rewrite(source: str, filename: str = "<input>") -> str:
    """Rewrite C source text, leaving comments and other string contents alone."""
    from unlongify.rewriter import rewrite as _rewrite

    return _rewrite(source, filename)
