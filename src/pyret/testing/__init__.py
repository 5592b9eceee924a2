from __future__ import annotations

from .corpus import Case, generate_cases, generate_sources

__all__ = ["Case", "generate_cases", "generate_sources"]
