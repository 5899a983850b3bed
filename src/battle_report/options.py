"""Parser configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserOptions:
    """Knobs for grammar policy decisions.

    allow_empty_tables: accept tables that declare 0 rows (an empty awards
    table, for instance). Off by default: a 0-row table is a structural error.
    """

    allow_empty_tables: bool = False
