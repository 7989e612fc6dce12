# src/planit/notion/rollups.py

"""
Rollup resolution.

A rollup may hide the value we want behind several levels:

    Rollup -> Array -> Title                 (linked record's name)
    Rollup -> Array -> Date                  (linked record's date)
    Rollup -> Array -> Formula -> Date       (computed date on the linked record)
    Rollup -> Date                           (aggregated date, e.g. "latest date")

Each level gets its own accessor returning an optional value. Arrays are scanned
in order and the first usable entry wins; later entries are ignored even if they
point at other linked records.
"""

from __future__ import annotations

from collections.abc import Iterable

from .properties import (
    ArrayRollup,
    DateEntry,
    DateFormula,
    DateRollup,
    DateValue,
    FormulaEntry,
    FormulaPayload,
    RichText,
    RollupEntry,
    RollupPayload,
    TitleEntry,
)


def first_text(fragments: Iterable[RichText]) -> str | None:
    for frag in fragments:
        return frag.plain_text
    return None


def date_start(value: DateValue | None) -> str | None:
    return value.start if value is not None else None


def formula_date(formula: FormulaPayload) -> str | None:
    if isinstance(formula, DateFormula):
        return date_start(formula.date)
    return None


def entry_date(entry: RollupEntry) -> str | None:
    if isinstance(entry, DateEntry):
        return date_start(entry.date)
    if isinstance(entry, FormulaEntry):
        return formula_date(entry.formula)
    return None


def entry_title(entry: RollupEntry) -> str | None:
    if isinstance(entry, TitleEntry):
        return first_text(entry.title)
    return None


def rollup_title(rollup: RollupPayload | None) -> str | None:
    """First non-empty Title entry of an array rollup, else None."""
    if not isinstance(rollup, ArrayRollup):
        return None
    for entry in rollup.array:
        title = entry_title(entry)
        if title is not None:
            return title
    return None


def rollup_date(rollup: RollupPayload | None) -> str | None:
    """First present date of an array rollup (direct or via formula), or the scalar date."""
    if isinstance(rollup, ArrayRollup):
        for entry in rollup.array:
            start = entry_date(entry)
            if start is not None:
                return start
        return None
    if isinstance(rollup, DateRollup):
        return date_start(rollup.date)
    return None
