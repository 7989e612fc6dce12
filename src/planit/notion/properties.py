# src/planit/notion/properties.py

"""
Decoding of Notion page property payloads.

Every property Notion returns is an object tagged with a "type" field, e.g.:

    {"type": "checkbox", "checkbox": true}
    {"type": "rollup", "rollup": {"type": "array", "array": [...]}}

We decode into small frozen dataclasses (one per variant) and always return
something: unknown tags and malformed bodies become the Unknown* variant of the
respective union. Nothing in this module raises on bad input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class RichText:
    plain_text: str


@dataclass(frozen=True, slots=True)
class DateValue:
    start: str


# ---- formula ----


@dataclass(frozen=True, slots=True)
class DateFormula:
    date: DateValue | None


@dataclass(frozen=True, slots=True)
class UnknownFormula:
    pass


FormulaPayload: TypeAlias = DateFormula | UnknownFormula


# ---- rollup entries (items of a rollup "array") ----


@dataclass(frozen=True, slots=True)
class TitleEntry:
    title: tuple[RichText, ...]


@dataclass(frozen=True, slots=True)
class DateEntry:
    date: DateValue | None


@dataclass(frozen=True, slots=True)
class FormulaEntry:
    formula: FormulaPayload


@dataclass(frozen=True, slots=True)
class UnknownEntry:
    pass


RollupEntry: TypeAlias = TitleEntry | DateEntry | FormulaEntry | UnknownEntry


# ---- rollup payload ----


@dataclass(frozen=True, slots=True)
class ArrayRollup:
    array: tuple[RollupEntry, ...]


@dataclass(frozen=True, slots=True)
class DateRollup:
    date: DateValue | None


@dataclass(frozen=True, slots=True)
class UnknownRollup:
    pass


RollupPayload: TypeAlias = ArrayRollup | DateRollup | UnknownRollup


# ---- top-level property ----


@dataclass(frozen=True, slots=True)
class TitleProperty:
    title: tuple[RichText, ...]


@dataclass(frozen=True, slots=True)
class DateProperty:
    date: DateValue | None


@dataclass(frozen=True, slots=True)
class CheckboxProperty:
    checkbox: bool


@dataclass(frozen=True, slots=True)
class RollupProperty:
    # Notion sends "rollup": null for relations that point nowhere.
    rollup: RollupPayload | None


@dataclass(frozen=True, slots=True)
class UnknownProperty:
    pass


PropertyPayload: TypeAlias = (
    TitleProperty | DateProperty | CheckboxProperty | RollupProperty | UnknownProperty
)

UNKNOWN_PROPERTY = UnknownProperty()
UNKNOWN_ROLLUP = UnknownRollup()
UNKNOWN_ENTRY = UnknownEntry()
UNKNOWN_FORMULA = UnknownFormula()


class _Malformed(Exception):
    """Internal signal: a recognized tag carried a body we cannot use."""


def _tag(raw: Any) -> str | None:
    if not isinstance(raw, Mapping):
        return None
    tag = raw.get("type")
    return tag if isinstance(tag, str) else None


def _rich_text(raw: Any) -> tuple[RichText, ...]:
    if not isinstance(raw, list):
        raise _Malformed("rich text is not a list")
    # Fragments without plain_text (e.g. unresolved mentions) are dropped, not fatal.
    return tuple(
        RichText(plain_text=frag["plain_text"])
        for frag in raw
        if isinstance(frag, Mapping) and isinstance(frag.get("plain_text"), str)
    )


def _date_value(raw: Any) -> DateValue | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise _Malformed("date is not an object")
    start = raw.get("start")
    if not isinstance(start, str):
        raise _Malformed("date has no start")
    return DateValue(start=start)


def decode_formula(raw: Any) -> FormulaPayload:
    try:
        if _tag(raw) == "date":
            return DateFormula(date=_date_value(raw.get("date")))
    except _Malformed:
        pass
    return UNKNOWN_FORMULA


def decode_rollup_entry(raw: Any) -> RollupEntry:
    tag = _tag(raw)
    try:
        if tag == "title":
            return TitleEntry(title=_rich_text(raw.get("title")))
        if tag == "date":
            return DateEntry(date=_date_value(raw.get("date")))
        if tag == "formula":
            formula = raw.get("formula")
            if not isinstance(formula, Mapping):
                return UNKNOWN_ENTRY
            return FormulaEntry(formula=decode_formula(formula))
    except _Malformed:
        pass
    return UNKNOWN_ENTRY


def decode_rollup(raw: Any) -> RollupPayload:
    tag = _tag(raw)
    try:
        if tag == "array":
            items = raw.get("array")
            if not isinstance(items, list):
                return UNKNOWN_ROLLUP
            # Entries are independent: one bad entry does not spoil the rest.
            return ArrayRollup(array=tuple(decode_rollup_entry(item) for item in items))
        if tag == "date":
            return DateRollup(date=_date_value(raw.get("date")))
    except _Malformed:
        pass
    return UNKNOWN_ROLLUP


def decode_property(raw: Any) -> PropertyPayload:
    """
    Decode one page property payload.

    Total: returns UnknownProperty for anything we do not understand
    (non-objects, missing/unknown "type", malformed body).
    """
    tag = _tag(raw)
    try:
        if tag == "title":
            return TitleProperty(title=_rich_text(raw.get("title")))
        if tag == "date":
            return DateProperty(date=_date_value(raw.get("date")))
        if tag == "checkbox":
            value = raw.get("checkbox")
            # bool only: 0/1 from a hand-built payload is not a checkbox.
            if not isinstance(value, bool):
                return UNKNOWN_PROPERTY
            return CheckboxProperty(checkbox=value)
        if tag == "rollup":
            inner = raw.get("rollup")
            if inner is None:
                return RollupProperty(rollup=None)
            return RollupProperty(rollup=decode_rollup(inner))
    except _Malformed:
        pass
    return UNKNOWN_PROPERTY
