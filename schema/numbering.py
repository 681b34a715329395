"""
schema.numbering - Display part numbers: construction and parsing.

Format:  PREFIX-T-NNNN
         PREFIX = project part-number prefix, T = P (part) or A (assembly),
         NNNN = part_number zero-padded to 4 digits (wider numbers are kept).

The formatted string is presentation only.  It does not encode the parent,
so two children of different parents may format identically.
"""

from __future__ import annotations

import re
from typing import Optional

import config

_TYPE_LETTERS = {"part": "P", "assembly": "A"}
_LETTER_TYPES = {v: k for k, v in _TYPE_LETTERS.items()}

_PARSE_RE = re.compile(r"^(?P<prefix>.+)-(?P<letter>[PA])-(?P<number>\d+)$")


def normalize_prefix(prefix: str) -> str:
    """Prefixes are upper-cased by convention."""
    return (prefix or "").strip().upper()


def format_part_number(prefix: str, part_type: str, number: int) -> str:
    """Assemble 'PREFIX-P-0001' / 'PREFIX-A-0100'."""
    letter = _TYPE_LETTERS.get(part_type)
    if letter is None:
        raise ValueError(f"unknown part type: {part_type!r}")
    return f"{prefix}-{letter}-{int(number):0{config.PART_NUMBER_WIDTH}d}"


def parse_part_number(text: str) -> Optional[dict]:
    """
    Parse 'PREFIX-T-NNNN' → {prefix, type, part_number}.
    Returns None on any format violation.
    """
    m = _PARSE_RE.match((text or "").strip().upper())
    if not m:
        return None
    return {
        "prefix": m.group("prefix"),
        "type": _LETTER_TYPES[m.group("letter")],
        "part_number": int(m.group("number")),
    }


def validate_prefix(prefix: str) -> Optional[str]:
    """Return an error message if the prefix is unusable, else None."""
    p = normalize_prefix(prefix)
    if not p:
        return "Part number prefix is empty"
    if len(p) > 50:
        return "Part number prefix exceeds 50 characters"
    if any(ch.isspace() for ch in p):
        return f"Part number prefix contains whitespace: {p!r}"
    return None
