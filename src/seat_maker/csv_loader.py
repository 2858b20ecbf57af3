"""CSV loading utilities."""
from __future__ import annotations

import math
from pathlib import Path
from typing import IO, Any, Dict, List, Optional

import pandas as pd

from .models import Guest, parse_list, parse_vip

# Canonical field names a column can map onto
FIELDS = (
    "Name", "First", "Last", "Group", "VIP", "Tag", "KeepApart",
    "KeepWith", "Dietary", "Notes", "Email", "Phone", "Ignore",
)

# Keyword rules, first match wins
_HEADER_RULES = (
    (("name",), "Name"),
    (("group", "tag"), "Group"),
    (("note",), "Notes"),
    (("email",), "Email"),
    (("phone",), "Phone"),
    (("vip",), "VIP"),
    (("keepapart",), "KeepApart"),
    (("keepwith",), "KeepWith"),
    (("diet",), "Dietary"),
)


def default_field(header: str) -> str:
    """Field a header maps onto when no explicit mapping is given.

    "First" and "Last" (optionally followed by "Name") match exactly. Every
    other field matches when its keyword appears anywhere in the header, so
    "Guest Name" is a name and "Email Address" an email.
    """
    key = str(header).strip().lower().replace(" ", "").replace("_", "")
    if key in ("first", "firstname"):
        return "First"
    if key in ("last", "lastname"):
        return "Last"
    for keywords, target in _HEADER_RULES:
        if any(k in key for k in keywords):
            return target
    return "Ignore"


def _cell(value: object) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value).strip()


def title_case(name: str) -> str:
    return " ".join(part[:1].upper() + part[1:] for part in name.lower().split())


def load_guests(
    path: Path | str | IO[Any],
    mapping: Optional[Dict[str, str]] = None,
    auto_clean_names: bool = True,
    tags_from_extras: bool = True,
) -> List[Guest]:
    """Load guests from a CSV guest list.

    ``mapping`` maps header names onto one of ``FIELDS`` and overrides the
    default header matching. With ``auto_clean_names`` names are title cased
    and case-insensitive duplicates are skipped. With ``tags_from_extras``
    values of ignored columns become tags.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    mapping = mapping or {}
    for header, target in mapping.items():
        if target not in FIELDS:
            raise ValueError(f"Unknown field for column {header}: {target}")
    targets = {col: mapping.get(col, default_field(col)) for col in df.columns}
    if not {"Name", "First", "Last"} & set(targets.values()):
        raise ValueError("Guest list needs a Name column or First/Last columns")

    guests: List[Guest] = []
    seen = set()
    for _, row in df.iterrows():
        values: Dict[str, List[str]] = {}
        extras: List[str] = []
        for col, target in targets.items():
            value = _cell(row[col])
            if not value:
                continue
            if target == "Ignore":
                extras.append(value)
            else:
                values.setdefault(target, []).append(value)

        def single(field_name: str) -> Optional[str]:
            found = values.get(field_name)
            return found[-1] if found else None

        def many(field_name: str) -> List[str]:
            return [part for v in values.get(field_name, []) for part in parse_list(v)]

        name = single("Name") or " ".join(p for p in (single("First"), single("Last")) if p)
        if auto_clean_names:
            name = title_case(name.strip())
        if not name:
            continue
        if auto_clean_names:
            if name.lower() in seen:
                continue
            seen.add(name.lower())

        tags = many("Tag")
        if tags_from_extras:
            tags.extend(extras)
        guests.append(
            Guest(
                name=name,
                is_vip=parse_vip(single("VIP")),
                group=single("Group"),
                tags=tags,
                keep_apart_tags=many("KeepApart"),
                keep_with_names=many("KeepWith"),
                dietary=many("Dietary"),
                notes=single("Notes"),
                email=single("Email"),
                phone=single("Phone"),
            )
        )
    return guests


def guests_from_names(names: List[str]) -> List[Guest]:
    """Build guests from a pasted list, one name per line."""
    return [Guest(name=n.strip()) for n in names if n and n.strip()]
