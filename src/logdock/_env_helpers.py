from __future__ import annotations

import logging


def parse_bool(v: str | None, *, default: bool) -> bool:
    if v is None:
        return default

    s = v.strip().upper()
    if s in ('0', 'FALSE', 'NO', 'OFF', 'DISABLE'):
        return False

    if s in ('1', 'TRUE', 'YES', 'ON', 'ENABLE'):
        return True

    return default


def parse_float(v: str | None, *, default: float) -> float:
    if not v:
        return default
    try:
        return float(v.strip())
    except ValueError:
        return default


def parse_level(v: str | int | None, *, default: int) -> int:
    if v is None or v == '':
        return default
    if isinstance(v, int):
        return v
    s = v.strip().upper()
    if s.isdigit():
        return int(s)
    # noinspection PyUnresolvedReferences,PyProtectedMember
    return logging._nameToLevel.get(s, default)


def non_empty(v: str | None) -> str | None:
    if v is None:
        return None
    s = v.strip()
    return s or None
