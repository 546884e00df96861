"""
Typed lookups into loosely-typed JSON values.

Every reader takes a parsed JSON value (anything json.loads can return), a key,
and a default. A missing key, a non-object container, or a value of the wrong
JSON type all yield the default; nothing here raises.

Note that JSON booleans decode to Python bools, which are ints; get_u64 must
not accept them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


def get_object(value: Any, key: str) -> Optional[Dict[str, Any]]:
    if not isinstance(value, dict):
        return None
    found = value.get(key)
    return found if isinstance(found, dict) else None


def get_array(value: Any, key: str) -> Optional[List[Any]]:
    if not isinstance(value, dict):
        return None
    found = value.get(key)
    return found if isinstance(found, list) else None


def get_str(value: Any, key: str, default: str) -> str:
    if not isinstance(value, dict):
        return default
    found = value.get(key)
    return found if isinstance(found, str) else default


def get_bool(value: Any, key: str, default: bool = False) -> bool:
    if not isinstance(value, dict):
        return default
    found = value.get(key)
    return found if isinstance(found, bool) else default


def get_u64(value: Any, key: str, default: int = 0) -> int:
    if not isinstance(value, dict):
        return default
    found = value.get(key)
    if isinstance(found, bool) or not isinstance(found, int):
        return default
    if found < 0 or found >= 1 << 64:
        return default
    return found
