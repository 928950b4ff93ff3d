from __future__ import annotations

import re
from typing import Iterable

# Discord snowflakes are 17-19 digits today.
USER_ID_RE = re.compile(r"^\d{17,19}$")
_SPLIT_RE = re.compile(r"\r?\n")


def parse_id_list(text: str | None) -> list[int]:
    """Parse a newline separated id list.

    Blank lines and anything that is not a user id are dropped silently;
    duplicates keep their first position.
    """
    seen: set[int] = set()
    out: list[int] = []
    for raw in _SPLIT_RE.split(text or ""):
        s = raw.strip()
        if not USER_ID_RE.match(s):
            continue
        uid = int(s)
        if uid in seen:
            continue
        seen.add(uid)
        out.append(uid)
    return out


def format_id_list(ids: Iterable[int | str]) -> str:
    return "\n".join(str(i) for i in parse_id_list("\n".join(str(i) for i in ids)))


def add_id(text: str | None, user_id: int) -> tuple[str, bool]:
    ids = parse_id_list(text)
    if user_id in ids or not USER_ID_RE.match(str(user_id)):
        return format_id_list(ids), False
    ids.append(user_id)
    return format_id_list(ids), True


def remove_id(text: str | None, user_id: int) -> tuple[str, bool]:
    ids = parse_id_list(text)
    if user_id not in ids:
        return format_id_list(ids), False
    return format_id_list(i for i in ids if i != user_id), True
