"""Utility to recover the suggestions JSON object from reviewer prose."""

from __future__ import annotations

import json

_DECODER = json.JSONDecoder()
_KEY = '"suggestions"'


def extract_suggestions_object(text: str) -> dict:
    """Return the JSON object in ``text`` that carries a ``suggestions`` key.

    Tries in order:
    1. Decoding an object at each ``{`` in the text, first match wins, so
       braces in the surrounding prose (or a fenced block) are skipped
    2. Repair of a truncated object (missing closing brackets/braces),
       starting from the nearest ``{`` before the key

    Raises ValueError when no such object can be recovered.
    """
    if not text or _KEY not in text:
        raise ValueError('Response has no "suggestions" object')

    starts = [i for i, ch in enumerate(text) if ch == "{"]
    for pos in starts:
        try:
            data, _ = _DECODER.raw_decode(text, pos)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) and "suggestions" in data:
            return data

    key_pos = text.rfind(_KEY)
    for pos in reversed([i for i in starts if i < key_pos]):
        data = _repair_truncated(text[pos:])
        if data is not None:
            return data

    raise ValueError(f"Could not extract suggestions JSON from text: {text[:200]}...")


def _loads_object(candidate: str) -> dict | None:
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if isinstance(data, dict) and "suggestions" in data:
        return data
    return None


def _close_open(candidate: str) -> str:
    """Append the closers for every string, bracket and brace still open."""
    closers: list[str] = []
    in_string = False
    escaped = False
    for ch in candidate:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            closers.append("}")
        elif ch == "[":
            closers.append("]")
        elif ch in "}]" and closers:
            closers.pop()
    if in_string:
        closed = (candidate[:-1] if escaped else candidate) + '"'
    else:
        closed = candidate.rstrip().rstrip(",")
    return closed + "".join(reversed(closers))


def _repair_truncated(candidate: str) -> dict | None:
    """Close the strings, brackets and braces left open by a cut-off response."""
    candidate = candidate.rstrip().removesuffix("```").rstrip()
    data = _loads_object(_close_open(candidate))
    if data is not None:
        return data

    # Cut back to the end of the last complete element and close again
    for cut in range(len(candidate) - 1, 0, -1):
        ch = candidate[cut]
        if ch == ",":
            data = _loads_object(_close_open(candidate[:cut]))
        elif ch in "}]":
            data = _loads_object(_close_open(candidate[: cut + 1]))
        else:
            continue
        if data is not None:
            return data
    return None
