"""Pure text transforms for recovering JSON from model output.

Each stage is applied in a fixed order by the generator and can be tested on
its own:

1. strip_code_fence        - drop a surrounding markdown fence
2. extract_json_span       - cut narration before/after the JSON value
3. strip_comments          - remove // line comments
4. strip_trailing_commas   - remove commas directly before ] or }

salvage_truncated_array is the fallback when the cleaned text still does not
parse. It works on the raw text and keeps every complete leading object of an
array cut off by an output-length limit.
"""

import json
import re
from typing import Any

_FENCE_OPEN = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")

_CLOSING = {"[": "]", "{": "}"}


def strip_code_fence(text: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def extract_json_span(text: str) -> str:
    """Slice from the first [ or { to the last matching ] or }.

    Returns the text unchanged if no opening bracket or no matching closer
    is found.
    """
    starts = [i for i in (text.find("["), text.find("{")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    end = text.rfind(_CLOSING[text[start]])
    if end <= start:
        return text
    return text[start : end + 1]


def strip_comments(text: str) -> str:
    """Remove // comments outside string literals (up to end of line)."""
    out: list[str] = []
    in_string = False
    escaped = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif ch == "/" and i + 1 < n and text[i + 1] == "/":
            newline = text.find("\n", i)
            if newline == -1:
                break
            i = newline
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Remove commas followed only by whitespace before ] or }, outside strings."""
    out: list[str] = []
    in_string = False
    escaped = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            out.append(ch)
            i += 1
            continue

        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "]}":
                i += 1
                continue
        out.append(ch)
        i += 1

    return "".join(out)


def clean_json_text(raw: str) -> str:
    """Run the full cleanup pipeline in order."""
    text = strip_code_fence(raw)
    text = extract_json_span(text)
    text = strip_comments(text)
    return strip_trailing_commas(text)


def find_salvage_cut(raw: str) -> tuple[int, int] | None:
    """Locate the array start and the end of its last complete top-level object.

    Scans from the first '[' tracking brace depth and string/escape state.

    Returns:
        (start, cut) where raw[start:cut] is the array prefix ending right
        after the last complete object, or None if there is no '[', no
        complete object, or the array was closed (not truncated).
    """
    start = raw.find("[")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    cut: int | None = None

    for i in range(start + 1, len(raw)):
        ch = raw[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                cut = i + 1
        elif ch == "]" and depth == 0:
            # Array closed normally: nothing was truncated
            return None

    if cut is None:
        return None
    return start, cut


def salvage_truncated_array(raw: str) -> list[Any] | None:
    """Recover the complete leading objects of a truncated JSON array.

    Example:
        '[{"id":"a"},{"id":"b"},{"id":"c","ta' -> [{"id": "a"}, {"id": "b"}]

    Returns:
        The parsed list, or None if nothing could be salvaged.
    """
    found = find_salvage_cut(raw)
    if found is None:
        return None
    start, cut = found

    candidate = raw[start:cut].rstrip().rstrip(",") + "]"
    try:
        parsed = json.loads(strip_trailing_commas(candidate))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, list) else None
