"""
Plain-text ``key=value`` encoding for per-layer metadata.

The layout is that of a Java ``.properties`` file written as UTF-8, so the
metadata objects stay human-readable and editable in a bucket browser.
"""

from datetime import datetime, timezone
from typing import Dict, Mapping, Optional

_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\f": "\\f",
    "=": "\\=",
    ":": "\\:",
}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t", "f": "\f"}


def _escape(text: str, is_key: bool) -> str:
    escaped = "".join(_ESCAPES.get(ch, ch) for ch in text)
    if is_key:
        escaped = escaped.replace(" ", "\\ ")
        if escaped[:1] in ("#", "!"):
            escaped = "\\" + escaped
    elif escaped.startswith(" "):
        escaped = "\\" + escaped
    return escaped


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1:i + 2]
        if nxt == "u":
            digits = text[i + 2:i + 6]
            if len(digits) != 4:
                raise ValueError(f"Malformed \\uXXXX escape: {text[i:i + 6]!r}")
            out.append(chr(int(digits, 16)))
            i += 6
            continue
        out.append(_UNESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str):
    """Join lines ending in an odd number of backslashes with the next line."""
    pending = None
    for raw in text.split("\n"):
        line = raw.rstrip("\r")
        if pending is not None:
            line = pending + line.lstrip(" \t\f")
            pending = None
        elif line.lstrip(" \t\f")[:1] in ("#", "!"):
            yield line
            continue
        if _ends_with_continuation(line):
            pending = line[:-1]
            continue
        yield line
    if pending is not None:
        yield pending


def _split(line: str) -> tuple:
    """Split a line at the first unescaped ``=`` or ``:``."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=:":
            return line[:i], line[i + 1:]
        i += 1
    return line, ""


def _rstrip_unescaped(text: str) -> str:
    while text.endswith((" ", "\t")) and not text[:-1].endswith("\\"):
        text = text[:-1]
    return text


def dumps(properties: Mapping[str, str]) -> bytes:
    """Serialize a string mapping, one sorted ``key=value`` line per entry."""
    lines = [f"#{datetime.now(timezone.utc).strftime('%a %b %d %H:%M:%S UTC %Y')}"]
    for key in sorted(properties):
        lines.append(f"{_escape(key, True)}={_escape(properties[key], False)}")
    return ("\n".join(lines) + "\n").encode("utf-8")


def loads(data: Optional[bytes]) -> Dict[str, str]:
    """Parse properties text, including Java-style ``\\uXXXX`` escapes and
    backslash line continuations. Empty or missing input is an empty mapping.
    """
    properties: Dict[str, str] = {}
    if not data:
        return properties
    for raw in _logical_lines(data.decode("utf-8")):
        line = raw.lstrip(" \t\f")
        if not line or line[0] in "#!":
            continue
        key, value = _split(line)
        properties[_unescape(_rstrip_unescaped(key))] = _unescape(value.lstrip(" \t\f"))
    return properties
