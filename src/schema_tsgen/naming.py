"""Type names and declaration lines."""

from __future__ import annotations


def subdoc_name(path: str, model_name: str = "") -> str:
    """Derive the type name of a sub-document from its dotted path.

    Each path segment is capitalized and appended to the owning model name.
    A trailing ``s`` is dropped, so ``friends`` under ``User`` becomes
    ``UserFriend`` (and ``address`` becomes ``Addres``).
    """
    name = model_name + "".join(segment[:1].upper() + segment[1:] for segment in path.split("."))
    if name.endswith("s"):
        name = name[:-1]
    return name


def make_line(key: str, value: str, is_optional: bool = False, newline: bool = True) -> str:
    """Render a single ``key: value;`` declaration line."""
    line = ""
    if key:
        line += key
        if is_optional:
            line += "?"
        line += ": "
    line += value + ";"
    if newline:
        line += "\n"
    return line
