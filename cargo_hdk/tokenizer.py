"""
Splitting of the ``--cmake`` option into individual CMake arguments
"""

from typing import List, Optional

QUOTES = ('"', "'")


def tokenize(raw: str) -> List[str]:
    """Split a CMake argument string into a list of arguments.

    Quoted sections (single or double quotes) may contain whitespace and are
    glued to whatever surrounds them, so ``'a'"b"`` is the single argument
    ``ab``. An unterminated quote swallows the rest of the string.

    The legacy form ``[-G Ninja]`` is still accepted: the brackets are
    stripped and the content is split on whitespace, ignoring quotes.
    """
    if not raw:
        return []

    if raw.startswith("[") and raw.endswith("]"):
        return raw[1:-1].split()

    tokens: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None

    for ch in raw:
        if quote is not None:
            if ch == quote:
                quote = None
            else:
                current.append(ch)
        elif ch in QUOTES:
            quote = ch
        elif ch.isspace():
            if current:
                tokens.append("".join(current))
            current = []
        else:
            current.append(ch)

    if current:
        tokens.append("".join(current))

    return tokens
