"""Word-wrapped Go doc comments.

A comment is built from fragments: plain text and Go identifiers. The
identifiers are resolved through a qualifier (normally
``OutputBuffer.qualify``, which also records the import), the result is
split into words and greedily packed into lines of at most
``COMMENT_WIDTH`` characters after the ``// `` marker. Widths count code
points, not bytes. A word longer than the budget gets a line of its own
and is never broken.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Union

from .schema import TypeReference

COMMENT_WIDTH = 97
COMMENT_MARKER = "//"


@dataclass(frozen=True)
class TextFragment:
    text: str


@dataclass(frozen=True)
class IdentifierFragment:
    ident: TypeReference


Fragment = Union[TextFragment, IdentifierFragment, str]
Qualifier = Callable[[TypeReference], str]


def _bare_name(ident: TypeReference) -> str:
    return ident.go_name


def render_fragments(fragments: Iterable[Fragment], qualify: Qualifier | None = None) -> str:
    """Concatenate fragments into one string, resolving identifiers."""
    qualify = qualify or _bare_name
    parts: list[str] = []
    for fragment in fragments:
        if isinstance(fragment, IdentifierFragment):
            parts.append(qualify(fragment.ident))
        elif isinstance(fragment, TextFragment):
            parts.append(fragment.text)
        else:
            parts.append(str(fragment))
    return "".join(parts)


def wrap_words(words: Iterable[str], width: int = COMMENT_WIDTH) -> list[str]:
    """Greedily pack words into lines no wider than ``width``."""
    lines: list[str] = []
    current: list[str] = []
    pos = 0
    for word in words:
        if pos > 0 and pos + 1 + len(word) > width:
            lines.append(" ".join(current))
            current = []
            pos = 0
        if pos > 0:
            pos += 1
        current.append(word)
        pos += len(word)
    if current:
        lines.append(" ".join(current))
    return lines


def wrap_comments(
    fragments: Iterable[Fragment],
    qualify: Qualifier | None = None,
    width: int = COMMENT_WIDTH,
) -> list[str]:
    """Render fragments as ``// ``-prefixed comment lines.

    Returns an empty list when the fragments contain no words.
    """
    words = render_fragments(fragments, qualify).split()
    return [f"{COMMENT_MARKER} {line}" for line in wrap_words(words, width)]
