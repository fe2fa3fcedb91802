from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence, Union


Delimiter = Literal["parenthesis", "brace", "bracket", "none"]

DELIMITER_CHARS: dict[str, tuple[str, str]] = {
    "parenthesis": ("(", ")"),
    "brace": ("{", "}"),
    "bracket": ("[", "]"),
}


@dataclass(frozen=True)
class Span:
    line: int
    column: int


@dataclass(frozen=True)
class Ident:
    text: str
    span: Optional[Span] = field(default=None, compare=False)


@dataclass(frozen=True)
class Lit:
    text: str
    value: Optional[int] = None  # set only for integer literals
    span: Optional[Span] = field(default=None, compare=False)

    @classmethod
    def unsuffixed(cls, n: int, span: Optional[Span] = None) -> "Lit":
        return cls(text=str(n), value=n, span=span)


@dataclass(frozen=True)
class Punct:
    char: str
    # True when the next character in the source is also a symbol (``..``, ``..=``).
    joint: bool = field(default=False, compare=False)
    span: Optional[Span] = field(default=None, compare=False)


@dataclass(frozen=True)
class Group:
    delimiter: Delimiter
    children: tuple["Node", ...] = ()
    span: Optional[Span] = field(default=None, compare=False)


Token = Union[Ident, Lit, Punct]
Node = Union[Ident, Lit, Punct, Group]
Fragment = Sequence[Node]


@dataclass(frozen=True)
class LoopSpec:
    variable: Ident
    start: int
    end: int  # exclusive; start > end simply means no iterations

    @property
    def values(self) -> range:
        return range(self.start, self.end)

    @property
    def iterations(self) -> int:
        # len(range) overflows past sys.maxsize; bounds go up to 2**64 - 1.
        return max(0, self.end - self.start)


def is_punct(node: Node, char: str) -> bool:
    return isinstance(node, Punct) and node.char == char
