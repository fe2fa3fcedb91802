from __future__ import annotations

import re
from typing import Optional

from seq_expander.core.errors import SeqLexError
from seq_expander.core.model import Delimiter, Group, Ident, Lit, Node, Punct, Span


# Tokenizer for brace-language source text. Produces the generic token tree:
# identifiers, literals, single-character punctuation, delimited groups.
# Comments and whitespace are dropped.

PUNCT_CHARS = set("~!@#$%^&*-+=|\\:;,.<>/?'")

_OPEN: dict[str, Delimiter] = {"(": "parenthesis", "{": "brace", "[": "bracket"}
_CLOSE: dict[str, Delimiter] = {")": "parenthesis", "}": "brace", "]": "bracket"}

IDENT_RE = re.compile(r"[^\W\d]\w*")
NUMBER_RE = re.compile(
    r"""
    (?P<digits>
        0[xX][0-9a-fA-F_]+
      | 0[oO][0-7_]+
      | 0[bB][01_]+
      | [0-9][0-9_]*
        (?P<frac>\.[0-9][0-9_]*)?
        (?P<exp>[eE][+-]?[0-9_]+)?
    )
    (?P<suffix>[^\W\d]\w*)?
    """,
    re.VERBOSE,
)
RAW_STRING_RE = re.compile(r'b?r(?P<hashes>#*)"')

_FLOAT_SUFFIXES = {"f32", "f64"}


def parse_int_literal(text: str) -> Optional[int]:
    """Return the integer value of an integer literal's text, else None.

    Accepts radix prefixes, ``_`` separators and a trailing type suffix
    (``0xff_u8`` -> 255). Float literals return None.
    """
    m = NUMBER_RE.fullmatch(text)
    if not m or m.group("frac") or m.group("exp"):
        return None
    suffix = m.group("suffix") or ""
    if suffix in _FLOAT_SUFFIXES:
        return None
    digits = m.group("digits").replace("_", "")
    base = 10
    if digits[:2].lower() in ("0x", "0o", "0b"):
        base = {"x": 16, "o": 8, "b": 2}[digits[1].lower()]
        digits = digits[2:]
    if not digits:
        return None
    return int(digits, base)


def tokenize(source: str, *, file: Optional[str] = None) -> list[Node]:
    """Lex ``source`` into a list of top-level nodes.

    Raises SeqLexError on unterminated literals/comments and unbalanced or
    mismatched delimiters.
    """
    return _Lexer(source, file).run()


class _Lexer:
    def __init__(self, source: str, file: Optional[str]) -> None:
        self.src = source
        self.file = file
        self.pos = 0
        self.line = 1
        self.col = 1

    def run(self) -> list[Node]:
        top: list[Node] = []
        # (delimiter, children, span of the opening char)
        stack: list[tuple[Delimiter, list[Node], Span]] = []

        while True:
            self._skip_trivia()
            if self.pos >= len(self.src):
                break
            span = Span(self.line, self.col)
            ch = self.src[self.pos]
            out = stack[-1][1] if stack else top

            if ch in _OPEN:
                self._advance(1)
                stack.append((_OPEN[ch], [], span))
                continue

            if ch in _CLOSE:
                if not stack:
                    raise self._error("E_UNBALANCED_DELIMITER", f"unexpected closing '{ch}'", span)
                delim, children, open_span = stack.pop()
                if delim != _CLOSE[ch]:
                    raise self._error(
                        "E_MISMATCHED_DELIMITER",
                        f"closing '{ch}' does not match {delim} opened at {open_span.line}:{open_span.column}",
                        span,
                    )
                self._advance(1)
                parent = stack[-1][1] if stack else top
                parent.append(Group(delimiter=delim, children=tuple(children), span=open_span))
                continue

            out.append(self._token(ch, span))

        if stack:
            delim, _, open_span = stack[-1]
            raise self._error("E_UNBALANCED_DELIMITER", f"unclosed {delim}", open_span)
        return top

    def _token(self, ch: str, span: Span) -> Node:
        raw = RAW_STRING_RE.match(self.src, self.pos)
        if raw:
            return self._raw_string(raw, span)
        if ch == '"' or (ch == "b" and self.src.startswith('b"', self.pos)):
            return self._string(span)
        if ch == "b" and self.src.startswith("b'", self.pos):
            self._advance(1)
            lit = self._char_or_punct(span)
            if isinstance(lit, Lit):
                return Lit(text="b" + lit.text, span=span)
            raise self._error("E_UNTERMINATED_CHAR", "unterminated byte literal", span)

        m = IDENT_RE.match(self.src, self.pos)
        if m:
            self._advance(len(m.group(0)))
            return Ident(text=m.group(0), span=span)

        m = NUMBER_RE.match(self.src, self.pos)
        if m and ch.isdigit():
            text = m.group(0)
            self._advance(len(text))
            return Lit(text=text, value=parse_int_literal(text), span=span)

        if ch == "'":
            return self._char_or_punct(span)

        if ch in PUNCT_CHARS:
            self._advance(1)
            return Punct(char=ch, joint=self._peek() in PUNCT_CHARS, span=span)

        raise self._error("E_UNEXPECTED_CHAR", f"unexpected character {ch!r}", span)

    def _string(self, span: Span) -> Lit:
        start = self.pos
        if self.src[self.pos] == "b":
            self._advance(1)
        self._advance(1)  # opening quote
        while self.pos < len(self.src):
            c = self.src[self.pos]
            if c == "\\":
                self._advance(2)
                continue
            self._advance(1)
            if c == '"':
                return Lit(text=self.src[start:self.pos], span=span)
        raise self._error("E_UNTERMINATED_STRING", "unterminated string literal", span)

    def _raw_string(self, m: re.Match[str], span: Span) -> Lit:
        start = self.pos
        closing = '"' + m.group("hashes")
        end = self.src.find(closing, m.end())
        if end < 0:
            raise self._error("E_UNTERMINATED_STRING", "unterminated raw string literal", span)
        self._advance(end + len(closing) - start)
        return Lit(text=self.src[start:self.pos], span=span)

    def _char_or_punct(self, span: Span) -> Node:
        # 'a' and '\n' are char literals; 'a (no closing quote) is a lifetime
        # marker, lexed as a joint punct followed by an identifier.
        start = self.pos
        if self._peek(1) == "\\":
            end = self.src.find("'", self.pos + 3)
            newline = self.src.find("\n", self.pos)
            if end < 0 or (0 <= newline < end):
                raise self._error("E_UNTERMINATED_CHAR", "unterminated character literal", span)
            self._advance(end + 1 - start)
            return Lit(text=self.src[start:self.pos], span=span)
        if self._peek(1) not in ("", "\n", "'") and self._peek(2) == "'":
            self._advance(3)
            return Lit(text=self.src[start:self.pos], span=span)
        self._advance(1)
        return Punct(char="'", joint=True, span=span)

    def _skip_trivia(self) -> None:
        while self.pos < len(self.src):
            c = self.src[self.pos]
            if c.isspace():
                self._advance(1)
            elif self.src.startswith("//", self.pos):
                end = self.src.find("\n", self.pos)
                self._advance((len(self.src) if end < 0 else end) - self.pos)
            elif self.src.startswith("/*", self.pos):
                self._block_comment()
            else:
                return

    def _block_comment(self) -> None:
        span = Span(self.line, self.col)
        depth = 0
        while self.pos < len(self.src):
            if self.src.startswith("/*", self.pos):
                depth += 1
                self._advance(2)
            elif self.src.startswith("*/", self.pos):
                depth -= 1
                self._advance(2)
                if depth == 0:
                    return
            else:
                self._advance(1)
        raise self._error("E_UNTERMINATED_COMMENT", "unterminated block comment", span)

    def _peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.src[i] if i < len(self.src) else ""

    def _advance(self, n: int) -> None:
        for c in self.src[self.pos:self.pos + n]:
            if c == "\n":
                self.line += 1
                self.col = 1
            else:
                self.col += 1
        self.pos = min(self.pos + n, len(self.src))

    def _error(self, code: str, message: str, span: Span) -> SeqLexError:
        return SeqLexError(code=code, message=message, file=self.file, line=span.line, column=span.column)
