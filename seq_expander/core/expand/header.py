from __future__ import annotations

import logging
from typing import Optional, Sequence

from seq_expander.core.errors import SeqSyntaxError
from seq_expander.core.model import Group, Ident, Lit, LoopSpec, Node, Punct, is_punct


logger = logging.getLogger(__name__)

# Bounds are machine-sized unsigned integers.
USIZE_MAX = 2**64 - 1

# Keywords (strict, reserved and weak-but-rejected) plus the "_" placeholder
# can never be bound as the loop variable.
RESERVED_NAMES: set[str] = {
    "_", "abstract", "as", "async", "await", "become", "box", "break",
    "const", "continue", "crate", "do", "dyn", "else", "enum", "extern",
    "false", "final", "fn", "for", "if", "impl", "in", "let", "loop",
    "macro", "match", "mod", "move", "mut", "override", "priv", "pub",
    "ref", "return", "Self", "self", "static", "struct", "super", "trait",
    "true", "try", "type", "typeof", "unsafe", "unsized", "use", "virtual",
    "where", "while", "yield",
}


def parse_header(
    tokens: Sequence[Node], *, file: Optional[str] = None
) -> tuple[LoopSpec, tuple[Node, ...]]:
    """Parse ``<ident> in <int>..<int> { <body> }`` (or ``..=``).

    Returns (loop, body children). The range is half-open: ``..=`` bumps the
    end by one. Raises SeqSyntaxError located at the first offending token.
    """
    cur = _Cursor(tokens, file)

    var = cur.next()
    if not isinstance(var, Ident):
        raise cur.error("E_EXPECTED_IDENT", "expected loop variable identifier", var)
    if var.text in RESERVED_NAMES:
        raise cur.error(
            "E_EXPECTED_IDENT", f"expected loop variable identifier, found keyword `{var.text}`", var
        )

    kw = cur.next()
    if not (isinstance(kw, Ident) and kw.text == "in"):
        raise cur.error("E_EXPECTED_IN", "expected `in` after loop variable", kw)

    start = _int_bound(cur)
    inclusive = _range_op(cur)
    end = _int_bound(cur)
    if inclusive:
        end += 1

    body = cur.next()
    if not (isinstance(body, Group) and body.delimiter == "brace"):
        raise cur.error("E_EXPECTED_BODY", "expected `{ ... }` body after range", body)

    extra = cur.next()
    if extra is not None:
        raise cur.error("E_TRAILING_TOKENS", "unexpected token after body", extra)

    loop = LoopSpec(variable=var, start=start, end=end)
    logger.debug(
        "parsed header: %s in %d..%d (%d iterations)",
        var.text, start, end, loop.iterations,
    )
    return loop, body.children


def _int_bound(cur: "_Cursor") -> int:
    tok = cur.next()
    if not isinstance(tok, Lit) or tok.value is None:
        raise cur.error("E_EXPECTED_INT", "expected non-negative integer literal", tok)
    if tok.value > USIZE_MAX:
        raise cur.error("E_INT_OVERFLOW", f"integer literal {tok.text} is out of range", tok)
    return tok.value


def _range_op(cur: "_Cursor") -> bool:
    """Consume ``..`` or ``..=``; return True for the inclusive form."""
    first = cur.next()
    if not (is_punct(first, ".") and isinstance(first, Punct) and first.joint):
        raise cur.error("E_EXPECTED_RANGE", "expected `..` or `..=`", first)
    second = cur.next()
    if not is_punct(second, "."):
        raise cur.error("E_EXPECTED_RANGE", "expected `..` or `..=`", second)

    # The "=" of "..=" may be separated by whitespace; a third "." may not.
    nxt = cur.peek()
    if nxt is not None and is_punct(nxt, "="):
        cur.next()
        return True
    if isinstance(second, Punct) and second.joint and nxt is not None and is_punct(nxt, "."):
        raise cur.error("E_EXPECTED_RANGE", "expected `..` or `..=`, found `...`", nxt)
    return False


class _Cursor:
    def __init__(self, tokens: Sequence[Node], file: Optional[str]) -> None:
        self.tokens = tokens
        self.file = file
        self.i = 0
        self.last: Optional[Node] = None

    def peek(self) -> Optional[Node]:
        return self.tokens[self.i] if self.i < len(self.tokens) else None

    def next(self) -> Optional[Node]:
        tok = self.peek()
        if tok is not None:
            self.i += 1
            self.last = tok
        return tok

    def error(self, code: str, message: str, at: Optional[Node]) -> SeqSyntaxError:
        if at is None:
            message = f"unexpected end of input, {message}"
            at = self.last
        span = at.span if at is not None else None
        return SeqSyntaxError(
            code=code,
            message=message,
            file=self.file,
            line=span.line if span else None,
            column=span.column if span else None,
        )
