from __future__ import annotations

from typing import Sequence

from seq_expander.core.config import DEFAULT_CONFIG, SeqConfig
from seq_expander.core.model import Group, Ident, Lit, LoopSpec, Node, is_punct


def repeat_section(
    fragment: Sequence[Node], loop: LoopSpec, *, config: SeqConfig = DEFAULT_CONFIG
) -> list[Node]:
    """Concatenate one substituted copy of ``fragment`` per loop value, ascending.

    An empty or inverted range yields an empty list.
    """
    out: list[Node] = []
    for n in loop.values:
        out.extend(substitute(fragment, loop.variable, n, config=config))
    return out


def substitute(
    fragment: Sequence[Node], variable: Ident, n: int, *, config: SeqConfig = DEFAULT_CONFIG
) -> list[Node]:
    """Rewrite one copy of ``fragment`` for the concrete value ``n``.

    - ``<variable>`` becomes the unsuffixed literal ``n``
    - ``<ident> ~ <variable>`` fuses into the single identifier ``<ident>n``
    - groups keep their delimiter and are rewritten recursively
    - everything else is copied as-is
    """
    out: list[Node] = []
    i = 0
    while i < len(fragment):
        node = fragment[i]

        if isinstance(node, Ident):
            if node.text == variable.text:
                out.append(Lit.unsuffixed(n, span=node.span))
            elif _is_fusion(fragment, i, variable, config):
                out.append(Ident(text=f"{node.text}{n}", span=node.span))
                i += 2
            else:
                out.append(node)
        elif isinstance(node, Group):
            children = substitute(node.children, variable, n, config=config)
            out.append(Group(delimiter=node.delimiter, children=tuple(children), span=node.span))
        else:
            out.append(node)

        i += 1

    return out


def _is_fusion(fragment: Sequence[Node], i: int, variable: Ident, config: SeqConfig) -> bool:
    if i + 2 >= len(fragment):
        return False
    tail = fragment[i + 2]
    return (
        is_punct(fragment[i + 1], config.fusion)
        and isinstance(tail, Ident)
        and tail.text == variable.text
    )
