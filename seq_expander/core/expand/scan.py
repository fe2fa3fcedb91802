from __future__ import annotations

import logging
from typing import Sequence

from seq_expander.core.config import DEFAULT_CONFIG, SeqConfig
from seq_expander.core.expand.substitute import repeat_section
from seq_expander.core.model import Group, LoopSpec, Node, is_punct


logger = logging.getLogger(__name__)


def scan_sections(
    fragment: Sequence[Node], loop: LoopSpec, *, config: SeqConfig = DEFAULT_CONFIG
) -> tuple[list[Node], bool]:
    """Replace every ``#( ... )*`` section, at any depth, by its expansion.

    Returns (rewritten fragment, found). Expanded content is emitted as-is and
    never rescanned. The three marker nodes must be direct siblings.
    """
    out: list[Node] = []
    found = False
    i = 0
    while i < len(fragment):
        section = _section_at(fragment, i, config)
        if section is not None:
            logger.debug("expanding repetition section (%d nodes)", len(section.children))
            out.extend(repeat_section(section.children, loop, config=config))
            found = True
            i += 3
            continue

        node = fragment[i]
        if isinstance(node, Group):
            children, child_found = scan_sections(node.children, loop, config=config)
            found = found or child_found
            out.append(Group(delimiter=node.delimiter, children=tuple(children), span=node.span))
        else:
            out.append(node)
        i += 1

    return out, found


def count_sections(fragment: Sequence[Node], *, config: SeqConfig = DEFAULT_CONFIG) -> int:
    """Count the sections ``scan_sections`` would expand, without expanding."""
    total = 0
    i = 0
    while i < len(fragment):
        if _section_at(fragment, i, config) is not None:
            total += 1
            i += 3
            continue
        node = fragment[i]
        if isinstance(node, Group):
            total += count_sections(node.children, config=config)
        i += 1
    return total


def _section_at(fragment: Sequence[Node], i: int, config: SeqConfig) -> Group | None:
    if i + 2 >= len(fragment):
        return None
    group = fragment[i + 1]
    if (
        is_punct(fragment[i], config.marker_open)
        and isinstance(group, Group)
        and group.delimiter == "parenthesis"
        and is_punct(fragment[i + 2], config.marker_close)
    ):
        return group
    return None
