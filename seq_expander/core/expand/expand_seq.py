from __future__ import annotations

import logging
from typing import Optional, Sequence

from seq_expander.core.config import DEFAULT_CONFIG, SeqConfig
from seq_expander.core.expand.header import parse_header
from seq_expander.core.expand.scan import scan_sections
from seq_expander.core.expand.substitute import repeat_section
from seq_expander.core.io.lex import tokenize
from seq_expander.core.model import Node


logger = logging.getLogger(__name__)


def expand_seq(
    tokens: Sequence[Node],
    *,
    file: Optional[str] = None,
    config: SeqConfig = DEFAULT_CONFIG,
) -> list[Node]:
    """Expand one ``<var> in <a>..<b> { body }`` invocation.

    Two strategies, tried in order:

    - sections: when the body contains at least one ``#( ... )*`` section
      (at any depth), the body is emitted once with only those sections
      repeated.
    - whole body: otherwise the full body is repeated once per value, as if
      it were wrapped in a single section.

    Header errors raise SeqSyntaxError; nothing after parsing can fail.
    """
    loop, body = parse_header(tokens, file=file)

    expanded, found = scan_sections(body, loop, config=config)
    if found:
        return expanded

    logger.debug("no repetition section found, repeating the whole body")
    return repeat_section(body, loop, config=config)


def expand_source(
    source: str,
    *,
    file: Optional[str] = None,
    config: SeqConfig = DEFAULT_CONFIG,
) -> list[Node]:
    """Lex ``source`` and expand it. Raises SeqLexError or SeqSyntaxError."""
    return expand_seq(tokenize(source, file=file), file=file, config=config)
