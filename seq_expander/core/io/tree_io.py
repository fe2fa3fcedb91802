from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from seq_expander.core.errors import SeqLoadError
from seq_expander.core.io.lex import parse_int_literal, tokenize
from seq_expander.core.model import Group, Ident, Lit, Node, Punct, Span


DELIMITERS = ("parenthesis", "brace", "bracket", "none")


def load_invocation(path: str) -> list[Node]:
    """Load an invocation as a token list.

    - .seq: source text, lexed (lex errors propagate as SeqLexError)
    - .yaml/.yml/.json: a serialized token tree (see tree_to_data)
    """

    p = Path(path)
    if not p.exists():
        raise SeqLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))

    suffix = p.suffix.lower()
    if suffix not in {".seq", ".yaml", ".yml", ".json"}:
        raise SeqLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message="supported formats are .seq, .yaml/.yml and .json",
            file=str(p),
        )

    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise SeqLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    if suffix == ".seq":
        return tokenize(raw_text, file=str(p))

    try:
        if suffix == ".json":
            data = json.loads(raw_text)
        else:
            data = yaml.safe_load(raw_text)
    except Exception as e:
        code = "E_JSON_PARSE" if suffix == ".json" else "E_YAML_PARSE"
        raise SeqLoadError(code=code, message=str(e), file=str(p)) from e

    return tree_from_data(data, file=str(p))


def tree_to_data(nodes: Sequence[Node], *, spans: bool = False) -> list[dict[str, Any]]:
    """Convert nodes to plain lists/dicts, suitable for YAML/JSON."""
    return [_node_to_data(n, spans) for n in nodes]


def tree_from_data(data: Any, *, file: Optional[str] = None, path: str = "") -> list[Node]:
    """Inverse of tree_to_data. Raises SeqLoadError(E_INVALID_TREE) on bad shape."""
    if not isinstance(data, list):
        raise _invalid(f"{path or '<root>'}: expected a list of nodes", file)
    return [_node_from_data(raw, file, f"{path}[{i}]") for i, raw in enumerate(data)]


def dump_tree(nodes: Sequence[Node], path: str, *, fmt: str = "yaml", spans: bool = False) -> None:
    p = Path(path)
    if str(p.parent) not in (".", ""):
        p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(format_tree(nodes, fmt=fmt, spans=spans), encoding="utf-8")


def format_tree(nodes: Sequence[Node], *, fmt: str = "yaml", spans: bool = False) -> str:
    data = tree_to_data(nodes, spans=spans)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def _node_to_data(node: Node, spans: bool) -> dict[str, Any]:
    out: dict[str, Any]
    if isinstance(node, Ident):
        out = {"kind": "ident", "text": node.text}
    elif isinstance(node, Lit):
        out = {"kind": "literal", "text": node.text}
    elif isinstance(node, Punct):
        out = {"kind": "punct", "char": node.char}
        if node.joint:
            out["joint"] = True
    else:
        out = {
            "kind": "group",
            "delimiter": node.delimiter,
            "children": [_node_to_data(c, spans) for c in node.children],
        }
    if spans and node.span is not None:
        out["line"] = node.span.line
        out["column"] = node.span.column
    return out


def _node_from_data(raw: Any, file: Optional[str], path: str) -> Node:
    if not isinstance(raw, dict):
        raise _invalid(f"{path}: node must be a mapping", file)

    span: Optional[Span] = None
    line, column = raw.get("line"), raw.get("column")
    if isinstance(line, int) and isinstance(column, int):
        span = Span(line, column)

    kind = raw.get("kind")
    if kind == "ident":
        text = raw.get("text")
        if not isinstance(text, str) or not text:
            raise _invalid(f"{path}.text: ident text must be a non-empty string", file)
        return Ident(text=text, span=span)

    if kind == "literal":
        text = raw.get("text")
        if isinstance(text, int) and not isinstance(text, bool):
            text = str(text)
        if not isinstance(text, str) or not text:
            raise _invalid(f"{path}.text: literal text must be a non-empty string", file)
        return Lit(text=text, value=parse_int_literal(text), span=span)

    if kind == "punct":
        char = raw.get("char")
        if not isinstance(char, str) or len(char) != 1:
            raise _invalid(f"{path}.char: punct must be a single character", file)
        return Punct(char=char, joint=bool(raw.get("joint", False)), span=span)

    if kind == "group":
        delimiter = raw.get("delimiter")
        if delimiter not in DELIMITERS:
            raise _invalid(
                f"{path}.delimiter: must be one of {', '.join(DELIMITERS)}", file
            )
        children = tree_from_data(raw.get("children", []), file=file, path=f"{path}.children")
        return Group(delimiter=delimiter, children=tuple(children), span=span)

    raise _invalid(f"{path}.kind: unknown node kind {kind!r}", file)


def _invalid(message: str, file: Optional[str]) -> SeqLoadError:
    return SeqLoadError(code="E_INVALID_TREE", message=message, file=file)
