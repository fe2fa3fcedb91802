from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from seq_expander.core.io.lex import PUNCT_CHARS


@dataclass(frozen=True)
class SeqConfig:
    # Repetition marker is ``<marker_open>( ... )<marker_close>``.
    marker_open: str = "#"
    marker_close: str = "*"
    # Fusion is ``<ident><fusion><loop variable>``.
    fusion: str = "~"


DEFAULT_CONFIG = SeqConfig()

# "." spells ranges and "'" opens char literals, so neither can be a marker.
SYMBOL_CHARS = PUNCT_CHARS - {".", "'"}


class ConfigError(ValueError):
    pass


def load_config_file(path: str | Path) -> dict[str, str]:
    """Load symbol overrides from a YAML file.

    Format:
      marker_open: "#"
      marker_close: "*"
      fusion: "~"

    Every key is optional. Returns the validated overrides only.
    """
    p = Path(path)
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("config file must be a mapping of option -> symbol")

    known = {f.name for f in fields(SeqConfig)}
    out: dict[str, str] = {}
    for k, v in raw.items():
        if k not in known:
            raise ConfigError(f"unknown config option '{k}' (choose from: {', '.join(sorted(known))})")
        out[k] = _check_symbol(k, v)
    return out


def merged_config(overrides: dict[str, Any] | None = None) -> SeqConfig:
    """Return DEFAULT_CONFIG with optional overrides applied.

    The resulting three symbols must be pairwise distinct.
    """
    cfg = replace(DEFAULT_CONFIG, **overrides) if overrides else DEFAULT_CONFIG
    symbols = [cfg.marker_open, cfg.marker_close, cfg.fusion]
    if len(set(symbols)) != len(symbols):
        raise ConfigError(f"marker_open, marker_close and fusion must differ, got {symbols}")
    return cfg


def load_and_merge(config_file: str | None) -> SeqConfig:
    if not config_file:
        return merged_config()
    return merged_config(load_config_file(config_file))


def _check_symbol(key: str, value: Any) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise ConfigError(f"'{key}' must be a single character")
    if value not in SYMBOL_CHARS:
        raise ConfigError(
            f"'{key}' must be a symbol character, got {value!r} (choose from: {''.join(sorted(SYMBOL_CHARS))})"
        )
    return value
