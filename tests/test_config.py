from pathlib import Path

import pytest

from seq_expander.core.config import (
    DEFAULT_CONFIG,
    ConfigError,
    SeqConfig,
    load_and_merge,
    load_config_file,
    merged_config,
)


EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_defaults():
    assert DEFAULT_CONFIG == SeqConfig(marker_open="#", marker_close="*", fusion="~")
    assert load_and_merge(None) == DEFAULT_CONFIG


def test_load_config_file_overrides_all_symbols():
    cfg = load_and_merge(str(EXAMPLES / "custom-symbols.yaml"))
    assert cfg == SeqConfig(marker_open="@", marker_close="+", fusion="^")


def test_partial_override_keeps_other_defaults(tmp_path: Path):
    p = tmp_path / "seq.yaml"
    p.write_text('fusion: "$"\n', encoding="utf-8")
    assert load_config_file(p) == {"fusion": "$"}
    assert load_and_merge(str(p)) == SeqConfig(fusion="$")


def test_empty_file_means_defaults(tmp_path: Path):
    p = tmp_path / "seq.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config_file(p) == {}


@pytest.mark.parametrize(
    "content,needle",
    [
        ("- a\n- b\n", "mapping"),
        ("marker: '#'\n", "unknown config option"),
        ("fusion: '~~'\n", "single character"),
        ("fusion: 1\n", "single character"),
        ("fusion: a\n", "symbol character"),
        ("marker_open: '('\n", "symbol character"),
        ("marker_close: ' '\n", "symbol character"),
        ("fusion: '`'\n", "symbol character"),
        ("fusion: '§'\n", "symbol character"),
        ("marker_open: '.'\n", "symbol character"),
        ("marker_open: '\"'\n", "symbol character"),
    ],
)
def test_invalid_config_files(tmp_path: Path, content, needle):
    p = tmp_path / "seq.yaml"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError) as ei:
        load_config_file(p)
    assert needle in str(ei.value)


def test_symbols_must_be_distinct():
    with pytest.raises(ConfigError):
        merged_config({"marker_open": "~"})


def test_missing_config_file():
    with pytest.raises(FileNotFoundError):
        load_and_merge("does-not-exist.yaml")
