from seq_expander.core.config import SeqConfig
from seq_expander.core.expand.scan import count_sections, scan_sections
from seq_expander.core.io.lex import tokenize
from seq_expander.core.model import Ident, LoopSpec


LOOP = LoopSpec(variable=Ident("n"), start=0, end=2)


def test_single_section_keeps_prefix_and_suffix_once():
    got, found = scan_sections(tokenize("prefix; #( item(n); )* suffix;"), LOOP)
    assert found is True
    assert got == tokenize("prefix; item(0); item(1); suffix;")


def test_no_section_returns_identity_and_not_found():
    src = tokenize("f(n); { g(n) }")
    got, found = scan_sections(src, LOOP)
    assert found is False
    assert got == src


def test_section_nested_in_groups_is_found():
    got, found = scan_sections(tokenize("fn f() { match x { #( n => a~n, )* } }"), LOOP)
    assert found is True
    assert got == tokenize("fn f() { match x { 0 => a0, 1 => a1, } }")


def test_sibling_sections_expand_independently():
    got, found = scan_sections(tokenize("#( a~n )* mid #( [b~n] )*"), LOOP)
    assert found is True
    assert got == tokenize("a0 a1 mid [b0] [b1]")


def test_tokens_outside_sections_are_not_substituted():
    got, _ = scan_sections(tokenize("n x~n #( n )*"), LOOP)
    assert got == tokenize("n x~n 0 1")


def test_section_content_is_not_rescanned():
    got, found = scan_sections(tokenize("#( x #( y )* )*"), LOOP)
    assert found is True
    assert got == tokenize("x #( y )* x #( y )*")


def test_marker_needs_parenthesis_group():
    src = tokenize("#[ n ]* #{ n }*")
    got, found = scan_sections(src, LOOP)
    assert found is False
    assert got == src


def test_marker_across_group_boundary_does_not_match():
    src = tokenize("(a #) (n) *")
    _, found = scan_sections(src, LOOP)
    assert found is False


def test_marker_at_end_without_close_symbol():
    src = tokenize("a #( n )")
    _, found = scan_sections(src, LOOP)
    assert found is False


def test_empty_range_still_reports_found():
    empty = LoopSpec(variable=Ident("n"), start=5, end=5)
    got, found = scan_sections(tokenize("a #( n )* b"), empty)
    assert found is True
    assert got == tokenize("a b")


def test_custom_marker_symbols():
    cfg = SeqConfig(marker_open="@", marker_close="+")
    got, found = scan_sections(tokenize("@( n )+ #( n )*"), LOOP, config=cfg)
    assert found is True
    assert got == tokenize("0 1 #( n )*")


def test_count_sections():
    assert count_sections(tokenize("a #( x )* { #( y )* [ #( z #( w )* )* ] }")) == 3
    assert count_sections(tokenize("f(n);")) == 0
