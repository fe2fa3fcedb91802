from seq_expander.core.config import SeqConfig
from seq_expander.core.expand.substitute import repeat_section, substitute
from seq_expander.core.io.lex import tokenize
from seq_expander.core.model import Ident, Lit, LoopSpec, Span


N = Ident("n")


def test_bare_variable_becomes_unsuffixed_literal():
    got = substitute(tokenize("f(n);"), N, 7)
    assert got == tokenize("f(7);")
    lit = got[1].children[0]
    assert lit == Lit("7", 7)


def test_substituted_literal_keeps_variable_span():
    got = substitute(tokenize("a n"), N, 4)
    assert got[1].span == Span(1, 3)


def test_fusion_builds_single_identifier():
    got = substitute(tokenize("const X~n: u8 = n;"), N, 3)
    assert got == tokenize("const X3: u8 = 3;")
    assert got[1].span == Span(1, 7)


def test_fusion_ignores_whitespace_between_tokens():
    assert substitute(tokenize("X ~ n"), N, 2) == [Ident("X2")]


def test_incomplete_fusion_window_is_copied():
    assert substitute(tokenize("X~"), N, 1) == tokenize("X~")
    assert substitute(tokenize("X~m"), N, 1) == tokenize("X~m")


def test_fusion_needs_identifier_prefix():
    assert substitute(tokenize("3~n"), N, 1) == tokenize("3~1")


def test_variable_as_fusion_prefix_is_plain_substitution():
    assert substitute(tokenize("n~n"), N, 5) == tokenize("5~5")


def test_groups_are_rewritten_recursively():
    got = substitute(tokenize("[a(n), {b~n}]"), N, 0)
    assert got == tokenize("[a(0), {b0}]")


def test_other_tokens_pass_through():
    src = tokenize('m + "n" + 1.5 - nn')
    assert substitute(src, N, 9) == src


def test_custom_fusion_symbol():
    cfg = SeqConfig(fusion="^")
    assert substitute(tokenize("X^n X~n"), N, 1, config=cfg) == tokenize("X1 X~1")


def test_repeat_section_concatenates_in_ascending_order():
    loop = LoopSpec(variable=N, start=3, end=5)
    assert repeat_section(tokenize("ident~n,"), loop) == tokenize("ident3, ident4,")


def test_repeat_section_empty_and_inverted_ranges():
    frag = tokenize("f(n);")
    assert repeat_section(frag, LoopSpec(variable=N, start=5, end=5)) == []
    assert repeat_section(frag, LoopSpec(variable=N, start=5, end=2)) == []
