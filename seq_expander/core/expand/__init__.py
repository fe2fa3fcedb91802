"""Sequence expansion engine.

Repeats a token-tree body once per value of an integer range, substituting
the loop variable (and fusing ``ident~var`` into new identifiers). Bodies
with ``#( ... )*`` sections repeat only those sections.
"""
