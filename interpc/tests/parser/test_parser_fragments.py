# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from interpc.parser import FragmentParse, HostFragmentParsers
from interpc.parser.ast import Binary, Located, TypeExpr

PARSERS = HostFragmentParsers()


def test_full_expression_parse_covers_text() -> None:
	result = PARSERS.parse_expr(" a + b ")
	assert result.ok
	assert result.covers(" a + b ")
	assert isinstance(result.node, Binary)


def test_failed_parse_reports_headline_and_offset() -> None:
	result = PARSERS.parse_expr("a b")
	assert not result.ok
	assert result.node is None
	assert result.consumed == 2
	assert "\n" not in result.error


def test_empty_text_fails_at_end() -> None:
	result = PARSERS.parse_type("")
	assert not result.ok
	assert result.consumed == 0


def test_type_parse_with_origin() -> None:
	result = PARSERS.parse_type("int[4]", Located(3, 9))
	assert isinstance(result.node, TypeExpr)
	assert result.node.loc == Located(3, 9)


def test_bad_host_escape_in_fragment_is_a_failure() -> None:
	result = PARSERS.parse_expr('f("\\q")')
	assert not result.ok


def test_covers_allows_only_trailing_whitespace() -> None:
	assert FragmentParse(node=object(), consumed=1).covers("a  ")
	assert not FragmentParse(node=object(), consumed=1).covers("a b")
	assert not FragmentParse(consumed=3, error="boom").covers("abc")
