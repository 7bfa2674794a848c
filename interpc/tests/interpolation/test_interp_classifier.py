# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from typing import Optional

import pytest

from interpc.core.diagnostics import DiagnosticKind
from interpc.interpolation.classify import classify_elements, classify_group, group_locator
from interpc.interpolation.elements import Group, GroupRole, InterpolationError, NameRef
from interpc.interpolation.scanner import scan_elements
from interpc.parser import HostFragmentParsers
from interpc.parser.ast import Binary, Call, Located, Name, TemplateInstance, TypeArg
from interpc.parser.fragments import FragmentParse
from interpc.printer import format_type

PARSERS = HostFragmentParsers()


def _classify(raw: str) -> Group:
	return classify_group(Group(raw=raw, start=0, end=len(raw) + 3), PARSERS)


@pytest.mark.parametrize("raw", ["int", "int*", "string[]", "int[4]", "const(char)[]", "immutable(Vec!(int))"])
def test_type_only_text_is_a_type(raw: str) -> None:
	group = _classify(raw)
	assert group.role is GroupRole.TYPE
	assert isinstance(group.node, TypeArg)
	assert format_type(group.node.type_expr) == raw


def test_expression_is_an_expression() -> None:
	group = _classify("apples + bananas")
	assert group.role is GroupRole.EXPRESSION
	assert isinstance(group.node, Binary)


@pytest.mark.parametrize("raw", ["x", "std.Vec", "Vec!(int)", "a[3]"])
def test_text_valid_in_both_grammars_goes_to_expression(raw: str) -> None:
	group = _classify(raw)
	assert group.role is GroupRole.EXPRESSION
	assert not isinstance(group.node, TypeArg)


def test_template_instance_is_parsed_as_expression_node() -> None:
	group = _classify("Vec!(int)")
	assert isinstance(group.node, TemplateInstance)


def test_surrounding_whitespace_is_allowed() -> None:
	group = _classify("  f(1)  ")
	assert group.role is GroupRole.EXPRESSION
	assert isinstance(group.node, Call)


@pytest.mark.parametrize("raw", ["", "   ", "a +", "1 2", "int +", "let x = 1"])
def test_incomplete_group_is_invalid_content(raw: str) -> None:
	with pytest.raises(InterpolationError) as excinfo:
		classify_group(Group(raw=raw, start=4, end=4 + len(raw) + 3), PARSERS)
	err = excinfo.value
	assert err.kind is DiagnosticKind.INVALID_GROUP_CONTENT
	assert (err.start, err.end) == (4, 4 + len(raw) + 3)
	assert any(note.startswith("as an expression") for note in err.notes)


def test_name_refs_get_identifier_nodes_located_in_source() -> None:
	elements = scan_elements("hi $name")

	def locate(offset: int) -> Located:
		return Located(3, 10 + offset)

	resolved = classify_elements(elements, PARSERS, locate)
	ref = resolved[1]
	assert isinstance(ref, NameRef)
	assert isinstance(ref.node, Name)
	assert ref.node.ident == "name"
	assert ref.node.loc == Located(3, 14)


def test_group_nodes_are_relocated_to_the_group() -> None:
	elements = scan_elements("v=$(a + b)")

	def locate(offset: int) -> Located:
		return Located(7, 20 + offset)

	group = classify_elements(elements, PARSERS, locate)[1]
	assert isinstance(group.node, Binary)
	# Group text starts at body offset 4.
	assert group.node.left.loc == Located(7, 24)
	assert group.node.right.loc == Located(7, 28)


class _RecordingParsers:
	"""Parsers that accept fixed texts, recording call order."""

	def __init__(self, types: set[str], exprs: set[str]) -> None:
		self.types = types
		self.exprs = exprs
		self.calls: list[tuple[str, str]] = []

	def parse_type(self, text: str, origin: Optional[Located] = None) -> FragmentParse:
		self.calls.append(("type", text))
		if text in self.types:
			return FragmentParse(node=Name(loc=Located(1, 1), ident=f"T:{text}"), consumed=len(text))
		return FragmentParse(consumed=0, error="not a type")

	def parse_expr(self, text: str, origin: Optional[Located] = None) -> FragmentParse:
		self.calls.append(("expr", text))
		if text in self.exprs:
			return FragmentParse(node=Name(loc=Located(1, 1), ident=f"E:{text}"), consumed=len(text))
		return FragmentParse(consumed=0, error="not an expression")


def test_type_grammar_is_consulted_first() -> None:
	parsers = _RecordingParsers(types={"T"}, exprs=set())
	group = classify_group(Group(raw="T", start=0, end=4), parsers)
	assert parsers.calls[0] == ("type", "T")
	assert group.role is GroupRole.TYPE


def test_partial_parse_is_not_accepted() -> None:
	class _Prefix(_RecordingParsers):
		def parse_expr(self, text: str, origin: Optional[Located] = None) -> FragmentParse:
			return FragmentParse(node=Name(loc=Located(1, 1), ident="a"), consumed=1)

	with pytest.raises(InterpolationError) as excinfo:
		classify_group(Group(raw="a b", start=0, end=6), _Prefix(types=set(), exprs=set()))
	assert excinfo.value.kind is DiagnosticKind.INVALID_GROUP_CONTENT


def test_group_locator_goes_through_body_offsets() -> None:
	group = Group(raw="a +\n b", start=3, end=12)
	columns = {offset: Located(2, 40 + 2 * offset) for offset in range(20)}

	def locate(offset: int) -> Located:
		return columns[offset]

	mapper = group_locator(group, locate)
	# raw_start is 5: "a" is body offset 5, "b" (line 2, column 2) is offset 10.
	assert mapper(Located(1, 1)) == Located(2, 50)
	assert mapper(Located(2, 2)) == Located(2, 60)
	assert mapper(Located(0, 0)) == Located(0, 0)
