# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Element classifier: decides which grammar owns each `$( ... )` group and
attaches the parsed node to every escape.

Ordered first match over two pure fragment parsers:
1. the type grammar; a full parse that the expression grammar rejects makes
   the group a Type;
2. otherwise the expression grammar; a full parse makes it an Expression.
Text valid in both grammars (a bare name, `Vec!(int)`, `a[3]`) is owned by
the expression grammar; whether the name denotes a type is the checker's call.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional, Protocol, Sequence

from interpc.core.diagnostics import DiagnosticKind
from interpc.parser.ast import Located, Name, TypeArg, remap
from interpc.parser.fragments import FragmentParse

from .elements import Element, Group, GroupRole, InterpolationError, NameRef

Locate = Callable[[int], Located]


class FragmentParsers(Protocol):
	"""Type and expression grammars as pure functions (see `FragmentParse`)."""

	def parse_type(self, text: str, origin: Optional[Located] = None) -> FragmentParse:
		...

	def parse_expr(self, text: str, origin: Optional[Located] = None) -> FragmentParse:
		...


def group_locator(group: Group, locate: Locate) -> Callable[[Located], Located]:
	"""
	Map fragment-relative locations inside `group` to source locations.

	A fragment (line, column) is turned back into a body offset and looked up
	through `locate`, so host escapes earlier in the literal are accounted for.
	"""
	line_starts = [0] + [i + 1 for i, ch in enumerate(group.raw) if ch == "\n"]

	def _map(loc: Located) -> Located:
		if not 1 <= loc.line <= len(line_starts):
			return loc
		return locate(group.raw_start + line_starts[loc.line - 1] + loc.column - 1)

	return _map


def classify_group(group: Group, parsers: FragmentParsers, locate: Optional[Locate] = None) -> Group:
	raw = group.raw
	as_type = parsers.parse_type(raw)
	as_expr = parsers.parse_expr(raw)
	if as_type.covers(raw) and not as_expr.covers(raw):
		ty = remap(as_type.node, group_locator(group, locate)) if locate is not None else as_type.node
		loc = locate(group.raw_start) if locate is not None else getattr(ty, "loc", None) or Located(1, 1)
		return replace(group, role=GroupRole.TYPE, node=TypeArg(loc=loc, type_expr=ty))
	if as_expr.covers(raw):
		node = remap(as_expr.node, group_locator(group, locate)) if locate is not None else as_expr.node
		return replace(group, role=GroupRole.EXPRESSION, node=node)

	notes = []
	if as_expr.error:
		notes.append(f"as an expression: {as_expr.error}")
	elif not as_expr.covers(raw):
		notes.append(f"as an expression: unexpected text after offset {as_expr.consumed}")
	if as_type.error:
		notes.append(f"as a type: {as_type.error}")
	raise InterpolationError(
		DiagnosticKind.INVALID_GROUP_CONTENT,
		f"'$({raw})' is neither a complete type nor a complete expression",
		start=group.start,
		end=group.end,
		notes=notes,
	)


def classify_elements(
	elements: Sequence[Element],
	parsers: FragmentParsers,
	locate: Optional[Locate] = None,
) -> list[Element]:
	"""
	Resolve every escape: `NameRef` gets a `Name` node, `Group` gets a role and
	its parsed node. Text elements pass through. Stops at the first group that
	neither grammar accepts.
	"""
	out: list[Element] = []
	for element in elements:
		if isinstance(element, NameRef):
			loc = locate(element.start + 1) if locate is not None else Located(1, 1)
			out.append(replace(element, node=Name(loc=loc, ident=element.identifier)))
		elif isinstance(element, Group):
			out.append(classify_group(element, parsers, locate))
		else:
			out.append(element)
	return out


__all__ = ["FragmentParsers", "group_locator", "classify_group", "classify_elements"]
