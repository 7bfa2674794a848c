# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lowering engine: classified elements -> ordered argument list.

Interspersion (`i"..."`): merged text runs and escapes alternate in lexical
order; empty text runs are dropped, so `i"$x$y"` lowers to `x, y`.

Format string (`f"..."`): all text runs are concatenated into one leading
string constant, always present (even when empty), followed by every escape
in lexical order. Specifier-like text (`%s`, `?`) is opaque and kept
verbatim; no arity check is made.
"""

from __future__ import annotations

from typing import Sequence

from interpc.parser.ast import InterpolationKind

from .elements import (
	Element,
	ExpressionArgument,
	Group,
	GroupRole,
	LoweredArgument,
	NameRef,
	StringConstant,
	is_text,
)


def merge_text_runs(elements: Sequence[Element]) -> list[str | Element]:
	"""
	Collapse adjacent TextRun/EscapedDollar elements into plain strings.

	Escapes are kept as-is; every escape is preceded and followed by exactly
	one (possibly empty) string.
	"""
	merged: list[str | Element] = []
	pending: list[str] = []
	for element in elements:
		if is_text(element):
			pending.append(element.text)
			continue
		merged.append("".join(pending))
		pending.clear()
		merged.append(element)
	merged.append("".join(pending))
	return merged


def _escape_argument(element: Element) -> ExpressionArgument:
	if isinstance(element, NameRef):
		if element.node is None:
			raise AssertionError("interpolation lowering bug: unresolved name reference")
		return ExpressionArgument(node=element.node, source=element.identifier, role=GroupRole.EXPRESSION)
	if isinstance(element, Group):
		if element.role is None or element.node is None:
			raise AssertionError("interpolation lowering bug: unclassified group")
		return ExpressionArgument(node=element.node, source=element.raw, role=element.role)
	raise AssertionError(f"interpolation lowering bug: unexpected element {element!r}")


def lower_interspersion(elements: Sequence[Element]) -> list[LoweredArgument]:
	args: list[LoweredArgument] = []
	for item in merge_text_runs(elements):
		if isinstance(item, str):
			if item:
				args.append(StringConstant(item))
		else:
			args.append(_escape_argument(item))
	return args


def lower_format_string(elements: Sequence[Element]) -> list[LoweredArgument]:
	text: list[str] = []
	escapes: list[LoweredArgument] = []
	for item in merge_text_runs(elements):
		if isinstance(item, str):
			text.append(item)
		else:
			escapes.append(_escape_argument(item))
	return [StringConstant("".join(text)), *escapes]


def lower_elements(elements: Sequence[Element], kind: InterpolationKind) -> list[LoweredArgument]:
	if kind is InterpolationKind.INTERSPERSION:
		return lower_interspersion(elements)
	return lower_format_string(elements)


__all__ = ["merge_text_runs", "lower_interspersion", "lower_format_string", "lower_elements"]
