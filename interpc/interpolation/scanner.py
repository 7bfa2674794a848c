# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Element scanner for interpolation literal bodies.

Splits a body into `TextRun`, `EscapedDollar`, `NameRef` and `Group`
elements in lexical order. The scanner does not know which lowering will run:
text runs are flushed before every escape even when empty, and merging is
left to the lowering engine.
"""

from __future__ import annotations

import string

from interpc.core.diagnostics import DiagnosticKind

from .balanced import extract_group
from .elements import Element, EscapedDollar, Group, InterpolationError, NameRef, TextRun

IDENT_START = frozenset(string.ascii_letters + "_")
IDENT_CONTINUE = IDENT_START | frozenset(string.digits)


def _describe(ch: str) -> str:
	if ch.isspace():
		return "whitespace"
	return repr(ch)


def scan_elements(body: str) -> list[Element]:
	"""
	Scan `body` into elements.

	Raises `InterpolationError` (InvalidEscape / UnbalancedGroup) at the first
	malformed escape; nothing after it is scanned.
	"""
	elements: list[Element] = []
	text_start = 0
	i = 0

	def _flush(upto: int) -> None:
		elements.append(TextRun(text=body[text_start:upto], start=text_start, end=upto))

	while i < len(body):
		if body[i] != "$":
			i += 1
			continue

		dollar = i
		nxt = body[i + 1] if i + 1 < len(body) else None
		if nxt == "$":
			_flush(dollar)
			elements.append(EscapedDollar(start=dollar, end=dollar + 2))
			i = dollar + 2
		elif nxt is not None and nxt in IDENT_START:
			_flush(dollar)
			j = dollar + 2
			while j < len(body) and body[j] in IDENT_CONTINUE:
				j += 1
			elements.append(NameRef(identifier=body[dollar + 1 : j], start=dollar, end=j))
			i = j
		elif nxt == "(":
			_flush(dollar)
			raw, close = extract_group(body, dollar + 2, opener=dollar)
			elements.append(Group(raw=raw, start=dollar, end=close + 1))
			i = close + 1
		elif nxt is None:
			raise InterpolationError(
				DiagnosticKind.INVALID_ESCAPE,
				"'$' at end of literal; write '$$' for a literal dollar sign",
				start=len(body),
				end=len(body) + 1,
				anchor=dollar,
			)
		else:
			raise InterpolationError(
				DiagnosticKind.INVALID_ESCAPE,
				f"'$' must be followed by '$', an identifier or '(', found {_describe(nxt)}",
				start=dollar + 1,
				end=dollar + 2,
				anchor=dollar,
			)
		text_start = i

	_flush(len(body))
	return elements


__all__ = ["scan_elements", "IDENT_START", "IDENT_CONTINUE"]
