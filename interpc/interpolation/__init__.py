# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Interpolation literal lowering.

`lower_literal` is the whole pass for one literal:

    scan -> classify -> validate context -> lower

It is a pure function of its inputs. The first failure aborts the literal and
is reported as exactly one diagnostic; no partial argument list is produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from interpc.core.diagnostics import Diagnostic, interpolation_diagnostic
from interpc.core.span import Span
from interpc.parser.ast import InterpolationLiteral, Located
from interpc.parser.fragments import HostFragmentParsers

from .classify import FragmentParsers, classify_elements
from .context import LiteralContext, Position, validate_context
from .elements import (
	Element,
	ExpressionArgument,
	GroupRole,
	InterpolationError,
	LoweredArgument,
	StringConstant,
)
from .lowering import lower_elements
from .scanner import scan_elements


class BodyLocator:
	"""Maps body offsets of one literal to source locations."""

	def __init__(self, literal: InterpolationLiteral, file: Optional[str] = None) -> None:
		self.literal = literal
		self.file = file

	def located(self, offset: int) -> Located:
		positions = self.literal.positions
		line, column = positions[min(max(offset, 0), len(positions) - 1)]
		return Located(line, column)

	def span(self, start: Optional[int], end: Optional[int]) -> Span:
		if start is None:
			begin = self.literal.loc
			stop = self.literal.end
		else:
			begin = self.located(start)
			last = len(self.literal.positions) - 1
			if end is None or end <= start:
				end = start + 1
			if end > last:
				# Past the closing quote: end right after it.
				stop = self.literal.end
			else:
				stop = self.located(end)
		return Span(
			file=self.file,
			line=begin.line,
			column=begin.column,
			end_line=stop.line,
			end_column=stop.column,
		)

	def diagnostic(self, err: InterpolationError) -> Diagnostic:
		notes = list(err.notes)
		if err.anchor is not None:
			at = self.located(err.anchor)
			notes.insert(0, f"escape starts at {at.line}:{at.column}")
		return interpolation_diagnostic(err.kind, str(err), span=self.span(err.start, err.end), notes=notes)


@dataclass(frozen=True)
class LoweringResult:
	"""`args` is None exactly when `diagnostics` holds the literal's error."""

	args: Optional[tuple[LoweredArgument, ...]]
	diagnostics: tuple[Diagnostic, ...] = ()
	elements: tuple[Element, ...] = ()

	@property
	def ok(self) -> bool:
		return self.args is not None


_DEFAULT_PARSERS = HostFragmentParsers()


def lower_literal(
	literal: InterpolationLiteral,
	context: LiteralContext,
	parsers: Optional[FragmentParsers] = None,
	*,
	file: Optional[str] = None,
) -> LoweringResult:
	"""Lower one interpolation literal appearing in `context`."""
	locator = BodyLocator(literal, file)
	try:
		elements = scan_elements(literal.body)
		elements = classify_elements(elements, parsers or _DEFAULT_PARSERS, locator.located)
		validate_context(literal.kind, context)
		args = lower_elements(elements, literal.kind)
	except InterpolationError as err:
		return LoweringResult(args=None, diagnostics=(locator.diagnostic(err),))
	return LoweringResult(args=tuple(args), elements=tuple(elements))


__all__ = [
	"BodyLocator",
	"LoweringResult",
	"lower_literal",
	"LiteralContext",
	"Position",
	"FragmentParsers",
	"StringConstant",
	"ExpressionArgument",
	"LoweredArgument",
	"GroupRole",
	"InterpolationError",
]
