# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Context validation for interpolation literals.

A literal lowers to several arguments, so it may only sit directly in an
argument list:
- a call's arguments (both kinds),
- a template instantiation's arguments (both kinds),
- a `mixin(...)` code-injection construct's arguments (interspersion only).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from interpc.core.diagnostics import DiagnosticKind
from interpc.parser.ast import InterpolationKind

from .elements import InterpolationError


class Position(str, Enum):
	CALL_ARGUMENT = "call argument"
	TEMPLATE_ARGUMENT = "template argument"
	CODE_INJECTION_ARGUMENT = "mixin argument"
	OTHER = "other"


@dataclass(frozen=True)
class LiteralContext:
	"""Where a literal appears. `detail` names an OTHER position for messages."""

	position: Position
	detail: str = ""

	@classmethod
	def call_argument(cls) -> "LiteralContext":
		return cls(Position.CALL_ARGUMENT)

	@classmethod
	def template_argument(cls) -> "LiteralContext":
		return cls(Position.TEMPLATE_ARGUMENT)

	@classmethod
	def code_injection_argument(cls) -> "LiteralContext":
		return cls(Position.CODE_INJECTION_ARGUMENT)

	@classmethod
	def other(cls, detail: str) -> "LiteralContext":
		return cls(Position.OTHER, detail)

	def describe(self) -> str:
		if self.position is Position.OTHER:
			return self.detail or "this position"
		return self.position.value


def validate_context(kind: InterpolationKind, context: LiteralContext) -> None:
	"""Raise `InterpolationError(IllegalContext)` unless `context` admits `kind`."""
	if context.position in (Position.CALL_ARGUMENT, Position.TEMPLATE_ARGUMENT):
		return
	if context.position is Position.CODE_INJECTION_ARGUMENT:
		if kind is InterpolationKind.INTERSPERSION:
			return
		raise InterpolationError(
			DiagnosticKind.ILLEGAL_CONTEXT,
			"format-string literal cannot be passed to 'mixin'; use an i\"...\" literal",
		)
	raise InterpolationError(
		DiagnosticKind.ILLEGAL_CONTEXT,
		f"{kind.label} literal is not allowed as {context.describe()}; "
		"it may only appear directly in a call, template or mixin argument list",
	)


__all__ = ["Position", "LiteralContext", "validate_context"]
