# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic structure shared by the parser, the interpolation core and the
driver.

Diagnostics are plain records collected into lists and handed back to the
caller; nothing in the pipeline prints or drops them. The driver is the only
place that renders them (human-readable or JSON).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .span import Span


class DiagnosticKind(str, Enum):
	"""Error taxonomy for interpolation literals."""

	INVALID_ESCAPE = "InvalidEscape"
	UNBALANCED_GROUP = "UnbalancedGroup"
	INVALID_GROUP_CONTENT = "InvalidGroupContent"
	ILLEGAL_CONTEXT = "IllegalContext"
	# Host escape sequence inside the literal token could not be decoded.
	INVALID_LITERAL = "InvalidLiteral"


# Stable message prefixes; tests and tooling match on these.
MESSAGE_CODES: dict[DiagnosticKind, str] = {
	DiagnosticKind.INVALID_ESCAPE: "E-INTERP-INVALID-ESCAPE",
	DiagnosticKind.UNBALANCED_GROUP: "E-INTERP-UNBALANCED-GROUP",
	DiagnosticKind.INVALID_GROUP_CONTENT: "E-INTERP-GROUP-CONTENT",
	DiagnosticKind.ILLEGAL_CONTEXT: "E-INTERP-CONTEXT",
	DiagnosticKind.INVALID_LITERAL: "E-INTERP-LITERAL",
}


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Phase label: "parser" for host syntax errors, "interpolation" for the
	# literal scanner/classifier/context gate.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	@property
	def kind(self) -> Optional[DiagnosticKind]:
		"""Interpolation error kind, or None for diagnostics outside the taxonomy."""
		if self.code is None:
			return None
		try:
			return DiagnosticKind(self.code)
		except ValueError:
			return None


def interpolation_diagnostic(
	kind: DiagnosticKind,
	message: str,
	*,
	span: Span,
	notes: list[str] | None = None,
) -> Diagnostic:
	"""Build an interpolation-phase error with the stable message prefix."""
	return Diagnostic(
		message=f"{MESSAGE_CODES[kind]}: {message}",
		code=kind.value,
		phase="interpolation",
		severity="error",
		span=span,
		notes=list(notes or []),
	)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
	return any(d.severity == "error" for d in diagnostics)


__all__ = ["Diagnostic", "DiagnosticKind", "MESSAGE_CODES", "interpolation_diagnostic", "has_errors"]
