# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Interpolation body elements and lowered arguments.

Every element records its body offsets `[start, end)`. `source` is the
element's literal source form; joining the sources of a scanned body gives the
body back unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Union

from interpc.core.diagnostics import DiagnosticKind


class GroupRole(str, Enum):
	TYPE = "type"
	EXPRESSION = "expression"


@dataclass(frozen=True)
class TextRun:
	text: str
	start: int
	end: int

	@property
	def source(self) -> str:
		return self.text


@dataclass(frozen=True)
class EscapedDollar:
	"""`$$`: one literal `$` once text runs are merged."""

	start: int
	end: int

	text = "$"

	@property
	def source(self) -> str:
		return "$$"


@dataclass(frozen=True)
class NameRef:
	identifier: str
	start: int
	end: int
	# Bare identifier expression; attached by the classifier.
	node: Any = None

	@property
	def source(self) -> str:
		return f"${self.identifier}"


@dataclass(frozen=True)
class Group:
	"""
	`$( ... )` escape.

	`raw` is the exact text between the outer parentheses. `role` and `node`
	stay unset until the classifier decides which grammar owns the text.
	"""

	raw: str
	start: int
	end: int
	role: Optional[GroupRole] = None
	node: Any = None

	@property
	def source(self) -> str:
		return f"$({self.raw})"

	@property
	def raw_start(self) -> int:
		"""Body offset of the first character after `$(`."""
		return self.start + 2


Element = Union[TextRun, EscapedDollar, NameRef, Group]


def is_text(element: Element) -> bool:
	return isinstance(element, (TextRun, EscapedDollar))


def body_source(elements: Sequence[Element]) -> str:
	return "".join(e.source for e in elements)


@dataclass(frozen=True)
class StringConstant:
	text: str


@dataclass(frozen=True)
class ExpressionArgument:
	"""
	Lowered escape.

	`source` is the escape's source text (the identifier, or the group text
	between the parentheses); `node` is the parsed AST handed downstream.
	"""

	node: Any
	source: str
	role: GroupRole = GroupRole.EXPRESSION


LoweredArgument = Union[StringConstant, ExpressionArgument]


class InterpolationError(ValueError):
	"""
	First failure while processing one literal.

	Offsets are body offsets; `start=None` means the whole literal token.
	`anchor` optionally names a related body offset (e.g. the `$` that began an
	invalid escape) reported as a note.
	"""

	def __init__(
		self,
		kind: DiagnosticKind,
		message: str,
		*,
		start: Optional[int] = None,
		end: Optional[int] = None,
		anchor: Optional[int] = None,
		notes: Optional[list[str]] = None,
	) -> None:
		super().__init__(message)
		self.kind = kind
		self.start = start
		self.end = end
		self.anchor = anchor
		self.notes = list(notes or [])


__all__ = [
	"GroupRole",
	"TextRun",
	"EscapedDollar",
	"NameRef",
	"Group",
	"Element",
	"is_text",
	"body_source",
	"StringConstant",
	"ExpressionArgument",
	"LoweredArgument",
	"InterpolationError",
]
