# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation used by diagnostics.

A Span carries file/line/column for the start of the offending construct and,
when known, the end position (exclusive column). Parser location objects can
be wrapped via `from_loc`; the original object is kept in `raw`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any) -> "Span":
		"""
		Construct a Span from an existing parser/location object.

		If `loc` is already a Span, it is returned unchanged; otherwise the
		location fields are copied and the object itself is kept in `raw`.
		"""
		if loc is None:
			return cls()
		if isinstance(loc, cls):
			return loc
		return cls(
			file=getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def in_file(self, file: Optional[str]) -> "Span":
		"""Return a copy anchored to `file` unless a file is already recorded."""
		if file is None or self.file is not None:
			return self
		return replace(self, file=file)

	def describe(self) -> str:
		"""Render `file:line:column` with `?` for unknown parts."""
		file = self.file or "<input>"
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{file}:{line}:{column}"


__all__ = ["Span"]
