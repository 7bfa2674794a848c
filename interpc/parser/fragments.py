# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fragment parsers over the host grammar.

The interpolation classifier needs two pure functions, "parse this text as a
type" and "parse this text as an expression", that report success plus how
much of the text was consumed instead of raising. `HostFragmentParsers`
adapts the lark fragment parser to that shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from lark.exceptions import UnexpectedInput

from .ast import Located
from .parser import LiteralDecodeError, parse_expr_fragment, parse_type_fragment


@dataclass(frozen=True)
class FragmentParse:
	"""Outcome of one fragment parse: `node` on success, `error` text otherwise."""

	node: Any = None
	consumed: int = 0
	error: Optional[str] = None

	@property
	def ok(self) -> bool:
		return self.error is None

	def covers(self, text: str) -> bool:
		"""True when the parse succeeded and only whitespace is left over."""
		return self.ok and not text[self.consumed :].strip()


def _failure(text: str, err: Exception) -> FragmentParse:
	pos = getattr(err, "pos_in_stream", None)
	if pos is None or pos < 0:
		pos = len(text)
	# Keep only the headline; lark appends multi-line context we don't need.
	headline = str(err).strip().splitlines()[0] if str(err).strip() else type(err).__name__
	return FragmentParse(node=None, consumed=pos, error=headline)


class HostFragmentParsers:
	"""Default `FragmentParsers` backed by the host grammar."""

	def parse_type(self, text: str, origin: Optional[Located] = None) -> FragmentParse:
		try:
			node = parse_type_fragment(text, origin)
		except (UnexpectedInput, LiteralDecodeError) as err:
			return _failure(text, err)
		return FragmentParse(node=node, consumed=len(text))

	def parse_expr(self, text: str, origin: Optional[Located] = None) -> FragmentParse:
		try:
			node = parse_expr_fragment(text, origin)
		except (UnexpectedInput, LiteralDecodeError) as err:
			return _failure(text, err)
		return FragmentParse(node=node, consumed=len(text))


__all__ = ["FragmentParse", "HostFragmentParsers"]
