# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Balanced-span extraction for `$( ... )` groups.

The group ends at the `)` that brings the nesting depth back to zero. String,
character and raw-string literals and comments inside the group are skipped
with the host lexer's own rules, so parentheses (and `$`) inside them are
plain group text.
"""

from __future__ import annotations

from typing import Optional

from interpc.core.diagnostics import DiagnosticKind

from .elements import InterpolationError


def _unbalanced(opener: int, end: int, message: str) -> InterpolationError:
	return InterpolationError(DiagnosticKind.UNBALANCED_GROUP, message, start=opener, end=end)


def _skip_escaped(body: str, i: int, quote: str, what: str, opener: int) -> int:
	"""Skip a `"`- or `'`-quoted literal starting at `i`; return the offset after it."""
	j = i + 1
	while j < len(body):
		c = body[j]
		if c == "\\":
			j += 2
			continue
		if c == quote:
			return j + 1
		j += 1
	raise _unbalanced(opener, len(body), f"unterminated {what} inside '$(' group")


def _skip_raw(body: str, i: int, opener: int) -> int:
	close = body.find("`", i + 1)
	if close == -1:
		raise _unbalanced(opener, len(body), "unterminated raw string inside '$(' group")
	return close + 1


def _skip_block_comment(body: str, i: int, opener: int) -> int:
	close = body.find("*/", i + 2)
	if close == -1:
		raise _unbalanced(opener, len(body), "unterminated block comment inside '$(' group")
	return close + 2


def _skip_line_comment(body: str, i: int) -> int:
	newline = body.find("\n", i + 2)
	return len(body) if newline == -1 else newline + 1


def extract_group(body: str, start: int, *, opener: Optional[int] = None) -> tuple[str, int]:
	"""
	Find the `)` closing a group whose content begins at `start`.

	Returns `(raw, close)` where `raw == body[start:close]` and `body[close]`
	is the matching `)`. `opener` is the offset of the `$` reported when the
	group never closes (defaults to `start - 2`).
	"""
	if opener is None:
		opener = start - 2
	depth = 1
	i = start
	while i < len(body):
		ch = body[i]
		if ch == "\"":
			i = _skip_escaped(body, i, "\"", "string literal", opener)
			continue
		if ch == "'":
			i = _skip_escaped(body, i, "'", "character literal", opener)
			continue
		if ch == "`":
			i = _skip_raw(body, i, opener)
			continue
		if body.startswith("//", i):
			i = _skip_line_comment(body, i)
			continue
		if body.startswith("/*", i):
			i = _skip_block_comment(body, i, opener)
			continue
		if ch == "(":
			depth += 1
		elif ch == ")":
			depth -= 1
			if depth == 0:
				return body[start:i], i
		i += 1
	raise _unbalanced(opener, len(body), "'$(' group is missing its closing ')'")


__all__ = ["extract_group"]
