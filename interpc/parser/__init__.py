# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Host parser front door.

Parses host source into the AST and converts parse-time failures into
parser-phase diagnostics so callers never see raw lark exceptions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from lark.exceptions import UnexpectedInput

from interpc.core.diagnostics import MESSAGE_CODES, Diagnostic, DiagnosticKind
from interpc.core.span import Span

from . import ast as parser_ast
from . import parser as _parser
from .fragments import FragmentParse, HostFragmentParsers


def _span_in_file(file: Optional[str], loc: object | None) -> Span:
	"""Anchor a parser location to `file` (AST locations do not carry one)."""
	if loc is None:
		return Span(file=file)
	return Span.from_loc(loc).in_file(file)


def parse_source(source: str, *, file: Optional[str] = None) -> tuple[Optional[parser_ast.Program], list[Diagnostic]]:
	"""
	Parse host source text.

	Returns `(program, [])` on success and `(None, [diagnostic])` on the first
	syntax or literal-decoding error.
	"""
	try:
		prog = _parser.parse_program(source)
	except _parser.LiteralDecodeError as err:
		kind = DiagnosticKind.INVALID_LITERAL
		return None, [
			Diagnostic(
				message=f"{MESSAGE_CODES[kind]}: {err}",
				code=kind.value,
				phase="parser",
				severity="error",
				span=_span_in_file(file, err.loc),
			)
		]
	except UnexpectedInput as err:
		span = Span(
			file=file,
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
			raw=err,
		)
		return None, [Diagnostic(message=str(err).strip(), phase="parser", severity="error", span=span)]
	return prog, []


def parse_file(path: Path) -> tuple[Optional[parser_ast.Program], list[Diagnostic]]:
	return parse_source(path.read_text(), file=str(path))


__all__ = [
	"parser_ast",
	"parse_source",
	"parse_file",
	"FragmentParse",
	"HostFragmentParsers",
]
