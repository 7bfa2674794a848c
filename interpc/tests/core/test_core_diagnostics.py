# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from interpc.core.diagnostics import (
	MESSAGE_CODES,
	Diagnostic,
	DiagnosticKind,
	has_errors,
	interpolation_diagnostic,
)
from interpc.core.span import Span
from interpc.parser.ast import Located


@pytest.mark.parametrize("kind", list(DiagnosticKind))
def test_interpolation_diagnostic_prefixes_message(kind: DiagnosticKind) -> None:
	diag = interpolation_diagnostic(kind, "something went wrong", span=Span(line=1, column=2))
	assert diag.message == f"{MESSAGE_CODES[kind]}: something went wrong"
	assert diag.kind is kind
	assert diag.code == kind.value
	assert diag.phase == "interpolation"
	assert diag.severity == "error"


def test_unknown_code_has_no_kind() -> None:
	assert Diagnostic(message="x").kind is None
	assert Diagnostic(message="x", code="E-OTHER").kind is None


def test_missing_span_defaults_to_unknown() -> None:
	diag = Diagnostic(message="x", span=None)  # type: ignore[arg-type]
	assert diag.span == Span()


def test_has_errors_ignores_warnings() -> None:
	assert not has_errors([Diagnostic(message="w", severity="warning")])
	assert has_errors([Diagnostic(message="w", severity="warning"), Diagnostic(message="e")])


def test_span_from_located() -> None:
	span = Span.from_loc(Located(4, 7))
	assert (span.line, span.column) == (4, 7)
	assert span.raw == Located(4, 7)
	assert Span.from_loc(span) is span
	assert Span.from_loc(None) == Span()


def test_span_in_file_keeps_existing_file() -> None:
	assert Span(line=1).in_file("a.src").file == "a.src"
	assert Span(file="b.src").in_file("a.src").file == "b.src"
	assert Span(line=1).in_file(None).file is None


def test_span_describe() -> None:
	assert Span(file="a.src", line=3, column=9).describe() == "a.src:3:9"
	assert Span().describe() == "<input>:?:?"
