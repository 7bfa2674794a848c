# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from interpc.parser import parse_source, parser_ast as ast
from interpc.parser.parser import (
	LiteralDecodeError,
	decode_literal_body,
	parse_expr_fragment,
	parse_interpolation_literal,
)


def test_decode_plain_body_positions_are_straight() -> None:
	text, positions = decode_literal_body("ab", ast.Located(2, 5))
	assert text == "ab"
	assert positions == ((2, 5), (2, 6), (2, 7))


@pytest.mark.parametrize(
	("raw", "expected"),
	[
		("\\n", "\n"),
		("\\t", "\t"),
		("\\\\", "\\"),
		('\\"', '"'),
		("\\'", "'"),
		("\\x41", "A"),
		("\\u{263A}", "☺"),
		("\\0", "\0"),
	],
)
def test_decode_host_escapes(raw: str, expected: str) -> None:
	text, positions = decode_literal_body(raw, ast.Located(1, 1))
	assert text == expected
	assert positions[0] == (1, 1)
	assert positions[-1] == (1, 1 + len(raw))


def test_escape_widths_shift_later_positions() -> None:
	text, positions = decode_literal_body("\\t$x", ast.Located(1, 3))
	assert text == "\t$x"
	assert positions == ((1, 3), (1, 5), (1, 6), (1, 7))


def test_newline_in_body_starts_a_new_line() -> None:
	_text, positions = decode_literal_body("a\nb", ast.Located(4, 10))
	assert positions == ((4, 10), (4, 11), (5, 1), (5, 2))


@pytest.mark.parametrize("raw", ["\\q", "\\x4", "\\xZZ", "\\u{}", "\\u{110000}", "\\u263A", "tail\\"])
def test_bad_host_escape_raises_with_location(raw: str) -> None:
	with pytest.raises(LiteralDecodeError) as excinfo:
		decode_literal_body(raw, ast.Located(3, 7))
	assert excinfo.value.loc == ast.Located(3, 7 + raw.index("\\"))


def test_interpolation_literal_kinds() -> None:
	spread = parse_interpolation_literal('i"a $b"')
	packed = parse_interpolation_literal('f"a $b"')
	assert spread.kind is ast.InterpolationKind.INTERSPERSION
	assert packed.kind is ast.InterpolationKind.FORMAT_STRING
	assert spread.body == packed.body == "a $b"


def test_interpolation_literal_positions_track_source() -> None:
	literal = parse_interpolation_literal('i"x\\ty"')
	assert literal.body == "x\ty"
	assert literal.positions == ((1, 3), (1, 4), (1, 6), (1, 7))
	assert literal.end == ast.Located(1, 8)


def test_fragment_origin_shifts_literal_positions() -> None:
	literal = parse_expr_fragment('i"x"', ast.Located(5, 10))
	assert isinstance(literal, ast.InterpolationLiteral)
	assert literal.loc == ast.Located(5, 10)
	assert literal.positions == ((5, 12), (5, 13))


def test_interpolation_body_keeps_dollars_for_the_scanner() -> None:
	literal = parse_interpolation_literal('i"$$ $(f(\\"x\\"))"')
	assert literal.body == '$$ $(f("x"))'


def test_non_literal_is_rejected() -> None:
	with pytest.raises(ValueError):
		parse_interpolation_literal("f(1)")


def test_plain_prefixed_name_is_not_a_literal() -> None:
	expr = parse_expr_fragment('if_ready("x")')
	assert isinstance(expr, ast.Call)
	assert isinstance(expr.func, ast.Name) and expr.func.ident == "if_ready"


def test_invalid_host_escape_in_source_is_a_parser_diagnostic() -> None:
	prog, diags = parse_source('writeln(i"bad \\q escape");\n', file="bad.src")
	assert prog is None
	(diag,) = diags
	assert diag.phase == "parser"
	assert diag.kind.value == "InvalidLiteral"
	assert diag.message.startswith("E-INTERP-LITERAL: ")
	assert (diag.span.file, diag.span.line, diag.span.column) == ("bad.src", 1, 15)


def test_char_literal_must_be_one_character() -> None:
	_prog, diags = parse_source("f('ab');")
	assert diags and diags[0].phase == "parser"
