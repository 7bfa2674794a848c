# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from interpc.parser import parse_source
from interpc.parser import parser as p
from interpc.parser.ast import (
	Binary,
	Call,
	ExprStmt,
	FunctionDef,
	InterpolationLiteral,
	LetStmt,
	Located,
	Mixin,
	Name,
	ReturnStmt,
	TemplateInstance,
	TypeArg,
)
from interpc.printer import format_expr, format_type


def test_parse_statements() -> None:
	prog = p.parse_program(
		"""
let total: int = apples + bananas;
fn report(n: int, label: string = "fruit"): void {
	writeln(i"$n $label");
	return;
}
"""
	)
	let, fn = prog.statements
	assert isinstance(let, LetStmt)
	assert format_type(let.type_expr) == "int"
	assert isinstance(let.value, Binary)
	assert isinstance(fn, FunctionDef)
	assert [param.name for param in fn.params] == ["n", "label"]
	assert fn.params[1].default.value == "fruit"
	assert format_type(fn.return_type) == "void"
	call_stmt, ret = fn.body.statements
	assert isinstance(call_stmt, ExprStmt)
	assert isinstance(call_stmt.value.args[0], InterpolationLiteral)
	assert isinstance(ret, ReturnStmt) and ret.value is None


def test_interpolation_literal_is_an_ordinary_primary() -> None:
	prog = p.parse_program('let s = i"a" ~ f"b";')
	value = prog.statements[0].value
	assert isinstance(value, Binary)
	assert isinstance(value.left, InterpolationLiteral)
	assert isinstance(value.right, InterpolationLiteral)


def test_template_instance_accepts_types_and_expressions() -> None:
	expr = p.parse_expr_fragment("Tuple!(int*, n + 1, const(char)[])")
	assert isinstance(expr, TemplateInstance)
	first, second, third = expr.args
	assert isinstance(first, TypeArg)
	assert format_type(first.type_expr) == "int*"
	assert isinstance(second, Binary)
	assert isinstance(third, TypeArg)
	assert format_type(third.type_expr) == "const(char)[]"


def test_mixin_is_its_own_node() -> None:
	expr = p.parse_expr_fragment('mixin("int ", name, ";")')
	assert isinstance(expr, Mixin)
	assert len(expr.args) == 3


def test_builtin_type_names_are_keywords() -> None:
	with pytest.raises(p.UnexpectedInput):
		p.parse_expr_fragment("int")
	assert format_type(p.parse_type_fragment("int[4]")) == "int[4]"


@pytest.mark.parametrize(
	"text",
	[
		"a + b * c",
		"(a + b) * c",
		"f(x)(y)",
		"-(a + b)",
		"!ready && a.b[c]",
		"a == b || c != d",
		"Vec!(int)(3)",
	],
)
def test_expression_printing_is_canonical(text: str) -> None:
	assert format_expr(p.parse_expr_fragment(text)) == text


def test_comments_are_ignored() -> None:
	prog = p.parse_program("// leading\nf(/* inline */ 1);\n")
	stmt = prog.statements[0]
	assert isinstance(stmt.value, Call)
	assert format_expr(stmt.value) == "f(1)"


def test_expression_locations_are_source_positions() -> None:
	prog = p.parse_program("\n  f(x, i\"$y\");")
	call = prog.statements[0].value
	assert call.loc == Located(2, 3)
	assert isinstance(call.args[0], Name) and call.args[0].loc == Located(2, 5)
	assert call.args[1].loc == Located(2, 8)


def test_syntax_error_becomes_parser_diagnostic() -> None:
	prog, diags = parse_source("let = 3;", file="broken.src")
	assert prog is None
	(diag,) = diags
	assert diag.phase == "parser"
	assert diag.kind is None
	assert (diag.span.file, diag.span.line, diag.span.column) == ("broken.src", 1, 5)
