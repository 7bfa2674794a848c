# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Render host AST fragments and lowered argument lists back to source form.

Output is canonical rather than a copy of the input: spacing is normalized,
comments are gone and parentheses appear only where precedence needs them.
"""

from __future__ import annotations

from typing import Sequence

from interpc.interpolation.elements import ExpressionArgument, LoweredArgument, StringConstant
from interpc.parser.ast import (
	Attr,
	Binary,
	Call,
	Expr,
	Index,
	InterpolationLiteral,
	Literal,
	Mixin,
	Name,
	TemplateInstance,
	TypeArg,
	TypeExpr,
	Unary,
)

# Binding strength; higher binds tighter.
_BINARY_PRECEDENCE = {
	"||": 1,
	"&&": 2,
	"==": 3,
	"!=": 3,
	"<": 3,
	"<=": 3,
	">": 3,
	">=": 3,
	"+": 4,
	"-": 4,
	"~": 4,
	"*": 5,
	"/": 5,
	"%": 5,
}
_UNARY_PRECEDENCE = 6
_POSTFIX_PRECEDENCE = 7

_QUOTE_ESCAPES = {
	"\\": "\\\\",
	"\n": "\\n",
	"\t": "\\t",
	"\r": "\\r",
	"\0": "\\0",
}


def quote(text: str, delimiter: str = "\"") -> str:
	"""Quote `text` as a host string (or char) literal."""
	out = [delimiter]
	for ch in text:
		if ch == delimiter:
			out.append("\\" + ch)
		elif ch in _QUOTE_ESCAPES:
			out.append(_QUOTE_ESCAPES[ch])
		elif ord(ch) < 0x20 or ord(ch) == 0x7F:
			out.append(f"\\x{ord(ch):02x}")
		else:
			out.append(ch)
	out.append(delimiter)
	return "".join(out)


def _precedence(expr: Expr) -> int:
	if isinstance(expr, Binary):
		return _BINARY_PRECEDENCE[expr.op]
	if isinstance(expr, Unary):
		return _UNARY_PRECEDENCE
	return _POSTFIX_PRECEDENCE


def _wrap(expr: Expr, minimum: int) -> str:
	text = format_expr(expr)
	return f"({text})" if _precedence(expr) < minimum else text


def _format_literal(lit: Literal) -> str:
	if lit.kind == "string":
		return quote(lit.value)
	if lit.kind == "char":
		return quote(lit.value, "'")
	if lit.kind == "bool":
		return "true" if lit.value else "false"
	if lit.kind == "null":
		return "null"
	return repr(lit.value)


def format_expr(expr: Expr) -> str:
	if isinstance(expr, Name):
		return expr.ident
	if isinstance(expr, Literal):
		return _format_literal(expr)
	if isinstance(expr, Binary):
		prec = _BINARY_PRECEDENCE[expr.op]
		# Comparisons do not chain; both operands must bind tighter.
		left_min = prec + 1 if prec == 3 else prec
		return f"{_wrap(expr.left, left_min)} {expr.op} {_wrap(expr.right, prec + 1)}"
	if isinstance(expr, Unary):
		return f"{expr.op}{_wrap(expr.operand, _UNARY_PRECEDENCE)}"
	if isinstance(expr, Call):
		return f"{_wrap(expr.func, _POSTFIX_PRECEDENCE)}({format_args(expr.args)})"
	if isinstance(expr, Attr):
		return f"{_wrap(expr.value, _POSTFIX_PRECEDENCE)}.{expr.attr}"
	if isinstance(expr, Index):
		return f"{_wrap(expr.value, _POSTFIX_PRECEDENCE)}[{format_expr(expr.index)}]"
	if isinstance(expr, TemplateInstance):
		return f"{_wrap(expr.template, _POSTFIX_PRECEDENCE)}!({format_args(expr.args)})"
	if isinstance(expr, Mixin):
		return f"mixin({format_args(expr.args)})"
	if isinstance(expr, TypeArg):
		return format_type(expr.type_expr)
	if isinstance(expr, InterpolationLiteral):
		return expr.kind.value + quote(expr.body)
	raise TypeError(f"cannot format expression node {type(expr).__name__}")


def format_args(args: Sequence[Expr]) -> str:
	return ", ".join(format_expr(arg) for arg in args)


def _format_type_arg(arg: object) -> str:
	if isinstance(arg, TypeExpr):
		return format_type(arg)
	return format_expr(arg)  # type: ignore[arg-type]


def format_type(ty: TypeExpr) -> str:
	if ty.name == "*":
		return f"{format_type(ty.args[0])}*"
	if ty.name == "[]":
		size = format_expr(ty.size) if ty.size is not None else ""
		return f"{format_type(ty.args[0])}[{size}]"
	if ty.name in ("const", "immutable"):
		return f"{ty.name}({format_type(ty.args[0])})"
	if ty.is_template:
		return f"{ty.name}!({', '.join(_format_type_arg(a) for a in ty.args)})"
	return ty.name


def format_lowered(args: Sequence[LoweredArgument]) -> str:
	"""Render a lowered argument list the way it reads at the call site."""
	parts: list[str] = []
	for arg in args:
		if isinstance(arg, StringConstant):
			parts.append(quote(arg.text))
		elif isinstance(arg, ExpressionArgument):
			parts.append(format_expr(arg.node))
		else:
			raise TypeError(f"not a lowered argument: {arg!r}")
	return ", ".join(parts)


__all__ = ["quote", "format_expr", "format_args", "format_type", "format_lowered"]
