# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Program-level interpolation rewrite.

Walks a parsed program, lowers every interpolation literal that sits directly
in a call, template or mixin argument list, and splices the lowered arguments
into that list in place of the literal. A literal anywhere else is rejected
with IllegalContext. Expressions that came out of `$( ... )` groups are walked
too, so literals nested inside groups follow the same rules.

The input program is left untouched; the result is a rewritten copy. Each
literal contributes at most one diagnostic; independent literals are all
reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from interpc.core.diagnostics import Diagnostic
from interpc.interpolation import FragmentParsers, LiteralContext, lower_literal
from interpc.interpolation.elements import ExpressionArgument, LoweredArgument, StringConstant
from interpc.parser.ast import (
	Attr,
	Binary,
	Block,
	Call,
	Expr,
	ExprStmt,
	FunctionDef,
	Index,
	InterpolationLiteral,
	LetStmt,
	Literal,
	Located,
	Mixin,
	Name,
	Param,
	Program,
	ReturnStmt,
	Stmt,
	TemplateInstance,
	TypeArg,
	TypeExpr,
	Unary,
)


@dataclass(frozen=True)
class LoweredSite:
	"""One rewritten argument list: the node after splicing and what each literal became."""

	loc: Located
	node: Expr
	lowered: tuple[tuple[LoweredArgument, ...], ...]


@dataclass
class RewriteResult:
	program: Program
	sites: List[LoweredSite] = field(default_factory=list)
	diagnostics: List[Diagnostic] = field(default_factory=list)


def _argument_node(arg: LoweredArgument, loc: Located) -> Expr:
	if isinstance(arg, StringConstant):
		return Literal(loc=loc, value=arg.text, kind="string")
	if isinstance(arg, ExpressionArgument):
		return arg.node
	raise TypeError(f"not a lowered argument: {arg!r}")


class InterpolationRewriter:
	def __init__(self, parsers: Optional[FragmentParsers] = None, *, file: Optional[str] = None) -> None:
		self.parsers = parsers
		self.file = file
		self.diagnostics: List[Diagnostic] = []
		self.sites: List[LoweredSite] = []

	def rewrite(self, program: Program) -> RewriteResult:
		rewritten = Program(statements=[self._stmt(stmt) for stmt in program.statements])
		return RewriteResult(program=rewritten, sites=list(self.sites), diagnostics=list(self.diagnostics))

	# Statements

	def _stmt(self, stmt: Stmt) -> Stmt:
		if isinstance(stmt, LetStmt):
			type_expr = self._type(stmt.type_expr) if stmt.type_expr is not None else None
			return replace(stmt, type_expr=type_expr, value=self._expr(stmt.value, "variable initializer"))
		if isinstance(stmt, ReturnStmt):
			if stmt.value is None:
				return stmt
			return replace(stmt, value=self._expr(stmt.value, "return value"))
		if isinstance(stmt, ExprStmt):
			return replace(stmt, value=self._expr(stmt.value, "expression statement"))
		if isinstance(stmt, Block):
			return replace(stmt, statements=[self._stmt(s) for s in stmt.statements])
		if isinstance(stmt, FunctionDef):
			return replace(
				stmt,
				params=[self._param(p) for p in stmt.params],
				return_type=self._type(stmt.return_type) if stmt.return_type is not None else None,
				body=self._stmt(stmt.body),
			)
		raise TypeError(f"unexpected statement {type(stmt).__name__}")

	def _param(self, param: Param) -> Param:
		default = self._expr(param.default, "default value") if param.default is not None else None
		return replace(param, type_expr=self._type(param.type_expr), default=default)

	# Expressions

	def _expr(self, expr: Expr, where: str) -> Expr:
		"""Rewrite `expr`; `where` names the position for IllegalContext messages."""
		if isinstance(expr, InterpolationLiteral):
			self._reject(expr, where)
			return expr
		if isinstance(expr, (Name, Literal)):
			return expr
		if isinstance(expr, Binary):
			return replace(
				expr,
				left=self._expr(expr.left, f"operand of '{expr.op}'"),
				right=self._expr(expr.right, f"operand of '{expr.op}'"),
			)
		if isinstance(expr, Unary):
			return replace(expr, operand=self._expr(expr.operand, f"operand of '{expr.op}'"))
		if isinstance(expr, Attr):
			return replace(expr, value=self._expr(expr.value, "member access"))
		if isinstance(expr, Index):
			return replace(
				expr,
				value=self._expr(expr.value, "indexed value"),
				index=self._expr(expr.index, "index"),
			)
		if isinstance(expr, Call):
			func = self._expr(expr.func, "callee")
			args, lowered = self._args(expr.args, LiteralContext.call_argument())
			return self._record(replace(expr, func=func, args=args), lowered)
		if isinstance(expr, TemplateInstance):
			template = self._expr(expr.template, "template name")
			args, lowered = self._args(expr.args, LiteralContext.template_argument())
			return self._record(replace(expr, template=template, args=args), lowered)
		if isinstance(expr, Mixin):
			args, lowered = self._args(expr.args, LiteralContext.code_injection_argument())
			return self._record(replace(expr, args=args), lowered)
		if isinstance(expr, TypeArg):
			return replace(expr, type_expr=self._type(expr.type_expr))
		raise TypeError(f"unexpected expression {type(expr).__name__}")

	def _args(self, args: List[Expr], context: LiteralContext) -> tuple[List[Expr], list[tuple[LoweredArgument, ...]]]:
		out: List[Expr] = []
		lowered: list[tuple[LoweredArgument, ...]] = []
		for arg in args:
			if not isinstance(arg, InterpolationLiteral):
				out.append(self._expr(arg, context.describe()))
				continue
			result = lower_literal(arg, context, self.parsers, file=self.file)
			if not result.ok:
				self.diagnostics.extend(result.diagnostics)
				out.append(arg)
				continue
			for item in result.args or ():
				node = _argument_node(item, arg.loc)
				if isinstance(item, ExpressionArgument):
					node = self._expr(node, "interpolation group")
				out.append(node)
			lowered.append(result.args or ())
		return out, lowered

	def _record(self, node: Expr, lowered: list[tuple[LoweredArgument, ...]]) -> Expr:
		if lowered:
			self.sites.append(LoweredSite(loc=node.loc, node=node, lowered=tuple(lowered)))
		return node

	def _reject(self, literal: InterpolationLiteral, where: str) -> None:
		result = lower_literal(literal, LiteralContext.other(where), self.parsers, file=self.file)
		self.diagnostics.extend(result.diagnostics)

	# Types

	def _type(self, ty: TypeExpr) -> TypeExpr:
		args = []
		for arg in ty.args:
			if isinstance(arg, TypeExpr):
				args.append(self._type(arg))
			else:
				args.append(arg)
		if ty.is_template:
			args, lowered = self._args(args, LiteralContext.template_argument())
			if lowered:
				loc = ty.loc or Located(0, 0)
				node = TypeArg(loc=loc, type_expr=replace(ty, args=args))
				self.sites.append(LoweredSite(loc=loc, node=node, lowered=tuple(lowered)))
		size = self._expr(ty.size, "array size") if ty.size is not None else None
		return replace(ty, args=args, size=size)


def lower_program(
	program: Program,
	parsers: Optional[FragmentParsers] = None,
	*,
	file: Optional[str] = None,
) -> RewriteResult:
	return InterpolationRewriter(parsers, file=file).rewrite(program)


__all__ = ["LoweredSite", "RewriteResult", "InterpolationRewriter", "lower_program"]
