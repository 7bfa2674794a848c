# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Host-language AST.

Nodes are plain dataclasses. Passes never mutate a node in place; rewrites
produce new nodes via `dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Located:
	line: int
	column: int


Position = Tuple[int, int]


class Expr:
	loc: Located


@dataclass
class TypeExpr:
	"""
	Type syntax.

	Shapes:
	- named/builtin: `name="int"`, `name="std.Vec"`
	- template instance: `name="Vec"`, `is_template=True`, `args` hold the
	  template arguments (TypeExpr or Expr)
	- constructors: `name="const"` / `name="immutable"` with one arg
	- pointer: `name="*"`; slice: `name="[]"`; static array: `name="[]"` with
	  `size` set
	"""

	name: str
	args: List[Any] = field(default_factory=list)
	loc: Optional[Located] = None
	is_template: bool = False
	size: Optional[Expr] = None


@dataclass
class Name(Expr):
	loc: Located
	ident: str


@dataclass
class Literal(Expr):
	"""Non-interpolated literal; `kind` is one of int/float/string/char/bool/null."""

	loc: Located
	value: Any
	kind: str


@dataclass
class Unary(Expr):
	loc: Located
	op: str
	operand: Expr


@dataclass
class Binary(Expr):
	loc: Located
	op: str
	left: Expr
	right: Expr


@dataclass
class Call(Expr):
	loc: Located
	func: Expr
	args: List[Expr]


@dataclass
class Attr(Expr):
	loc: Located
	value: Expr
	attr: str


@dataclass
class Index(Expr):
	loc: Located
	value: Expr
	index: Expr


@dataclass
class TemplateInstance(Expr):
	"""`template!(args)`: arguments may be expressions or `TypeArg`s."""

	loc: Located
	template: Expr
	args: List[Expr]


@dataclass
class Mixin(Expr):
	"""Code-injection construct `mixin(args)`: arguments are compiled as source text."""

	loc: Located
	args: List[Expr]


@dataclass
class TypeArg(Expr):
	"""A type used in argument position (type-as-expression)."""

	loc: Located
	type_expr: TypeExpr


class InterpolationKind(str, Enum):
	INTERSPERSION = "i"
	FORMAT_STRING = "f"

	@property
	def label(self) -> str:
		return "interspersion" if self is InterpolationKind.INTERSPERSION else "format-string"


@dataclass
class InterpolationLiteral(Expr):
	"""
	`i"..."` / `f"..."` token.

	`body` has host string escapes already resolved. `positions[k]` is the
	source (line, column) of body character `k`; the extra trailing entry is
	the closing quote, so `len(positions) == len(body) + 1`.
	"""

	loc: Located
	kind: InterpolationKind
	body: str
	positions: Tuple[Position, ...] = ()

	def __post_init__(self) -> None:
		if not self.positions:
			self.positions = straight_positions(self.body, Located(self.loc.line, self.loc.column + 2))
		if len(self.positions) != len(self.body) + 1:
			raise ValueError("interpolation literal positions must cover the body plus the closing quote")

	@property
	def end(self) -> Located:
		"""Position just past the closing quote."""
		line, column = self.positions[-1]
		return Located(line, column + 1)


def straight_positions(text: str, start: Located) -> Tuple[Position, ...]:
	"""Positions for text that appears verbatim in the source starting at `start`."""
	out: list[Position] = []
	line, column = start.line, start.column
	for ch in text:
		out.append((line, column))
		if ch == "\n":
			line += 1
			column = 1
		else:
			column += 1
	out.append((line, column))
	return tuple(out)


class Stmt:
	loc: Located


@dataclass
class LetStmt(Stmt):
	loc: Located
	name: str
	type_expr: Optional[TypeExpr]
	value: Expr


@dataclass
class ReturnStmt(Stmt):
	loc: Located
	value: Optional[Expr]


@dataclass
class ExprStmt(Stmt):
	loc: Located
	value: Expr


@dataclass
class Block(Stmt):
	loc: Located
	statements: List[Stmt]


@dataclass
class Param:
	name: str
	type_expr: TypeExpr
	default: Optional[Expr] = None


@dataclass
class FunctionDef(Stmt):
	loc: Located
	name: str
	params: Sequence[Param]
	return_type: Optional[TypeExpr]
	body: Block


@dataclass
class Program:
	statements: List[Stmt] = field(default_factory=list)


def shift_location(loc: Located, origin: Located) -> Located:
	"""Map a fragment-relative location (1-based) onto the fragment's origin in the file."""
	if loc.line == 1:
		return Located(origin.line, origin.column + loc.column - 1)
	return Located(origin.line + loc.line - 1, loc.column)


def relocate(node: Any, origin: Located) -> Any:
	"""
	Return a copy of `node` with every location shifted by `origin`.

	Fragment parsers report positions relative to the fragment text; this
	re-anchors them to where the fragment sits in the enclosing file. Only
	exact when the fragment appears verbatim in the source; see `remap`.
	"""
	return remap(node, lambda loc: shift_location(loc, origin))


def remap(node: Any, mapper: Callable[[Located], Located]) -> Any:
	"""Return a copy of `node` with every location passed through `mapper`."""
	if isinstance(node, Located):
		return mapper(node)
	if isinstance(node, list):
		return [remap(item, mapper) for item in node]
	if isinstance(node, InterpolationLiteral):
		mapped = tuple(
			(loc.line, loc.column)
			for loc in (mapper(Located(line, column)) for line, column in node.positions)
		)
		return replace(node, loc=mapper(node.loc), positions=mapped)
	if is_dataclass(node) and not isinstance(node, type):
		changes = {}
		for f in fields(node):
			value = getattr(node, f.name)
			if isinstance(value, (Located, list)) or (is_dataclass(value) and not isinstance(value, type)):
				changes[f.name] = remap(value, mapper)
		return replace(node, **changes)
	return node


__all__ = [
	"Located",
	"Expr",
	"TypeExpr",
	"Name",
	"Literal",
	"Unary",
	"Binary",
	"Call",
	"Attr",
	"Index",
	"TemplateInstance",
	"Mixin",
	"TypeArg",
	"InterpolationKind",
	"InterpolationLiteral",
	"straight_positions",
	"Stmt",
	"LetStmt",
	"ReturnStmt",
	"ExprStmt",
	"Block",
	"Param",
	"FunctionDef",
	"Program",
	"shift_location",
	"relocate",
	"remap",
]
