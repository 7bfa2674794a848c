from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from .ast import (
	Attr,
	Binary,
	Block,
	Call,
	Expr,
	ExprStmt,
	FunctionDef,
	Index,
	InterpolationKind,
	InterpolationLiteral,
	LetStmt,
	Literal,
	Located,
	Mixin,
	Name,
	Param,
	Position,
	Program,
	ReturnStmt,
	Stmt,
	TemplateInstance,
	TypeArg,
	TypeExpr,
	Unary,
	relocate,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_SIMPLE_ESCAPES = {
	"n": "\n",
	"t": "\t",
	"r": "\r",
	"0": "\0",
	"\\": "\\",
	"\"": "\"",
	"'": "'",
}


class LiteralDecodeError(ValueError):
	"""
	Invalid escape sequence inside a string, character or interpolation literal.

	Carries the location of the offending backslash so the driver can report a
	structured diagnostic instead of a raw exception.
	"""

	def __init__(self, message: str, *, loc: Located) -> None:
		super().__init__(message)
		self.loc = loc


def decode_literal_body(raw: str, start: Located) -> tuple[str, tuple[Position, ...]]:
	"""
	Resolve host escapes in the raw text between a literal's quotes.

	Returns the decoded text and a position map: entry `k` is the source
	(line, column) where decoded character `k` begins, plus one trailing entry
	for the position right after the raw text (the closing quote).

	Supported escapes: `\\n \\t \\r \\0 \\\\ \\" \\'`, `\\xHH` and `\\u{H...}`.
	"""
	out: list[str] = []
	positions: list[Position] = []
	line, column = start.line, start.column
	i = 0
	while i < len(raw):
		ch = raw[i]
		here = (line, column)
		if ch != "\\":
			out.append(ch)
			positions.append(here)
			if ch == "\n":
				line += 1
				column = 1
			else:
				column += 1
			i += 1
			continue

		if i + 1 >= len(raw):
			raise LiteralDecodeError("dangling '\\' at end of literal", loc=Located(*here))
		nxt = raw[i + 1]
		if nxt in _SIMPLE_ESCAPES:
			out.append(_SIMPLE_ESCAPES[nxt])
			width = 2
		elif nxt == "x":
			digits = raw[i + 2 : i + 4]
			if len(digits) != 2 or not _is_hex(digits):
				raise LiteralDecodeError("'\\x' escape requires exactly two hex digits", loc=Located(*here))
			out.append(chr(int(digits, 16)))
			width = 4
		elif nxt == "u":
			close = raw.find("}", i + 2)
			digits = raw[i + 3 : close] if raw.startswith("{", i + 2) and close != -1 else ""
			if not digits or not _is_hex(digits) or int(digits, 16) > 0x10FFFF:
				raise LiteralDecodeError("'\\u' escape must be of the form \\u{H...} naming a code point", loc=Located(*here))
			out.append(chr(int(digits, 16)))
			width = close + 1 - i
		else:
			raise LiteralDecodeError(f"unknown escape sequence '\\{nxt}'", loc=Located(*here))
		positions.append(here)
		column += width
		i += width
	positions.append((line, column))
	return "".join(out), tuple(positions)


def _is_hex(text: str) -> bool:
	return all(c in "0123456789abcdefABCDEF" for c in text)


def _tok_loc(tok: Token) -> Located:
	return Located(line=tok.line, column=tok.column)


def _loc(tree: Tree) -> Located:
	# Trees built only from filtered punctuation (e.g. `{}`) carry no position.
	line = getattr(tree.meta, "line", None)
	if line is None:
		return Located(line=0, column=0)
	return Located(line=line, column=tree.meta.column)


def _name(tree: Tree) -> str:
	return tree.data if isinstance(tree.data, str) else tree.data.value


def _trees(tree: Tree) -> list[Tree]:
	return [c for c in tree.children if isinstance(c, Tree)]


def _tokens(tree: Tree) -> list[Token]:
	return [c for c in tree.children if isinstance(c, Token)]


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_FRAGMENT_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start=["expr", "type"],
	propagate_positions=True,
	maybe_placeholders=False,
)


def parse_program(source: str) -> Program:
	tree = _PARSER.parse(source)
	return _build_program(tree)


def parse_expr_fragment(source: str, origin: Optional[Located] = None) -> Expr:
	"""
	Parse a host expression from a source fragment (e.g. the inside of `$( ... )`).

	Locations are fragment-relative unless `origin` is given, in which case
	they are re-anchored to where the fragment starts in the file.
	"""
	expr = _build_expr(_FRAGMENT_PARSER.parse(source, start="expr"))
	return relocate(expr, origin) if origin is not None else expr


def parse_type_fragment(source: str, origin: Optional[Located] = None) -> TypeExpr:
	"""Parse a host type from a source fragment; see `parse_expr_fragment`."""
	ty = _build_type(_FRAGMENT_PARSER.parse(source, start="type"))
	return relocate(ty, origin) if origin is not None else ty


def parse_interpolation_literal(source: str) -> InterpolationLiteral:
	"""
	Parse a single `i"..."` / `f"..."` token written in host source form.

	Convenience for tooling and tests; raises ValueError when `source` is some
	other expression.
	"""
	expr = parse_expr_fragment(source)
	if not isinstance(expr, InterpolationLiteral):
		raise ValueError(f"not an interpolation literal: {source!r}")
	return expr


def _build_program(tree: Tree) -> Program:
	return Program(statements=[_build_stmt(child) for child in _trees(tree)])


def _build_stmt(tree: Tree) -> Stmt:
	name = _name(tree)
	if name == "let_stmt":
		ident = _tokens(tree)[0]
		subtrees = _trees(tree)
		type_expr = _build_type(subtrees[0]) if len(subtrees) == 2 else None
		return LetStmt(loc=_loc(tree), name=ident.value, type_expr=type_expr, value=_build_expr(subtrees[-1]))
	if name == "fn_def":
		return _build_function(tree)
	if name == "return_stmt":
		subtrees = _trees(tree)
		return ReturnStmt(loc=_loc(tree), value=_build_expr(subtrees[0]) if subtrees else None)
	if name == "expr_stmt":
		return ExprStmt(loc=_loc(tree), value=_build_expr(_trees(tree)[0]))
	if name == "block":
		return _build_block(tree)
	raise TypeError(f"Unexpected statement node: {name}")


def _build_block(tree: Tree) -> Block:
	return Block(loc=_loc(tree), statements=[_build_stmt(child) for child in _trees(tree)])


def _build_function(tree: Tree) -> FunctionDef:
	ident = _tokens(tree)[0]
	params: List[Param] = []
	return_type: Optional[TypeExpr] = None
	body: Optional[Block] = None
	for child in _trees(tree):
		kind = _name(child)
		if kind == "params":
			params = [_build_param(p) for p in _trees(child)]
		elif kind == "type":
			return_type = _build_type(child)
		elif kind == "block":
			body = _build_block(child)
	if body is None:
		raise TypeError("fn_def without a body")
	return FunctionDef(loc=_loc(tree), name=ident.value, params=params, return_type=return_type, body=body)


def _build_param(tree: Tree) -> Param:
	ident = _tokens(tree)[0]
	subtrees = _trees(tree)
	default = _build_expr(subtrees[1]) if len(subtrees) > 1 else None
	return Param(name=ident.value, type_expr=_build_type(subtrees[0]), default=default)


def _build_args(tree: Optional[Tree]) -> List[Expr]:
	if tree is None:
		return []
	return [_build_expr(child) for child in _trees(tree)]


def _optional_child(tree: Tree, name: str) -> Optional[Tree]:
	return next((c for c in _trees(tree) if _name(c) == name), None)


def _build_expr(node) -> Expr:
	if not isinstance(node, Tree):
		raise TypeError(f"Unexpected node type: {type(node)}")
	name = _name(node)

	if name == "expr":
		return _build_expr(_trees(node)[0])
	if name == "binary":
		left, op, right = node.children
		return Binary(loc=_loc(node), op=op.value, left=_build_expr(left), right=_build_expr(right))
	if name == "unary":
		op, operand = node.children
		return Unary(loc=_loc(node), op=op.value, operand=_build_expr(operand))
	if name == "call":
		func = node.children[0]
		args = node.children[1] if len(node.children) > 1 else None
		return Call(loc=_loc(node), func=_build_expr(func), args=_build_args(args))
	if name == "attr":
		value, attr = node.children
		return Attr(loc=_loc(node), value=_build_expr(value), attr=attr.value)
	if name == "index":
		value, index = node.children
		return Index(loc=_loc(node), value=_build_expr(value), index=_build_expr(index))
	if name == "template_instance":
		template = node.children[0]
		targs = _optional_child(node, "template_args")
		return TemplateInstance(loc=_loc(node), template=_build_expr(template), args=_build_template_args(targs))
	if name == "mixin":
		return Mixin(loc=_loc(node), args=_build_args(_optional_child(node, "args")))
	if name == "type_only":
		return TypeArg(loc=_loc(node), type_expr=_build_type(node))
	if name == "name":
		tok = node.children[0]
		return Name(loc=_tok_loc(tok), ident=tok.value)
	if name == "int_lit":
		tok = node.children[0]
		return Literal(loc=_tok_loc(tok), value=int(tok.value), kind="int")
	if name == "float_lit":
		tok = node.children[0]
		return Literal(loc=_tok_loc(tok), value=float(tok.value), kind="float")
	if name == "string_lit":
		tok = node.children[0]
		text, _positions = decode_literal_body(tok.value[1:-1], Located(tok.line, tok.column + 1))
		return Literal(loc=_tok_loc(tok), value=text, kind="string")
	if name == "raw_string_lit":
		tok = node.children[0]
		return Literal(loc=_tok_loc(tok), value=tok.value[1:-1], kind="string")
	if name == "char_lit":
		tok = node.children[0]
		text, _positions = decode_literal_body(tok.value[1:-1], Located(tok.line, tok.column + 1))
		if len(text) != 1:
			raise LiteralDecodeError("character literal must hold exactly one character", loc=_tok_loc(tok))
		return Literal(loc=_tok_loc(tok), value=text, kind="char")
	if name in {"true_lit", "false_lit"}:
		return Literal(loc=_loc(node), value=name == "true_lit", kind="bool")
	if name == "null_lit":
		return Literal(loc=_loc(node), value=None, kind="null")
	if name == "interp_lit":
		return _build_interpolation(node.children[0])
	raise TypeError(f"Unexpected expression node: {name}")


def _build_interpolation(tok: Token) -> InterpolationLiteral:
	# Token text is `<prefix>"<raw body>"`; the body starts two columns in.
	body, positions = decode_literal_body(tok.value[2:-1], Located(tok.line, tok.column + 2))
	return InterpolationLiteral(
		loc=_tok_loc(tok),
		kind=InterpolationKind(tok.value[0]),
		body=body,
		positions=positions,
	)


def _build_template_args(tree: Optional[Tree]) -> List[Expr]:
	if tree is None:
		return []
	return [_build_expr(child) for child in _trees(tree)]


def _build_type(tree: Tree) -> TypeExpr:
	name = _name(tree)
	if name in {"type", "type_only"}:
		subtrees = _trees(tree)
		ty = _build_type(subtrees[0])
		for suffix in subtrees[1:]:
			ty = _apply_type_suffix(ty, suffix)
		return ty
	if name == "builtin_type":
		tok = tree.children[0]
		return TypeExpr(name=tok.value, loc=_tok_loc(tok))
	if name == "type_ctor":
		ctor = _tokens(tree)[0]
		inner = _build_type(_trees(tree)[0])
		return TypeExpr(name=ctor.value, args=[inner], loc=_tok_loc(ctor))
	if name == "named_type":
		return TypeExpr(name=_qual_name(_trees(tree)[0]), loc=_loc(tree))
	if name == "template_type":
		qual = _trees(tree)[0]
		targs = _optional_child(tree, "template_args")
		return TypeExpr(
			name=_qual_name(qual),
			args=_build_template_args(targs),
			loc=_loc(tree),
			is_template=True,
		)
	raise TypeError(f"Unexpected type node: {name}")


def _apply_type_suffix(base: TypeExpr, suffix: Tree) -> TypeExpr:
	name = _name(suffix)
	if name == "pointer_suffix":
		return TypeExpr(name="*", args=[base], loc=base.loc)
	if name == "slice_suffix":
		return TypeExpr(name="[]", args=[base], loc=base.loc)
	if name == "array_suffix":
		return TypeExpr(name="[]", args=[base], loc=base.loc, size=_build_expr(_trees(suffix)[0]))
	raise TypeError(f"Unexpected type suffix: {name}")


def _qual_name(tree: Tree) -> str:
	return ".".join(tok.value for tok in _tokens(tree))


__all__ = [
	"LiteralDecodeError",
	"UnexpectedInput",
	"decode_literal_body",
	"parse_program",
	"parse_expr_fragment",
	"parse_type_fragment",
	"parse_interpolation_literal",
]
