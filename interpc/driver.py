# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`interpc` command line: parse host source files, lower their interpolation
literals and print the rewritten call sites (or the diagnostics).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from interpc.core.diagnostics import Diagnostic, has_errors
from interpc.interpolation.elements import ExpressionArgument, LoweredArgument, StringConstant
from interpc.parser import parse_file
from interpc.printer import format_expr
from interpc.rewrite import LoweredSite, lower_program


def _diag_to_json(diag: Diagnostic, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	span = diag.span
	return {
		"phase": diag.phase,
		"kind": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": span.file or str(source),
		"line": span.line,
		"column": span.column,
		"end_line": span.end_line,
		"end_column": span.end_column,
		"notes": list(diag.notes),
	}


def _lowered_to_json(arg: LoweredArgument) -> dict:
	if isinstance(arg, StringConstant):
		return {"kind": "string", "text": arg.text}
	if isinstance(arg, ExpressionArgument):
		return {"kind": "expression", "role": arg.role.value, "source": arg.source, "text": format_expr(arg.node)}
	raise TypeError(f"not a lowered argument: {arg!r}")


def _site_to_json(site: LoweredSite, source: Path) -> dict:
	return {
		"file": str(source),
		"line": site.loc.line,
		"column": site.loc.column,
		"call": format_expr(site.node),
		"literals": [[_lowered_to_json(arg) for arg in args] for args in site.lowered],
	}


def _format_human(diag: Diagnostic, source: Path) -> str:
	where = diag.span.in_file(str(source)).describe()
	kind = f"[{diag.code}] " if diag.code else ""
	lines = [f"{where}: {diag.severity}: {kind}{diag.message}"]
	lines.extend(f"  note: {note}" for note in diag.notes)
	return "\n".join(lines)


def lower_file(path: Path) -> tuple[list[LoweredSite], list[Diagnostic]]:
	"""Parse and rewrite one file; returns the lowered sites and all diagnostics."""
	program, diagnostics = parse_file(path)
	if program is None:
		return [], diagnostics
	result = lower_program(program, file=str(path))
	return result.sites, diagnostics + result.diagnostics


def main(argv: list[str] | None = None) -> int:
	"""
	Lower every interpolation literal in the given files.

	Prints `file:line:column: <rewritten call>` per lowered argument list to
	stdout and diagnostics to stderr. With --json, prints a single object with
	`exit_code`, `diagnostics` and `lowered` instead. Exit code is 1 when any
	error was reported.
	"""
	parser = argparse.ArgumentParser(prog="interpc", description="Lower interpolated string literals in host source files")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to host source file(s)")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit lowered call sites and diagnostics as JSON",
	)
	args = parser.parse_args(argv)

	payload_diags: list[dict[str, Any]] = []
	payload_sites: list[dict[str, Any]] = []
	failed = False
	for source in args.source:
		try:
			sites, diagnostics = lower_file(source)
		except OSError as err:
			diagnostics = [Diagnostic(message=f"cannot read source: {err.strerror or err}", phase="driver", severity="error")]
			sites = []
		failed = failed or has_errors(diagnostics)
		if args.json:
			payload_diags.extend(_diag_to_json(d, source) for d in diagnostics)
			payload_sites.extend(_site_to_json(s, source) for s in sites)
			continue
		for site in sites:
			print(f"{source}:{site.loc.line}:{site.loc.column}: {format_expr(site.node)}")
		for diag in diagnostics:
			print(_format_human(diag, source), file=sys.stderr)

	exit_code = 1 if failed else 0
	if args.json:
		print(json.dumps({"exit_code": exit_code, "diagnostics": payload_diags, "lowered": payload_sites}))
	return exit_code


__all__ = ["main", "lower_file"]
