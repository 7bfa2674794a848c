# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
interpc: interpolated string literal lowering for the host compiler front end.

Subpackages:
  core: spans and diagnostics shared by every phase
  parser: host grammar, AST and fragment parsers
  interpolation: body scanner, classifier, context gate and lowering engine

The CLI entrypoint is `interpc.driver:main`.
"""

__all__ = ["core", "parser", "interpolation", "rewrite", "printer", "driver"]
