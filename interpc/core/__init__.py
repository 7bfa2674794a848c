"""
interpc.core: spans and diagnostics shared across phases.

Modules:
  - span: source locations attached to diagnostics
  - diagnostics: Diagnostic record and the interpolation error taxonomy
"""

__all__ = [
    "span",
    "diagnostics",
]
