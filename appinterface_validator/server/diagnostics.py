#!/usr/bin/env python3

"""Diagnostic helpers shared by the validation engine and the lint CLI."""

from typing import List, Sequence, Set, Tuple

from lsprotocol import types as lsp

DiagnosticKey = Tuple[int, int, int, int, str, object]


def diagnostic_key(diagnostic: lsp.Diagnostic) -> DiagnosticKey:
    start = diagnostic.range.start
    end = diagnostic.range.end
    return (start.line, start.character, end.line, end.character, diagnostic.message, diagnostic.severity)


def deduplicate_diagnostics(diagnostics: Sequence[lsp.Diagnostic]) -> List[lsp.Diagnostic]:
    """Drop later diagnostics with the same range, message and severity."""
    seen: Set[DiagnosticKey] = set()
    result = []
    for diagnostic in diagnostics:
        key = diagnostic_key(diagnostic)
        if key in seen:
            continue
        seen.add(key)
        result.append(diagnostic)
    return result
