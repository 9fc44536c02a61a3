"""
Heuristic analysis core for the Jink language: symbol indexing, module resolution,
scope-aware diagnostics, completion and go-to-definition.
"""

from jinklsp.completion import get_completions
from jinklsp.definition import find_definition
from jinklsp.diagnostics import JinkValidator, validate_document
from jinklsp.jink_index import SymbolIndex
from jinklsp.jink_parser import JinkParser, JinkParseResult
from jinklsp.module_resolver import document_module_path, resolve_module
from jinklsp.workspace import JinkSourceScanner, scan_workspace

__all__ = [
    "JinkParseResult",
    "JinkParser",
    "JinkSourceScanner",
    "JinkValidator",
    "SymbolIndex",
    "document_module_path",
    "find_definition",
    "get_completions",
    "resolve_module",
    "scan_workspace",
    "validate_document",
]
