"""
Validation of a Jink document against the current workspace index.

Produces, in discovery order:
- errors for unresolvable modules and for selectively imported symbols that are missing or private,
- warnings for imported names that are never used,
- errors for identifiers that resolve neither through the scope stack nor through a wildcard import.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from jinklsp.jink_index import SymbolIndex
from jinklsp.jink_language import BUILTINS, DIAGNOSTIC_SOURCE
from jinklsp.jink_lexer import TokenKind, strip_comments, tokenize
from jinklsp.ls_types import Diagnostic, DiagnosticSeverity, Range
from jinklsp.ls_utils import OffsetIndex, TextUtils
from jinklsp.module_resolver import document_module_path
from jinklsp.scope_state import ContextStateMachine, IdentifierRole, ScopeStack

log = logging.getLogger(__name__)


@dataclass
class ImportedLocalName:
    """A name made visible by an import, used for the unused-import check."""

    name: str
    range: Range


class JinkValidator:
    """Computes diagnostics for a document from its text and the index snapshot."""

    IMPORT_FROM_PATTERN = re.compile(r"^import\s+from\s+([a-zA-Z0-9_.]+)\s*(?:\{(.*)\})?")
    IMPORT_FROM_START_PATTERN = re.compile(r"^import\s+from\s+([a-zA-Z0-9_.]+)\s*\{")
    IMPORT_WILDCARD_PATTERN = re.compile(r"^import\s+([a-zA-Z0-9_.]+)\.\*\s*;?")
    IMPORT_MODULE_PATTERN = re.compile(r"^import\s+([a-zA-Z0-9_.]+)(?:\s+as\s+([a-zA-Z0-9_]+))?\s*;?")
    ALIAS_SPLIT_PATTERN = re.compile(r"\s+as\s+")

    def __init__(self, index: SymbolIndex, source_roots: Iterable[str] = ("src",)) -> None:
        self.index = index
        self.source_roots = tuple(source_roots)

    def validate(self, uri: str, text: str, max_problems: int | None = None) -> list[Diagnostic]:
        """
        Validate a document.

        :param uri: the document, as known to the index
        :param text: current text of the document
        :param max_problems: if given, at most this many diagnostics are returned
        :return: diagnostics in discovery order
        """
        clean_text = strip_comments(text)
        lines = TextUtils.split_lines(clean_text)
        diagnostics: list[Diagnostic] = []
        imported_names: list[ImportedLocalName] = []

        self._validate_imports(lines, diagnostics, imported_names)
        self._check_unused_imports(clean_text, imported_names, diagnostics)
        self._validate_usages(uri, clean_text, diagnostics)

        log.debug(f"Validated {uri}: {len(diagnostics)} diagnostics")
        if max_problems is not None:
            return diagnostics[:max_problems]
        return diagnostics

    # ─── Imports ───────────────────────────────────────────────────────

    def _validate_imports(
        self, lines: list[str], diagnostics: list[Diagnostic], imported_names: list[ImportedLocalName]
    ) -> None:
        i = 0
        while i < len(lines):
            line = lines[i]

            start_match = self.IMPORT_FROM_START_PATTERN.match(line)
            if start_match and "}" not in line:
                end_line = i
                content = line[start_match.end() :]
                while end_line + 1 < len(lines):
                    end_line += 1
                    content += " " + lines[end_line]
                    if "}" in lines[end_line]:
                        break
                self._validate_selective_import(
                    start_match, content.split("}")[0], lines, i, end_line, diagnostics, imported_names
                )
                i = end_line + 1
                continue

            from_match = self.IMPORT_FROM_PATTERN.match(line)
            wildcard_match = self.IMPORT_WILDCARD_PATTERN.match(line)
            module_match = self.IMPORT_MODULE_PATTERN.match(line)
            if from_match:
                self._validate_selective_import(
                    from_match, from_match.group(2), lines, i, i, diagnostics, imported_names
                )
            elif wildcard_match:
                self._resolve_or_report(wildcard_match, i, diagnostics)
            elif module_match:
                self._validate_module_import(module_match, i, diagnostics, imported_names)
            i += 1

    def _resolve_or_report(self, match: re.Match[str], line_num: int, diagnostics: list[Diagnostic]) -> str | None:
        """Resolve the module path captured by group 1, reporting an error at its span if unknown."""
        module_path = match.group(1)
        module_uri = self.index.resolve_module(module_path)
        if module_uri is None:
            diagnostics.append(
                Diagnostic(
                    range=Range.create(line_num, match.start(1), line_num, match.end(1)),
                    message=f"Module '{module_path}' not found.",
                    severity=DiagnosticSeverity.ERROR,
                    source=DIAGNOSTIC_SOURCE,
                )
            )
        return module_uri

    def _validate_module_import(
        self,
        match: re.Match[str],
        line_num: int,
        diagnostics: list[Diagnostic],
        imported_names: list[ImportedLocalName],
    ) -> None:
        if self._resolve_or_report(match, line_num, diagnostics) is None:
            return
        alias = match.group(2)
        if alias:
            imported_names.append(
                ImportedLocalName(alias, Range.create(line_num, match.start(2), line_num, match.end(2)))
            )
        else:
            # "import std.io;" makes "io" available as a namespace
            module_path = match.group(1)
            name = module_path.split(".")[-1]
            start = match.start(1) + module_path.rfind(name)
            imported_names.append(ImportedLocalName(name, Range.create(line_num, start, line_num, start + len(name))))

    def _validate_selective_import(
        self,
        match: re.Match[str],
        content: str | None,
        lines: list[str],
        first_line: int,
        last_line: int,
        diagnostics: list[Diagnostic],
        imported_names: list[ImportedLocalName],
    ) -> None:
        module_uri = self._resolve_or_report(match, first_line, diagnostics)
        if module_uri is None or content is None:
            return

        module_path = match.group(1)
        module_symbols = self.index.get_symbols_in(module_uri)
        for entry in content.split(","):
            parts = self.ALIAS_SPLIT_PATTERN.split(entry.strip())
            symbol_name = parts[0]
            if not symbol_name:
                continue
            symbol = next((s for s in module_symbols if s.name == symbol_name), None)

            if symbol is None or not symbol.is_public:
                location = self._locate(lines, first_line, last_line, symbol_name, match.end(1))
                if symbol is None:
                    message = f"Symbol '{symbol_name}' not found in module '{module_path}'."
                else:
                    message = f"Symbol '{symbol_name}' is not public in module '{module_path}'."
                diagnostics.append(
                    Diagnostic(
                        range=location or Range.create(first_line, match.start(1), first_line, match.end(1)),
                        message=message,
                        severity=DiagnosticSeverity.ERROR,
                        source=DIAGNOSTIC_SOURCE,
                    )
                )

            if symbol is not None:
                local_name = parts[1] if len(parts) > 1 and parts[1] else symbol_name
                location = self._locate(lines, first_line, last_line, local_name, match.end(1))
                if location is not None:
                    imported_names.append(ImportedLocalName(local_name, location))

    @staticmethod
    def _locate(lines: list[str], first_line: int, last_line: int, name: str, first_column: int) -> Range | None:
        """Find the first whole-word occurrence of name in the given line range of an import statement."""
        word = re.compile(rf"\b{re.escape(name)}\b")
        for line_num in range(first_line, last_line + 1):
            found = word.search(lines[line_num], first_column if line_num == first_line else 0)
            if found:
                return Range.create(line_num, found.start(), line_num, found.end())
        return None

    @staticmethod
    def _check_unused_imports(
        clean_text: str, imported_names: list[ImportedLocalName], diagnostics: list[Diagnostic]
    ) -> None:
        for imported in imported_names:
            occurrences = len(re.findall(rf"\b{re.escape(imported.name)}\b", clean_text))
            # The import statement itself accounts for one occurrence
            if occurrences == 1:
                diagnostics.append(
                    Diagnostic(
                        range=imported.range,
                        message=f"Import '{imported.name}' is unused.",
                        severity=DiagnosticSeverity.WARNING,
                        source=DIAGNOSTIC_SOURCE,
                    )
                )

    # ─── Scope-aware usage validation ──────────────────────────────────

    def _global_names(self, uri: str) -> set[str]:
        names: set[str] = set(BUILTINS)
        names.update(symbol.name for symbol in self.index.get_symbols_in(uri))

        for imp in self.index.get_imports(uri):
            names.update(imported.local_name for imported in imp.names)
            if imp.alias:
                names.add(imp.alias)
            elif not imp.names and not imp.is_wildcard:
                names.add(imp.default_name)

        # Namespace roots allow qualified access such as "jink.ext.libc.puts"
        for document in self.index.get_known_documents():
            module_path = document_module_path(document, self.source_roots)
            if module_path:
                names.add(module_path.split(".")[0])
        return names

    def _wildcard_public_names(self, uri: str) -> set[str]:
        names: set[str] = set()
        for imp in self.index.get_imports(uri):
            if not imp.is_wildcard:
                continue
            module_uri = self.index.resolve_module(imp.module_path)
            if module_uri:
                names.update(s.name for s in self.index.get_symbols_in(module_uri) if s.is_public)
        return names

    def _validate_usages(self, uri: str, clean_text: str, diagnostics: list[Diagnostic]) -> None:
        scopes = ScopeStack(self._global_names(uri))
        wildcard_names = self._wildcard_public_names(uri)
        machine = ContextStateMachine()
        offsets = OffsetIndex(clean_text)

        for token in tokenize(clean_text):
            if token.kind == TokenKind.STRING:
                machine.on_string()
            elif token.kind == TokenKind.ARROW:
                machine.on_arrow()
            elif token.kind == TokenKind.KEYWORD:
                machine.on_keyword(token.text)
            elif token.kind == TokenKind.PUNCTUATION:
                effect = machine.on_punctuation(token.text)
                if effect.opens_scope:
                    scopes.push(effect.parameters)
                elif effect.closes_scope:
                    scopes.pop()
            else:
                offset = token.offset
                role = machine.classify_identifier(
                    token.text,
                    preceded_by_dot=offset > 0 and clean_text[offset - 1] == ".",
                    is_rest=offset >= 3 and clean_text[offset - 3 : offset] == "...",
                    preceded_by_colon=_previous_char(clean_text, offset) == ":",
                    followed_by_colon=_next_char(clean_text, offset + len(token.text)) == ":",
                )
                if role == IdentifierRole.DECLARATION:
                    scopes.declare(token.text)
                elif role == IdentifierRole.USAGE:
                    if scopes.resolves(token.text) or token.text in wildcard_names:
                        continue
                    start = offsets.position_at(offset)
                    diagnostics.append(
                        Diagnostic(
                            range=Range.create(start.line, start.character, start.line, start.character + len(token.text)),
                            message=f"Undefined symbol '{token.text}'.",
                            severity=DiagnosticSeverity.ERROR,
                            source=DIAGNOSTIC_SOURCE,
                        )
                    )


def _previous_char(text: str, offset: int) -> str:
    j = offset - 1
    while j >= 0 and text[j].isspace():
        j -= 1
    return text[j] if j >= 0 else ""


def _next_char(text: str, offset: int) -> str:
    j = offset
    while j < len(text) and text[j].isspace():
        j += 1
    return text[j] if j < len(text) else ""


def validate_document(
    uri: str,
    text: str,
    index: SymbolIndex,
    source_roots: Iterable[str] = ("src",),
    max_problems: int | None = None,
) -> list[Diagnostic]:
    """Convenience wrapper around JinkValidator."""
    return JinkValidator(index, source_roots).validate(uri, text, max_problems)
