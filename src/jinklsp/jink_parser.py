"""
Regex-based extraction of declarations and import statements from Jink source.
Works line by line; statements spanning several lines (struct bodies, selective imports)
are accumulated until a closing brace is seen.
"""

import re
from dataclasses import dataclass, field

from jinklsp.jink_language import KEYWORDS
from jinklsp.jink_lexer import strip_comments
from jinklsp.ls_types import ImportedName, JinkImport, JinkParameter, JinkSymbol, Range, SymbolKind
from jinklsp.ls_utils import TextUtils

_ID = r"[a-zA-Z_][a-zA-Z0-9_]*"


@dataclass
class JinkParseResult:
    """Result of Jink document parsing."""

    symbols: list[JinkSymbol] = field(default_factory=list)
    imports: list[JinkImport] = field(default_factory=list)


class JinkParser:
    """Regex-based parser for Jink documents."""

    LET_PATTERN = re.compile(rf"^(pub\s+)?let\s+({_ID})\s*=")
    CONST_UNTYPED_PATTERN = re.compile(rf"^(pub\s+)?const\s+({_ID})\s*=")
    CONST_TYPED_PATTERN = re.compile(rf"^(pub\s+)?const\s+(?:{_ID})\s+({_ID})\s*=")
    TYPE_ALIAS_PATTERN = re.compile(rf"^(pub\s+)?type\s+({_ID})\s*=")
    TYPE_STRUCT_START_PATTERN = re.compile(rf"^(pub\s+)?type\s+({_ID})\s*=\s*\{{")
    FUNCTION_PATTERN = re.compile(rf"^(pub\s+)?fun\s+({_ID})\s*\(([^)]*)\)")
    EXTERN_PATTERN = re.compile(rf'^(pub\s+)?extern\s*\("[^"]*"\)\s+({_ID})\s*\(([^)]*)\)')
    CLASS_PATTERN = re.compile(rf"^(pub\s+)?cls\s+({_ID})\s*(?:\(.*\))?\s*=")
    # "Type name;" or "Type name = ..." anywhere on a line, several per line
    TYPED_VAR_PATTERN = re.compile(rf"({_ID})\s+({_ID})\s*(?:;|=)")

    # import module; import module.sub as alias;
    IMPORT_MODULE_PATTERN = re.compile(r"^import\s+([a-zA-Z0-9_.]+)(?:\s+as\s+([a-zA-Z0-9_]+))?\s*;?$")
    # import module.*;
    IMPORT_WILDCARD_PATTERN = re.compile(r"^import\s+([a-zA-Z0-9_.]+)\.\*\s*;?$")
    # import from module { a, b as c }
    IMPORT_FROM_PATTERN = re.compile(r"^import\s+from\s+([a-zA-Z0-9_.]+)\s*\{(.*)\}")
    IMPORT_FROM_START_PATTERN = re.compile(r"^import\s+from\s+([a-zA-Z0-9_.]+)\s*\{")
    IMPORT_ALIAS_PATTERN = re.compile(r"^([a-zA-Z0-9_]+)\s+as\s+([a-zA-Z0-9_]+)$")

    # Tried in order; the first match wins
    _SINGLE_LINE_DECLARATIONS = (
        (LET_PATTERN, SymbolKind.VARIABLE),
        (CONST_UNTYPED_PATTERN, SymbolKind.CONSTANT),
        (CONST_TYPED_PATTERN, SymbolKind.CONSTANT),
        (TYPE_ALIAS_PATTERN, SymbolKind.TYPE_ALIAS),
        (FUNCTION_PATTERN, SymbolKind.FUNCTION),
        (EXTERN_PATTERN, SymbolKind.EXTERN_FUNCTION),
        (CLASS_PATTERN, SymbolKind.CLASS),
    )

    def parse(self, uri: str, source: str) -> JinkParseResult:
        """
        Parse a Jink document and return its symbols and imports.

        :param uri: the owning document of all produced symbols
        :param source: Jink source code
        :return: JinkParseResult with extracted data
        """
        result = JinkParseResult()
        lines = TextUtils.split_lines(strip_comments(source))

        i = 0
        while i < len(lines):
            raw_line = lines[i]
            line = raw_line.strip()
            if not line:
                i += 1
                continue
            indent = len(raw_line) - len(raw_line.lstrip())

            end_line = self._parse_import(lines, i, line, result.imports)
            if end_line is None:
                end_line = self._parse_declaration(uri, lines, i, line, indent, result.symbols)
            i = end_line + 1

        return result

    # ─── Imports ───────────────────────────────────────────────────────

    def _parse_import(self, lines: list[str], i: int, line: str, imports: list[JinkImport]) -> int | None:
        """
        Recognize an import statement starting at line i.

        :return: the last line consumed by the statement, or None if line i is not an import
        """
        statement_range = Range.create(i, 0, i, len(lines[i]))

        match = self.IMPORT_MODULE_PATTERN.match(line)
        if match:
            imports.append(JinkImport(module_path=match.group(1), alias=match.group(2), range=statement_range))
            return i

        match = self.IMPORT_WILDCARD_PATTERN.match(line)
        if match:
            imports.append(JinkImport(module_path=match.group(1), is_wildcard=True, range=statement_range))
            return i

        match = self.IMPORT_FROM_PATTERN.match(line)
        if match:
            names = self._parse_imported_names(match.group(2))
            imports.append(JinkImport(module_path=match.group(1), names=names, range=statement_range))
            return i

        match = self.IMPORT_FROM_START_PATTERN.match(line)
        if match:
            content, end_line = self._consume_until_brace(lines, i, line[match.end() :])
            names = self._parse_imported_names(content)
            imports.append(
                JinkImport(
                    module_path=match.group(1),
                    names=names,
                    range=Range.create(i, 0, end_line, len(lines[end_line])),
                )
            )
            return end_line

        return None

    def _parse_imported_names(self, content: str) -> list[ImportedName]:
        names: list[ImportedName] = []
        for part in content.split(","):
            part = part.strip()
            if not part:
                continue
            alias_match = self.IMPORT_ALIAS_PATTERN.match(part)
            if alias_match:
                names.append(ImportedName(name=alias_match.group(1), alias=alias_match.group(2)))
            else:
                names.append(ImportedName(name=part))
        return names

    @staticmethod
    def _consume_until_brace(lines: list[str], start_line: int, content: str) -> tuple[str, int]:
        """
        Accumulate text from subsequent lines until a line containing '}' is seen.

        :return: (text before the first '}', last consumed line)
        """
        current_line = start_line
        end_found = "}" in lines[start_line]
        while not end_found and current_line + 1 < len(lines):
            current_line += 1
            next_line = lines[current_line]
            content += " " + next_line  # keep words on different lines apart
            end_found = "}" in next_line
        return content.split("}")[0], current_line

    # ─── Declarations ──────────────────────────────────────────────────

    def _parse_declaration(
        self, uri: str, lines: list[str], i: int, line: str, indent: int, symbols: list[JinkSymbol]
    ) -> int:
        """
        Recognize declarations on line i.

        :return: the last line consumed by the declaration
        """

        def name_symbol(match: re.Match[str], kind: SymbolKind, **kwargs) -> JinkSymbol:
            return JinkSymbol(
                name=match.group(2),
                kind=kind,
                uri=uri,
                range=Range.create(i, indent + match.start(2), i, indent + match.end(2)),
                is_public=bool(match.group(1)),
                **kwargs,
            )

        match = self.TYPE_STRUCT_START_PATTERN.match(line)
        if match:
            body, end_line = self._consume_until_brace(lines, i, line[match.end() :])
            children = self._parse_struct_fields(uri, lines, i, end_line, body)
            symbols.append(name_symbol(match, SymbolKind.STRUCT, children=children))
            return end_line

        for pattern, kind in self._SINGLE_LINE_DECLARATIONS:
            match = pattern.match(line)
            if not match:
                continue
            if kind in (SymbolKind.FUNCTION, SymbolKind.EXTERN_FUNCTION):
                symbols.append(name_symbol(match, kind, parameters=self._parse_parameters(match.group(3))))
            else:
                symbols.append(name_symbol(match, kind))
            return i

        for match in self.TYPED_VAR_PATTERN.finditer(line):
            if match.group(1) in KEYWORDS:
                continue
            symbols.append(
                JinkSymbol(
                    name=match.group(2),
                    kind=SymbolKind.VARIABLE,
                    uri=uri,
                    range=Range.create(i, indent + match.start(2), i, indent + match.end(2)),
                    is_public=False,
                )
            )
        return i

    @staticmethod
    def _parse_parameters(params_text: str) -> list[JinkParameter]:
        """Split "int a, string b" into parameters; each takes its first two tokens as type and name."""
        params: list[JinkParameter] = []
        if not params_text.strip():
            return params
        for param in params_text.split(","):
            parts = param.split()
            if len(parts) >= 2:
                params.append(JinkParameter(name=parts[1], type=parts[0]))
        return params

    @staticmethod
    def _parse_struct_fields(uri: str, lines: list[str], start_line: int, end_line: int, body: str) -> list[JinkSymbol]:
        """Extract "name: type" fields of a struct body. Nested structs are not descended into."""
        fields: list[JinkSymbol] = []
        for field_text in body.split(","):
            parts = field_text.split(":")
            if len(parts) != 2:
                continue
            field_name = parts[0].strip()
            if not field_name:
                continue

            field_range = Range.create(start_line, 0, start_line, 0)
            word = re.compile(rf"\b{re.escape(field_name)}\b")
            for line_num in range(start_line, end_line + 1):
                line = lines[line_num]
                search_from = line.find("{") + 1 if line_num == start_line else 0
                found = word.search(line, search_from)
                if found:
                    field_range = Range.create(line_num, found.start(), line_num, found.end())
                    break

            fields.append(JinkSymbol(name=field_name, kind=SymbolKind.FIELD, uri=uri, range=field_range, is_public=True))
        return fields
