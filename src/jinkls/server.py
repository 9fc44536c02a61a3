"""
Language server for Jink, built on pygls.

The server is a thin adapter: it keeps the workspace index in sync with editor and
file-system events and delegates diagnostics, completion and definition requests to jinklsp.
"""

import logging
import os

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from jinkls import __version__
from jinkls.config import JinkLSConfig, apply_log_level
from jinklsp import ls_types
from jinklsp.completion import get_completions
from jinklsp.definition import find_definition
from jinklsp.diagnostics import JinkValidator
from jinklsp.jink_index import SymbolIndex
from jinklsp.workspace import JinkSourceScanner, read_source_file, scan_workspace

log = logging.getLogger(__name__)


class JinkLanguageServer(LanguageServer):
    """
    Jink language server holding the process-wide workspace index.

    Each content change triggers a full re-index of the changed document followed by a
    diagnostics run over the updated index. No versioning is applied: the last computed
    diagnostics for a document win.
    """

    def __init__(self) -> None:
        super().__init__("jinkls", __version__)
        self.index = SymbolIndex()
        self.config = JinkLSConfig()

    def workspace_folder_paths(self) -> list[str]:
        folders = [to_fs_path(folder.uri) for folder in self.workspace.folders.values()]
        paths = [path for path in folders if path]
        if not paths and self.workspace.root_path:
            paths = [self.workspace.root_path]
        return paths

    def scan_workspace(self) -> None:
        folders = self.workspace_folder_paths()
        if not folders:
            log.info("Jink LS: No workspace folders, skipping initial scan")
            return
        self.config = JinkLSConfig.load(folders[0])
        apply_log_level(self.config.log_level)
        scanner = JinkSourceScanner(self.config.ignored_dirs)
        scan_workspace(folders, self.index, scanner)

    def reindex_from_disk(self, uri: str) -> None:
        """Replace the indexed content of a document with its file on disk, or drop it if the file is gone."""
        path = to_fs_path(uri)
        source = read_source_file(path) if path and os.path.isfile(path) else None
        if source is None:
            log.debug(f"Removing {uri} from index")
            self.index.remove(uri)
        else:
            self.index.update(uri, source)

    def validate(self, uri: str) -> None:
        document = self.workspace.get_text_document(uri)
        validator = JinkValidator(self.index, self.config.source_roots)
        diagnostics = validator.validate(uri, document.source, self.config.max_number_of_problems)
        self.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(uri=uri, diagnostics=[_to_lsp_diagnostic(d) for d in diagnostics])
        )

    def validate_open_documents(self) -> None:
        for uri in list(self.workspace.text_documents):
            self.validate(uri)


# ---------------------------------------------------------------------------
# Conversion to lsprotocol types
# ---------------------------------------------------------------------------


def _to_lsp_position(position: ls_types.Position) -> lsp.Position:
    return lsp.Position(line=position.line, character=position.character)


def _to_lsp_range(range_: ls_types.Range) -> lsp.Range:
    return lsp.Range(start=_to_lsp_position(range_.start), end=_to_lsp_position(range_.end))


def _to_lsp_diagnostic(diagnostic: ls_types.Diagnostic) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=_to_lsp_range(diagnostic.range),
        message=diagnostic.message,
        severity=lsp.DiagnosticSeverity(int(diagnostic.severity)),
        source=diagnostic.source,
    )


def _to_lsp_completion_item(item: ls_types.CompletionItem) -> lsp.CompletionItem:
    edits = [lsp.TextEdit(range=_to_lsp_range(e.range), new_text=e.new_text) for e in item.additional_text_edits]
    return lsp.CompletionItem(
        label=item.label,
        kind=lsp.CompletionItemKind(int(item.kind)),
        detail=item.detail,
        additional_text_edits=edits or None,
    )


def _to_lsp_location(location: ls_types.Location) -> lsp.Location:
    return lsp.Location(uri=location.uri, range=_to_lsp_range(location.range))


# ---------------------------------------------------------------------------
# Server instance and features
# ---------------------------------------------------------------------------

server = JinkLanguageServer()


@server.feature(lsp.INITIALIZE)
def on_initialize(ls: JinkLanguageServer, params: lsp.InitializeParams) -> None:
    options = params.initialization_options
    if isinstance(options, dict):
        apply_log_level(options.get("logLevel"))


@server.feature(lsp.INITIALIZED)
def on_initialized(ls: JinkLanguageServer, params: lsp.InitializedParams) -> None:
    log.info("Jink LS: Server initialized")
    try:
        ls.scan_workspace()
    except (OSError, ValueError) as e:
        log.error(f"Jink LS: Workspace scan failed: {e}")
        ls.window_show_message(lsp.ShowMessageParams(type=lsp.MessageType.Error, message=f"Jink LS: {e}"))


@server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(ls: JinkLanguageServer, params: lsp.DidChangeConfigurationParams) -> None:
    ls.config.apply_editor_settings(params.settings)
    apply_log_level(ls.config.log_level)
    ls.validate_open_documents()


@server.feature(lsp.WORKSPACE_DID_CHANGE_WATCHED_FILES)
def did_change_watched_files(ls: JinkLanguageServer, params: lsp.DidChangeWatchedFilesParams) -> None:
    for change in params.changes:
        if change.type == lsp.FileChangeType.Deleted:
            ls.index.remove(change.uri)
        elif change.uri not in ls.workspace.text_documents:
            # Open documents are tracked through the editor buffer instead
            ls.reindex_from_disk(change.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: JinkLanguageServer, params: lsp.DidOpenTextDocumentParams) -> None:
    ls.index.update(params.text_document.uri, params.text_document.text)
    ls.validate(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: JinkLanguageServer, params: lsp.DidChangeTextDocumentParams) -> None:
    uri = params.text_document.uri
    ls.index.update(uri, ls.workspace.get_text_document(uri).source)
    ls.validate(uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: JinkLanguageServer, params: lsp.DidCloseTextDocumentParams) -> None:
    uri = params.text_document.uri
    ls.reindex_from_disk(uri)
    ls.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(uri=uri, diagnostics=[]))


@server.feature(lsp.TEXT_DOCUMENT_COMPLETION, lsp.CompletionOptions(resolve_provider=False))
def completion(ls: JinkLanguageServer, params: lsp.CompletionParams) -> list[lsp.CompletionItem]:
    uri = params.text_document.uri
    document = ls.workspace.get_text_document(uri)
    position = ls_types.Position(params.position.line, params.position.character)
    items = get_completions(uri, document.source, position, ls.index, ls.config.source_roots)
    return [_to_lsp_completion_item(item) for item in items]


@server.feature(lsp.TEXT_DOCUMENT_DEFINITION)
def definition(ls: JinkLanguageServer, params: lsp.DefinitionParams) -> list[lsp.Location]:
    uri = params.text_document.uri
    document = ls.workspace.get_text_document(uri)
    position = ls_types.Position(params.position.line, params.position.character)
    return [_to_lsp_location(location) for location in find_definition(uri, document.source, position, ls.index)]
