"""
Resolution of dotted module paths to known documents.

A module path ``jink.ext.libc`` refers to the document whose path ends with
``jink/ext/libc.jk``. When several documents share that suffix, the first one in
scan order wins; no precedence by path proximity is applied.
"""

from collections.abc import Iterable
from urllib.parse import unquote

from jinklsp.jink_language import FILE_EXTENSION


def module_suffix(module_path: str) -> str:
    return module_path.replace(".", "/") + FILE_EXTENSION


def _normalize(document: str) -> str:
    return document.replace("\\", "/")


def resolve_module(module_path: str, known_documents: Iterable[str]) -> str | None:
    """
    Find the document a module path refers to.

    :param module_path: dotted module path
    :param known_documents: document identifiers (URIs or paths) in scan order
    :return: the first matching document, or None if the module is unknown
    """
    suffix = module_suffix(module_path)
    for document in known_documents:
        if _normalize(document).endswith(suffix):
            return document
    return None


def document_matches_module(document: str, module_path: str) -> bool:
    return _normalize(document).endswith(module_suffix(module_path))


def document_module_path(document: str, source_roots: Iterable[str] = ("src",)) -> str | None:
    """
    Derive the dotted module path of a document from its location below a source root.

    ``file:///ws/src/jink/ext/libc.jk`` yields ``jink.ext.libc`` for the source root ``src``.

    :return: the module path, or None if the document is not below a source root
    """
    parts = unquote(_normalize(document)).split("/")
    roots = set(source_roots)
    root_index = next((i for i, part in enumerate(parts) if part in roots), -1)
    if root_index == -1 or root_index >= len(parts) - 1:
        return None

    module_parts = parts[root_index + 1 :]
    file_name = module_parts[-1]
    if not file_name.endswith(FILE_EXTENSION):
        return None
    module_parts[-1] = file_name[: -len(FILE_EXTENSION)]
    if not all(module_parts):
        return None
    return ".".join(module_parts)
