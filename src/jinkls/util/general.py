from typing import Any

from ruamel.yaml import YAML

from jinkls.constants import JINKLS_FILE_ENCODING


def _create_yaml(preserve_comments: bool = False) -> YAML:
    """
    Creates a YAML instance; the round-trip loader is only needed to keep comments.
    """
    typ = None if preserve_comments else "safe"
    return YAML(typ=typ)


def load_yaml(path: str, preserve_comments: bool = False) -> Any:
    with open(path, encoding=JINKLS_FILE_ENCODING) as f:
        return _create_yaml(preserve_comments).load(f)
