import logging

import pytest

from jinkls.config import JinkLSConfig, apply_log_level, load_config_file


def test_defaults_without_workspace():
    config = JinkLSConfig.load(None)

    assert config.max_number_of_problems == 100
    assert config.source_roots == ["src"]
    assert config.ignored_dirs == []
    assert config.log_level == "INFO"


def test_defaults_without_config_file(tmp_path):
    assert JinkLSConfig.load(str(tmp_path)) == JinkLSConfig()


def test_load_config_file(make_workspace):
    root = make_workspace(
        {
            ".jinkls.yml": """\
            # Jink LS settings
            max_number_of_problems: 5
            source_roots: [src, lib]
            ignored_dirs:
              - vendor
            log_level: debug
            """
        }
    )

    config = JinkLSConfig.load(str(root))

    assert config == JinkLSConfig(
        max_number_of_problems=5, source_roots=["src", "lib"], ignored_dirs=["vendor"], log_level="DEBUG"
    )


def test_empty_config_file_yields_defaults(make_workspace):
    root = make_workspace({".jinkls.yml": ""})

    assert JinkLSConfig.load(str(root)) == JinkLSConfig()


def test_unknown_keys_are_ignored_with_warning(make_workspace, caplog):
    root = make_workspace({".jinkls.yml": "max_number_of_problems: 7\ncolour: blue\n"})

    with caplog.at_level(logging.WARNING):
        config = JinkLSConfig.load(str(root))

    assert config.max_number_of_problems == 7
    assert "colour" in caplog.text


def test_config_must_be_a_mapping(make_workspace):
    root = make_workspace({".jinkls.yml": "- a\n- b\n"})

    with pytest.raises(ValueError, match="expected YAML mapping"):
        JinkLSConfig.load(str(root))


@pytest.mark.parametrize(
    "data",
    [
        {"max_number_of_problems": 0},
        {"max_number_of_problems": "many"},
        {"max_number_of_problems": True},
        {"source_roots": "src"},
        {"ignored_dirs": [1, 2]},
    ],
)
def test_invalid_values_are_rejected(data):
    with pytest.raises(ValueError):
        JinkLSConfig.from_dict(data)


def test_load_config_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_file(str(tmp_path / ".jinkls.yml"))


def test_apply_editor_settings():
    config = JinkLSConfig()

    config.apply_editor_settings({"jinkLanguageServer": {"maxNumberOfProblems": 3, "logLevel": "warning"}})

    assert config.max_number_of_problems == 3
    assert config.log_level == "WARNING"


def test_apply_editor_settings_ignores_malformed_values():
    config = JinkLSConfig()

    config.apply_editor_settings({"jinkLanguageServer": {"maxNumberOfProblems": -1, "logLevel": 5}})
    config.apply_editor_settings(None)
    config.apply_editor_settings({"jinkLanguageServer": "oops"})

    assert config == JinkLSConfig()


def test_apply_log_level():
    root_logger = logging.getLogger()
    previous = root_logger.level
    try:
        apply_log_level("debug")
        assert root_logger.level == logging.DEBUG
        apply_log_level("no-such-level")
        assert root_logger.level == logging.DEBUG
    finally:
        root_logger.setLevel(previous)
