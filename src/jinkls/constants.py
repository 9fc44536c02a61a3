JINKLS_FILE_ENCODING = "utf-8"

CONFIG_FILE_NAME = ".jinkls.yml"
"""Optional per-workspace configuration file, looked up in the workspace root."""

EDITOR_SETTINGS_SECTION = "jinkLanguageServer"

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(levelname)-5s %(asctime)-15s [%(threadName)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s"
