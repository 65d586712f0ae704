"""Logging setup for CI runs.

Configure via config.yaml (logging.level, logging.format,
logging.github_annotations) or env (LOGGING_LEVEL, LOGGING_FORMAT,
LOGGING_GITHUB_ANNOTATIONS). With annotations on, warnings and errors are
prefixed with GitHub Actions workflow commands so they show up on the run
summary.
"""

import logging

from reviewgate.config import LoggingConfig

PACKAGE_LOGGER = "reviewgate"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP connection chatter from requests is only shown at DEBUG
QUIET_LOGGERS = ("urllib3",)


def _resolve_level(level: str) -> int:
    """Map level name to logging constant; unknown names give INFO."""
    return LEVELS.get(level.upper().strip(), logging.INFO)


class ActionsAnnotationFormatter(logging.Formatter):
    """Prefix WARNING and ERROR records with ::warning:: / ::error::."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if record.levelno >= logging.ERROR:
            return "::error::" + text.replace("\n", "%0A")
        if record.levelno >= logging.WARNING:
            return "::warning::" + text.replace("\n", "%0A")
        return text


class ReviewGateLogging:
    """Applies LoggingConfig to the reviewgate logger and the root handler."""

    def __init__(self, config: LoggingConfig) -> None:
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT
        self._annotations = config.github_annotations

    def setup(self) -> None:
        logging.basicConfig(level=self._level, format=self._format, force=True)
        if self._annotations:
            for handler in logging.root.handlers:
                handler.setFormatter(ActionsAnnotationFormatter(self._format))
        logging.getLogger(PACKAGE_LOGGER).setLevel(self._level)
        quiet_level = logging.DEBUG if self._level == logging.DEBUG else logging.WARNING
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(quiet_level)
