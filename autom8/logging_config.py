import logging
import sys
from typing import TextIO

from autom8.config import CONFIG

_LEVELS = {
	'debug': logging.DEBUG,
	'info': logging.INFO,
	'warning': logging.WARNING,
	'error': logging.ERROR,
	'critical': logging.CRITICAL,
}

# third-party loggers that are noisy at debug level
_QUIET_LOGGERS = ('aiohttp', 'httpx', 'httpcore', 'asyncio')


class Autom8Formatter(logging.Formatter):
	"""Shortens ``autom8.browser.nav`` to ``nav`` so log lines stay readable."""

	def format(self, record: logging.LogRecord) -> str:
		if record.name.startswith('autom8.'):
			record = logging.makeLogRecord({**record.__dict__, 'name': record.name.rsplit('.', 1)[-1]})
		return super().format(record)


def setup_logging(stream: TextIO | None = None, log_level: str | None = None, force_setup: bool = False) -> logging.Logger:
	"""Attach a single stream handler to the ``autom8`` logger.

	Args:
		stream: Output stream, stderr by default
		log_level: Overrides AUTOM8_LOGGING_LEVEL
		force_setup: Replace an existing handler instead of keeping it

	Returns:
		The configured ``autom8`` logger
	"""
	logger = logging.getLogger('autom8')
	if logger.handlers and not force_setup:
		return logger

	level_name = (log_level or CONFIG.AUTOM8_LOGGING_LEVEL).lower()
	level = _LEVELS.get(level_name, logging.INFO)

	for handler in list(logger.handlers):
		logger.removeHandler(handler)

	handler = logging.StreamHandler(stream or sys.stderr)
	handler.setFormatter(Autom8Formatter('%(levelname)-8s [%(name)s] %(message)s'))
	logger.addHandler(handler)
	logger.setLevel(level)
	logger.propagate = False

	for name in _QUIET_LOGGERS:
		logging.getLogger(name).setLevel(logging.WARNING)

	return logger
