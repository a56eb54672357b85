"""Environment-backed configuration.

Values are read on every access so tests and callers can change ``os.environ`` at runtime.
A ``.env`` file in the working directory is loaded once on import.
"""

import os

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {'1', 'true', 'yes', 'on'}


class Config:
	@property
	def AUTOM8_HOST(self) -> str:
		return os.getenv('AUTOM8_HOST', 'localhost')

	@property
	def AUTOM8_PORT(self) -> int:
		return int(os.getenv('AUTOM8_PORT', '4444'))

	@property
	def AUTOM8_LOGGING_LEVEL(self) -> str:
		return os.getenv('AUTOM8_LOGGING_LEVEL', 'info').lower()

	@property
	def AUTOM8_SETUP_LOGGING(self) -> bool:
		return os.getenv('AUTOM8_SETUP_LOGGING', 'true').lower() in _TRUTHY

	@property
	def AUTOM8_COMMAND_TIMEOUT(self) -> float:
		return float(os.getenv('AUTOM8_COMMAND_TIMEOUT', '30'))


CONFIG = Config()
