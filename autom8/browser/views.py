class BrowserError(Exception):
	"""Base class for every failure surfaced by :class:`autom8.Browser`.

	``str(error)`` is prefixed with the error kind, e.g. ``Navigation error: ...``.
	"""

	kind = 'Browser'

	def __init__(self, message: str):
		self.message = message
		super().__init__(message)

	def __str__(self) -> str:
		return f'{self.kind} error: {self.message}'


class SessionCreationError(BrowserError):
	kind = 'Session creation'


class SessionClosingError(BrowserError):
	kind = 'Session closing'


class NavigationError(BrowserError):
	"""No browsing context, a failed navigation command, or a page-load timeout."""

	kind = 'Navigation'


class ActionError(BrowserError):
	"""A click failed, its element was not found, or it never became clickable."""

	kind = 'Action'


class ElementError(BrowserError):
	kind = 'Element'


class StorageError(BrowserError):
	kind = 'LocalStorage'


class ScreenshotError(BrowserError):
	kind = 'Screenshot'


class BrowserAssertionError(BrowserError):
	kind = 'Assertion'
