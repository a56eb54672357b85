from autom8.browser.session import Browser
from autom8.browser.views import (
	ActionError,
	BrowserAssertionError,
	BrowserError,
	ElementError,
	NavigationError,
	ScreenshotError,
	SessionClosingError,
	SessionCreationError,
	StorageError,
)

__all__ = [
	'Browser',
	'BrowserError',
	'ActionError',
	'BrowserAssertionError',
	'ElementError',
	'NavigationError',
	'ScreenshotError',
	'SessionClosingError',
	'SessionCreationError',
	'StorageError',
]
