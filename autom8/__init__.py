"""autom8: drive a remote browser over WebDriver BiDi.

Example:
    from autom8 import Browser

    async with Browser('localhost', 4444) as browser:
        await browser.load('https://example.com')
        title = await browser.extract_inner_text('h1')
"""

from autom8.config import CONFIG
from autom8.logging_config import setup_logging

if CONFIG.AUTOM8_SETUP_LOGGING:
	setup_logging()

from autom8.bidi.views import CapabilitiesRequest, CapabilityRequest  # noqa: E402
from autom8.browser import (  # noqa: E402
	ActionError,
	Browser,
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
	'CapabilitiesRequest',
	'CapabilityRequest',
	# Errors
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
