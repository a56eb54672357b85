"""Browser façade over a WebDriver BiDi session."""

import logging
from typing import Self

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import BiDiError, CapabilitiesRequest, GetTreeParameters
from autom8.browser import assertions, extract, interaction, local_storage, nav, screenshot
from autom8.browser.views import NavigationError, SessionClosingError, SessionCreationError
from autom8.config import CONFIG

logger = logging.getLogger(__name__)


class Browser:
	"""Drives one browsing context of a remote browser over WebDriver BiDi.

	The browsing context is resolved once in :meth:`open` (first entry of the context tree) and
	used by every other operation. An instance is single-use and not safe for concurrent
	operations: open it, use it, close it.

	```python
	async with Browser('localhost', 4444) as browser:
		await browser.load('https://example.com')
		await browser.wait_for_page_load(5000)
		print(await browser.extract_inner_html('h1'))
	```

	Every failure is raised as a subclass of :class:`autom8.BrowserError`.
	"""

	def __init__(
		self,
		host: str | None = None,
		port: int | None = None,
		capabilities: CapabilitiesRequest | None = None,
		command_timeout: float | None = None,
	):
		host = CONFIG.AUTOM8_HOST if host is None else host
		port = CONFIG.AUTOM8_PORT if port is None else port
		command_timeout = CONFIG.AUTOM8_COMMAND_TIMEOUT if command_timeout is None else command_timeout
		logger.debug(f'Creating a new Browser instance with host: {host}, port: {port}, capabilities: {capabilities}')
		self.webdriverbidi_session = WebDriverBiDiSession(
			host,
			port,
			CapabilitiesRequest() if capabilities is None else capabilities,
			command_timeout=command_timeout,
		)
		self.browsing_context: str | None = None

	@classmethod
	def with_capabilities(cls, capabilities: CapabilitiesRequest, host: str | None = None, port: int | None = None) -> Self:
		return cls(host, port, capabilities=capabilities)

	def __repr__(self) -> str:
		return f'Browser({self.webdriverbidi_session!r}, context={self.browsing_context})'

	async def __aenter__(self) -> Self:
		await self.open()
		return self

	async def __aexit__(self, exc_type, exc_value, traceback) -> None:
		await self.close()

	def get_context(self) -> str:
		"""Return the current browsing context.

		Raises:
			NavigationError: :meth:`open` has not been called or did not resolve a context
		"""
		if self.browsing_context is None:
			raise NavigationError('No browsing context available')
		return self.browsing_context

	# ------------------------------------------------------------------ #
	# Session lifecycle
	# ------------------------------------------------------------------ #

	async def open(self) -> None:
		"""Start the session and adopt the first top-level browsing context.

		Raises:
			SessionCreationError: The session did not start, ``browsingContext.getTree`` failed,
				or the browser reported no contexts
		"""
		logger.debug('Starting the WebDriver BiDi session')
		try:
			await self.webdriverbidi_session.start()
		except BiDiError as e:
			raise SessionCreationError(f'Starting the WebDriverBiDi session failed: {e}') from e
		logger.debug('WebDriver BiDi session started successfully')

		logger.debug('Retrieving the browsing context tree')
		try:
			tree = await self.webdriverbidi_session.browsing_context_get_tree(GetTreeParameters())
		except BiDiError as e:
			await self._discard_session()
			raise SessionCreationError(f'The browsingContext.getTree command failed: {e}') from e
		if not tree.contexts:
			await self._discard_session()
			raise SessionCreationError('The browsingContext.getTree command returned no browsing contexts')

		self.browsing_context = tree.contexts[0].context
		logger.debug(f'Browsing context retrieved: {self.browsing_context}')

	async def _discard_session(self) -> None:
		"""Best-effort close of a session that started but could not be used."""
		try:
			await self.webdriverbidi_session.close()
		except BiDiError as e:
			logger.warning(f'Closing the unusable WebDriver BiDi session failed: {e}')

	async def close(self) -> None:
		"""Close the session. The instance must not be reused afterwards."""
		logger.debug('Closing the WebDriver BiDi session')
		try:
			await self.webdriverbidi_session.close()
		except BiDiError as e:
			raise SessionClosingError(f'Closing the WebDriver BiDi session failed: {e}') from e
		logger.debug('WebDriver BiDi session closed successfully')

	# ------------------------------------------------------------------ #
	# Navigation
	# ------------------------------------------------------------------ #

	async def load(self, url: str) -> None:
		"""Navigate the current context to ``url``."""
		logger.debug(f'Navigating to URL: {url}')
		ctx = self.get_context()
		await nav.load(self.webdriverbidi_session, ctx, url)
		logger.debug(f'Navigation to URL: {url} completed successfully')

	async def go_back(self) -> None:
		ctx = self.get_context()
		await nav.go_back(self.webdriverbidi_session, ctx)

	async def go_forward(self) -> None:
		ctx = self.get_context()
		await nav.go_forward(self.webdriverbidi_session, ctx)

	async def reload(self) -> None:
		ctx = self.get_context()
		await nav.reload(self.webdriverbidi_session, ctx)

	async def wait_for_page_load(self, timeout_ms: int | None = None) -> None:
		"""Wait until ``document.readyState`` is ``complete`` (default timeout 10000 ms)."""
		ctx = self.get_context()
		await nav.wait_for_page_load(self.webdriverbidi_session, ctx, timeout_ms)

	# ------------------------------------------------------------------ #
	# Screenshots
	# ------------------------------------------------------------------ #

	async def take_screenshot(self) -> str:
		"""Return a base64-encoded PNG of the current document."""
		ctx = self.get_context()
		return await screenshot.take_screenshot(self.webdriverbidi_session, ctx)

	# ------------------------------------------------------------------ #
	# Local storage
	# ------------------------------------------------------------------ #

	async def set_local_storage_value(self, key: str, value: str) -> None:
		ctx = self.get_context()
		await local_storage.set_local_storage(self.webdriverbidi_session, ctx, key, value)

	async def get_local_storage_value(self, key: str) -> str | None:
		"""Return the stored string, or ``None`` when the key holds no string."""
		ctx = self.get_context()
		return await local_storage.get_local_storage(self.webdriverbidi_session, ctx, key)

	set_storage = set_local_storage_value
	get_storage = get_local_storage_value

	# ------------------------------------------------------------------ #
	# Assertions
	# ------------------------------------------------------------------ #

	async def assert_element_present(self, selector: str) -> bool:
		ctx = self.get_context()
		return await assertions.assert_element_present(self.webdriverbidi_session, ctx, selector)

	# ------------------------------------------------------------------ #
	# Interaction
	# ------------------------------------------------------------------ #

	async def click_element(self, selector: str) -> None:
		ctx = self.get_context()
		await interaction.click_element(self.webdriverbidi_session, ctx, selector)

	async def wait_and_click_element(self, selector: str, timeout_ms: int | None = None) -> None:
		"""Click ``selector`` once it is visible and enabled (default timeout 5000 ms)."""
		ctx = self.get_context()
		await interaction.wait_and_click_element(self.webdriverbidi_session, ctx, selector, timeout_ms)

	async def click_and_wait(self, selector: str, page_load_timeout_ms: int | None = None) -> None:
		"""Click an element, then wait for the page load it triggers. A failed click skips the wait."""
		await self.click_element(selector)
		await self.wait_for_page_load(page_load_timeout_ms)

	# ------------------------------------------------------------------ #
	# Extraction
	# ------------------------------------------------------------------ #

	async def extract_inner_html(self, selector: str) -> str:
		ctx = self.get_context()
		return await extract.extract_inner_html(self.webdriverbidi_session, ctx, selector)

	async def extract_inner_text(self, selector: str) -> str:
		ctx = self.get_context()
		return await extract.extract_inner_text(self.webdriverbidi_session, ctx, selector)

	async def extract_attribute(self, selector: str, attribute: str) -> str | None:
		"""Return the attribute value, ``None`` if the element lacks it; raises if the element is missing."""
		ctx = self.get_context()
		return await extract.extract_attribute(self.webdriverbidi_session, ctx, selector, attribute)
