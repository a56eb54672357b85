import asyncio
import logging

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import (
	BiDiError,
	ContextTarget,
	EvaluateParameters,
	EvaluateResultSuccess,
	NavigateParameters,
	ReadinessState,
	ReloadParameters,
	StringValue,
	TraverseHistoryParameters,
)
from autom8.browser.views import NavigationError
from autom8.scripts import READY_STATE_SCRIPT

logger = logging.getLogger(__name__)

BACK_DELTA = -1
FORWARD_DELTA = 1

DEFAULT_PAGE_LOAD_TIMEOUT_MS = 10_000
PAGE_LOAD_POLL_INTERVAL = 0.2


async def _traverse_history(session: WebDriverBiDiSession, context: str, delta: int) -> None:
	try:
		await session.browsing_context_traverse_history(TraverseHistoryParameters(context=context, delta=delta))
	except BiDiError as e:
		raise NavigationError(f'Navigating the history failed: {e}') from e


async def load(session: WebDriverBiDiSession, context: str, url: str) -> None:
	"""Navigate ``context`` to ``url`` and wait for the protocol to report readiness ``complete``.

	Protocol completion does not cover resources loaded later by scripts; follow with
	:func:`wait_for_page_load` when that matters.
	"""
	params = NavigateParameters(context=context, url=url, wait=ReadinessState.COMPLETE)
	try:
		await session.browsing_context_navigate(params)
	except BiDiError as e:
		raise NavigationError(f'Navigating to {url} failed: {e}') from e


async def go_back(session: WebDriverBiDiSession, context: str) -> None:
	await _traverse_history(session, context, BACK_DELTA)


async def go_forward(session: WebDriverBiDiSession, context: str) -> None:
	await _traverse_history(session, context, FORWARD_DELTA)


async def reload(session: WebDriverBiDiSession, context: str) -> None:
	params = ReloadParameters(context=context, wait=ReadinessState.COMPLETE)
	try:
		await session.browsing_context_reload(params)
	except BiDiError as e:
		raise NavigationError(f'Reloading the page failed: {e}') from e


async def _read_ready_state(session: WebDriverBiDiSession, context: str) -> str | None:
	"""One poll of ``document.readyState``. ``None`` means the state could not be read this time."""
	params = EvaluateParameters(expression=READY_STATE_SCRIPT, target=ContextTarget(context=context), await_promise=False)
	try:
		outcome = await session.script_evaluate(params)
	except BiDiError as e:
		# a navigation in flight can tear down the realm; keep polling
		logger.debug(f'Failed to check document ready state: {e}')
		return None

	if isinstance(outcome, EvaluateResultSuccess) and isinstance(outcome.result, StringValue):
		return outcome.result.value
	logger.debug(f'Unexpected ready state result: {outcome!r}')
	return None


async def wait_for_page_load(session: WebDriverBiDiSession, context: str, timeout_ms: int | None = None) -> None:
	"""Poll ``document.readyState`` until it is ``complete``.

	If the page is already loaded this returns after a single round-trip. Failed polls count as
	"not loaded yet"; only the deadline ends the wait, and a poll still running at the deadline
	is cancelled.

	Raises:
		NavigationError: The page did not reach ``complete`` within ``timeout_ms`` (default 10000)
	"""
	timeout_ms = DEFAULT_PAGE_LOAD_TIMEOUT_MS if timeout_ms is None else timeout_ms
	loop = asyncio.get_running_loop()
	deadline = loop.time() + timeout_ms / 1000

	logger.debug(f'Checking page load status for context: {context}')
	while loop.time() < deadline:
		try:
			state = await asyncio.wait_for(_read_ready_state(session, context), timeout=max(deadline - loop.time(), 0))
		except asyncio.TimeoutError:
			logger.debug('Ready state check did not answer before the deadline')
			break
		if state == 'complete':
			logger.debug('Page is fully loaded')
			return
		elif state == 'interactive':
			logger.debug('Page is interactive, DOM loaded but resources may still be loading')
		elif state == 'loading':
			logger.debug('Page is still loading')
		elif state is not None:
			logger.debug(f'Unknown ready state: {state}')

		await asyncio.sleep(PAGE_LOAD_POLL_INTERVAL)

	raise NavigationError(f'Page load timeout after {timeout_ms} milliseconds')
