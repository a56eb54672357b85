import asyncio
import logging

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import BiDiError, BooleanValue, ContextTarget, EvaluateParameters, EvaluateResultSuccess
from autom8.browser.views import ActionError
from autom8.scripts import click_script, clickability_script, unwrap_success

logger = logging.getLogger(__name__)

DEFAULT_CLICKABLE_TIMEOUT_MS = 5_000
CLICKABLE_POLL_INTERVAL = 0.1


async def click_element(session: WebDriverBiDiSession, context: str, selector: str) -> None:
	"""Scroll the first element matching ``selector`` into view and click it.

	Raises:
		ActionError: The element was not found, the script failed, or it returned something other than a boolean
	"""
	logger.debug(f'Attempting to click element with selector: {selector}')
	params = EvaluateParameters(expression=click_script(selector), target=ContextTarget(context=context), await_promise=False)
	try:
		outcome = await session.script_evaluate(params)
	except BiDiError as e:
		raise ActionError(f'Script evaluation failed: {e}') from e

	value = unwrap_success(outcome, ActionError, 'click')
	if isinstance(value, BooleanValue):
		if value.value:
			logger.debug(f'Successfully clicked element with selector: {selector}')
			return
		raise ActionError(f'Element not found with selector: {selector}')

	logger.debug(f'Unexpected result type from click script: {value!r}')
	raise ActionError('Unexpected result type from click operation')


async def _is_clickable(session: WebDriverBiDiSession, context: str, selector: str) -> bool:
	params = EvaluateParameters(
		expression=clickability_script(selector), target=ContextTarget(context=context), await_promise=False
	)
	try:
		outcome = await session.script_evaluate(params)
	except BiDiError as e:
		logger.debug(f'Error checking element clickability: {e}')
		return False

	if isinstance(outcome, EvaluateResultSuccess) and isinstance(outcome.result, BooleanValue):
		return outcome.result.value
	logger.debug(f'Unexpected result while checking element clickability: {outcome!r}')
	return False


async def wait_and_click_element(
	session: WebDriverBiDiSession, context: str, selector: str, timeout_ms: int | None = None
) -> None:
	"""Wait until ``selector`` is visible and enabled, then click it.

	Useful for elements that are rendered or enabled some time after the page loads.

	Raises:
		ActionError: The element did not become clickable within ``timeout_ms`` (default 5000), or the click failed
	"""
	timeout_ms = DEFAULT_CLICKABLE_TIMEOUT_MS if timeout_ms is None else timeout_ms
	loop = asyncio.get_running_loop()
	deadline = loop.time() + timeout_ms / 1000

	logger.debug(f'Waiting for element to be clickable with selector: {selector}')
	while loop.time() < deadline:
		try:
			clickable = await asyncio.wait_for(
				_is_clickable(session, context, selector), timeout=max(deadline - loop.time(), 0)
			)
		except asyncio.TimeoutError:
			logger.debug('Clickability check did not answer before the deadline')
			break
		if clickable:
			logger.debug('Element is now clickable, proceeding with click')
			await click_element(session, context, selector)
			return
		await asyncio.sleep(CLICKABLE_POLL_INTERVAL)

	raise ActionError(f"Element with selector '{selector}' did not become clickable within {timeout_ms} milliseconds")
