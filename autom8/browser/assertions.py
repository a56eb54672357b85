import logging

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import BiDiError, BooleanValue, ContextTarget, EvaluateParameters
from autom8.browser.views import BrowserAssertionError
from autom8.scripts import presence_script, unwrap_success

logger = logging.getLogger(__name__)


async def assert_element_present(session: WebDriverBiDiSession, context: str, selector: str) -> bool:
	"""Return whether ``selector`` matches an element in the current page."""
	params = EvaluateParameters(expression=presence_script(selector), target=ContextTarget(context=context), await_promise=False)
	try:
		outcome = await session.script_evaluate(params)
	except BiDiError as e:
		raise BrowserAssertionError(f'Script evaluation failed: {e}') from e

	value = unwrap_success(outcome, BrowserAssertionError, 'element presence check')
	if isinstance(value, BooleanValue):
		return value.value

	logger.debug(f'Unexpected result type: {value!r}')
	return False
