"""Read content out of the page by CSS selector.

Element lookups are not cached: every call re-runs ``document.querySelector`` in the current context.
"""

import logging

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import BiDiError, ContextTarget, EvaluateParameters, EvaluateResult, NullValue, StringValue, UndefinedValue
from autom8.browser.views import ElementError
from autom8.scripts import attribute_script, element_property_script, unwrap_success

logger = logging.getLogger(__name__)


async def _evaluate(session: WebDriverBiDiSession, context: str, script: str) -> EvaluateResult:
	params = EvaluateParameters(expression=script, target=ContextTarget(context=context), await_promise=False)
	try:
		return await session.script_evaluate(params)
	except BiDiError as e:
		raise ElementError(f'Script evaluation failed: {e}') from e


async def _extract_property(session: WebDriverBiDiSession, context: str, selector: str, property_name: str) -> str:
	outcome = await _evaluate(session, context, element_property_script(selector, property_name))
	value = unwrap_success(outcome, ElementError, f'{property_name} extraction')

	if isinstance(value, StringValue):
		logger.debug(f'Successfully extracted {property_name} for selector: {selector}')
		return value.value
	if isinstance(value, NullValue):
		raise ElementError(f'Element not found with selector: {selector}')

	logger.debug(f'Unexpected result type from {property_name} extraction: {value!r}')
	raise ElementError(f'Unexpected result type from {property_name} extraction')


async def extract_inner_html(session: WebDriverBiDiSession, context: str, selector: str) -> str:
	"""Return the ``innerHTML`` of the first element matching ``selector``.

	Raises:
		ElementError: No element matched, or the script failed or returned a non-string value
	"""
	logger.debug(f'Extracting inner HTML for element with selector: {selector}')
	return await _extract_property(session, context, selector, 'innerHTML')


async def extract_inner_text(session: WebDriverBiDiSession, context: str, selector: str) -> str:
	"""Return the rendered ``innerText`` of the first element matching ``selector``."""
	logger.debug(f'Extracting inner text for element with selector: {selector}')
	return await _extract_property(session, context, selector, 'innerText')


async def extract_attribute(session: WebDriverBiDiSession, context: str, selector: str, attribute: str) -> str | None:
	"""Return an attribute value of the first element matching ``selector``.

	Returns:
		The attribute value, or ``None`` when the element exists but has no such attribute

	Raises:
		ElementError: No element matched, or the script failed or returned an unexpected value
	"""
	logger.debug(f"Extracting attribute '{attribute}' for element with selector: {selector}")
	outcome = await _evaluate(session, context, attribute_script(selector, attribute))
	value = unwrap_success(outcome, ElementError, 'attribute extraction')

	if isinstance(value, StringValue):
		logger.debug(f"Successfully extracted attribute '{attribute}' for selector: {selector}")
		return value.value
	if isinstance(value, NullValue):
		return None
	if isinstance(value, UndefinedValue):
		raise ElementError(f'Element not found with selector: {selector}')

	logger.debug(f'Unexpected result type from attribute extraction: {value!r}')
	raise ElementError('Unexpected result type from attribute extraction')
