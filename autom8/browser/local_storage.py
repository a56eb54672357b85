import logging

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import (
	BiDiError,
	CallFunctionParameters,
	ContextTarget,
	EvaluateResultException,
	EvaluateResultSuccess,
	StringLocalValue,
	StringValue,
)
from autom8.browser.views import StorageError
from autom8.scripts import GET_ITEM_DECLARATION, SET_ITEM_DECLARATION

logger = logging.getLogger(__name__)


def _call_params(declaration: str, context: str, *args: str) -> CallFunctionParameters:
	# key and value travel as protocol arguments, never as script text
	return CallFunctionParameters(
		function_declaration=declaration,
		await_promise=False,
		target=ContextTarget(context=context),
		arguments=[StringLocalValue(value=arg) for arg in args],
	)


async def set_local_storage(session: WebDriverBiDiSession, context: str, key: str, value: str) -> None:
	"""Set ``key`` to ``value`` in the context's localStorage."""
	try:
		outcome = await session.script_call_function(_call_params(SET_ITEM_DECLARATION, context, key, value))
	except BiDiError as e:
		raise StorageError(f'Setting the local storage value failed: {e}') from e

	if isinstance(outcome, EvaluateResultException):
		raise StorageError(f'Setting the local storage value failed: {outcome.exception_details}')


async def get_local_storage(session: WebDriverBiDiSession, context: str, key: str) -> str | None:
	"""Return the value stored under ``key``; ``None`` for anything that is not a string."""
	try:
		outcome = await session.script_call_function(_call_params(GET_ITEM_DECLARATION, context, key))
	except BiDiError as e:
		raise StorageError(f'Getting the local storage value failed: {e}') from e

	if isinstance(outcome, EvaluateResultSuccess) and isinstance(outcome.result, StringValue):
		return outcome.result.value
	logger.debug(f'No string stored under local storage key {key!r}: {outcome!r}')
	return None
