"""WebDriver BiDi session: HTTP handshake plus the browsingContext/script commands autom8 uses.

The session is created through the classic ``POST /session`` endpoint with ``webSocketUrl``
requested, then every command travels over the returned WebSocket.
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from autom8.bidi.connection import DEFAULT_COMMAND_TIMEOUT, BiDiConnection
from autom8.bidi.views import (
	BiDiResponseError,
	BiDiSessionError,
	CallFunctionParameters,
	CapabilitiesRequest,
	CaptureScreenshotParameters,
	CaptureScreenshotResult,
	EvaluateParameters,
	EvaluateResult,
	GetTreeParameters,
	GetTreeResult,
	NavigateParameters,
	NavigateResult,
	ReloadParameters,
	SessionState,
	TraverseHistoryParameters,
	parse_evaluate_result,
)

logger = logging.getLogger(__name__)

ResultT = TypeVar('ResultT', bound=BaseModel)

HTTP_TIMEOUT = 30.0


def _dump(params: BaseModel) -> dict[str, Any]:
	return params.model_dump(mode='json', by_alias=True, exclude_none=True)


class WebDriverBiDiSession:
	"""One remote-end session. Not reusable: a closed session cannot be started again."""

	def __init__(
		self,
		host: str,
		port: int,
		capabilities: CapabilitiesRequest | None = None,
		command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
	):
		self.host = host
		self.port = port
		self.capabilities = capabilities or CapabilitiesRequest()
		self.command_timeout = command_timeout
		self.state = SessionState.NOT_STARTED
		self.session_id: str | None = None
		self.websocket_url: str | None = None
		self._connection: BiDiConnection | None = None

	@property
	def base_url(self) -> str:
		return f'http://{self.host}:{self.port}'

	def __repr__(self) -> str:
		return f'WebDriverBiDiSession({self.base_url}, state={self.state.value}, id={self.session_id})'

	# ------------------------------------------------------------------ #
	# Lifecycle
	# ------------------------------------------------------------------ #

	async def start(self) -> None:
		if self.state != SessionState.NOT_STARTED:
			raise BiDiSessionError(f'Cannot start a session that is {self.state.value}')

		url = f'{self.base_url}/session'
		payload = {'capabilities': self.capabilities.to_payload()}
		logger.debug(f'POST {url} with capabilities {payload["capabilities"]}')

		try:
			async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
				response = await client.post(url, json=payload)
		except httpx.TimeoutException as e:
			raise BiDiSessionError(f'Timeout while creating a session at {url}') from e
		except httpx.HTTPError as e:
			raise BiDiSessionError(f'Failed to connect to WebDriver at {url}: {e}') from e

		value = self._response_value(response)
		if not response.is_success:
			raise BiDiSessionError(f'Session creation failed: HTTP {response.status_code} - {self._describe_error(value)}')

		session_id = value.get('sessionId')
		websocket_url = (value.get('capabilities') or {}).get('webSocketUrl')
		if not session_id:
			raise BiDiSessionError('Session creation response did not contain a sessionId')
		if not isinstance(websocket_url, str):
			raise BiDiSessionError('The remote end did not return a webSocketUrl; it may not support WebDriver BiDi')

		connection = BiDiConnection(websocket_url, command_timeout=self.command_timeout)
		try:
			await connection.connect()
		except Exception as e:
			try:
				await self._delete_session(session_id)
			except BiDiSessionError as delete_error:
				logger.warning(f'Could not delete session {session_id} after the WebSocket failed: {delete_error}')
			raise BiDiSessionError(f'Failed to open the BiDi WebSocket at {websocket_url}: {e}') from e

		self.session_id = session_id
		self.websocket_url = websocket_url
		self._connection = connection
		self.state = SessionState.STARTED
		logger.debug(f'BiDi session {session_id} started on {websocket_url}')

	async def close(self) -> None:
		if self.state != SessionState.STARTED:
			raise BiDiSessionError(f'Cannot close a session that is {self.state.value}')
		self.state = SessionState.CLOSED

		if self._connection is not None:
			await self._connection.close()
			self._connection = None

		await self._delete_session(self.session_id)
		logger.debug(f'BiDi session {self.session_id} closed')

	async def _delete_session(self, session_id: str | None) -> None:
		url = f'{self.base_url}/session/{session_id}'
		try:
			async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
				response = await client.delete(url)
		except httpx.HTTPError as e:
			raise BiDiSessionError(f'Failed to delete session {session_id}: {e}') from e

		if not response.is_success:
			value = self._response_value(response)
			raise BiDiSessionError(
				f'Deleting session {session_id} failed: HTTP {response.status_code} - {self._describe_error(value)}'
			)

	@staticmethod
	def _response_value(response: httpx.Response) -> dict[str, Any]:
		try:
			body = response.json()
		except ValueError:
			return {}
		value = body.get('value') if isinstance(body, dict) else None
		return value if isinstance(value, dict) else {}

	@staticmethod
	def _describe_error(value: dict[str, Any]) -> str:
		error = value.get('error', 'unknown error')
		message = value.get('message')
		return f'{error}: {message}' if message else error

	# ------------------------------------------------------------------ #
	# Commands
	# ------------------------------------------------------------------ #

	async def send_command(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
		if self.state != SessionState.STARTED or self._connection is None:
			raise BiDiSessionError(f'Cannot send {method}: session is {self.state.value}')
		return await self._connection.send(method, params)

	@staticmethod
	def _validate(model: type[ResultT], method: str, data: dict[str, Any]) -> ResultT:
		try:
			return model.model_validate(data)
		except ValidationError as e:
			raise BiDiResponseError(f'Unexpected {method} result: {e}') from e

	async def browsing_context_get_tree(self, params: GetTreeParameters | None = None) -> GetTreeResult:
		data = await self.send_command('browsingContext.getTree', _dump(params or GetTreeParameters()))
		return self._validate(GetTreeResult, 'browsingContext.getTree', data)

	async def browsing_context_navigate(self, params: NavigateParameters) -> NavigateResult:
		data = await self.send_command('browsingContext.navigate', _dump(params))
		return self._validate(NavigateResult, 'browsingContext.navigate', data)

	async def browsing_context_reload(self, params: ReloadParameters) -> NavigateResult:
		data = await self.send_command('browsingContext.reload', _dump(params))
		return self._validate(NavigateResult, 'browsingContext.reload', data)

	async def browsing_context_traverse_history(self, params: TraverseHistoryParameters) -> None:
		await self.send_command('browsingContext.traverseHistory', _dump(params))

	async def browsing_context_capture_screenshot(self, params: CaptureScreenshotParameters) -> CaptureScreenshotResult:
		data = await self.send_command('browsingContext.captureScreenshot', _dump(params))
		return self._validate(CaptureScreenshotResult, 'browsingContext.captureScreenshot', data)

	async def script_evaluate(self, params: EvaluateParameters) -> EvaluateResult:
		data = await self.send_command('script.evaluate', _dump(params))
		return self._parse_evaluation('script.evaluate', data)

	async def script_call_function(self, params: CallFunctionParameters) -> EvaluateResult:
		data = await self.send_command('script.callFunction', _dump(params))
		return self._parse_evaluation('script.callFunction', data)

	@staticmethod
	def _parse_evaluation(method: str, data: dict[str, Any]) -> EvaluateResult:
		try:
			return parse_evaluate_result(data)
		except ValidationError as e:
			raise BiDiResponseError(f'Unexpected {method} result: {e}') from e

