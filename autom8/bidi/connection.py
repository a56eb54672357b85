"""WebSocket command channel for a WebDriver BiDi session.

Commands are JSON messages ``{"id", "method", "params"}``. A single reader task resolves the
pending future matching each response id; events are logged and dropped since autom8 polls
page state instead of subscribing to it.
"""

import asyncio
import json
import logging
from typing import Any

import aiohttp

from autom8.bidi.views import BiDiCommandError, BiDiConnectionClosed, BiDiError, BiDiTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 30.0
MAX_MESSAGE_SIZE = 50 * 1024 * 1024  # full-page screenshots can be large


class BiDiConnection:
	"""Manages the WebSocket connection to a BiDi remote end."""

	def __init__(self, ws_url: str, command_timeout: float = DEFAULT_COMMAND_TIMEOUT):
		self.ws_url = ws_url
		self.command_timeout = command_timeout
		self._ws: aiohttp.ClientWebSocketResponse | None = None
		self._session: aiohttp.ClientSession | None = None
		self._msg_id = 0
		self._pending: dict[int, asyncio.Future] = {}
		self._reader_task: asyncio.Task | None = None
		self._closed = False

	@property
	def is_alive(self) -> bool:
		return (
			not self._closed
			and self._ws is not None
			and not self._ws.closed
			and self._reader_task is not None
			and not self._reader_task.done()
		)

	async def connect(self) -> None:
		self._session = aiohttp.ClientSession()
		try:
			self._ws = await self._session.ws_connect(self.ws_url, max_msg_size=MAX_MESSAGE_SIZE)
		except Exception:
			await self._session.close()
			self._session = None
			raise
		self._reader_task = asyncio.create_task(self._read_loop())
		self._closed = False
		logger.debug(f'Connected to BiDi endpoint {self.ws_url}')

	async def close(self) -> None:
		self._closed = True
		if self._reader_task:
			self._reader_task.cancel()
			try:
				await self._reader_task
			except asyncio.CancelledError:
				pass
		if self._ws:
			await self._ws.close()
		if self._session:
			await self._session.close()
		self._fail_pending(BiDiConnectionClosed('Connection closed'))

	def _fail_pending(self, error: BiDiError) -> None:
		for future in self._pending.values():
			if not future.done():
				future.set_exception(error)
		self._pending.clear()

	async def _read_loop(self) -> None:
		assert self._ws is not None
		try:
			async for msg in self._ws:
				if msg.type == aiohttp.WSMsgType.TEXT:
					self._dispatch(msg.data)
				elif msg.type in (aiohttp.WSMsgType.CLOSED, aiohttp.WSMsgType.ERROR):
					break
		except asyncio.CancelledError:
			pass
		finally:
			self._fail_pending(BiDiConnectionClosed(f'Connection to {self.ws_url} was closed by the remote end'))

	def _dispatch(self, raw: str) -> None:
		try:
			data = json.loads(raw)
		except json.JSONDecodeError:
			logger.warning(f'Dropping malformed BiDi message: {raw[:200]}')
			return

		if data.get('type') == 'event':
			logger.debug(f'BiDi event {data.get("method")}')
			return

		msg_id = data.get('id')
		future = self._pending.get(msg_id) if msg_id is not None else None
		if future is None:
			# errors that could not be tied to a command come back with id null
			logger.debug(f'Unmatched BiDi message: {data}')
			return
		if not future.done():
			future.set_result(data)

	async def send(self, method: str, params: dict[str, Any] | None = None, timeout: float | None = None) -> dict[str, Any]:
		"""Send a BiDi command and wait for its result."""
		if not self.is_alive:
			raise BiDiConnectionClosed(f'Cannot send {method}: connection is closed')
		assert self._ws is not None

		self._msg_id += 1
		msg_id = self._msg_id
		message = {'id': msg_id, 'method': method, 'params': params or {}}

		loop = asyncio.get_running_loop()
		future: asyncio.Future = loop.create_future()
		self._pending[msg_id] = future

		try:
			await self._ws.send_json(message)
			response = await asyncio.wait_for(future, timeout=timeout or self.command_timeout)
		except asyncio.TimeoutError:
			raise BiDiTimeoutError(f'{method} timed out after {timeout or self.command_timeout}s')
		except (aiohttp.ClientError, ConnectionResetError) as e:
			raise BiDiConnectionClosed(f'Sending {method} failed: {e}') from e
		finally:
			self._pending.pop(msg_id, None)

		if response.get('type') == 'error':
			raise BiDiCommandError(method, response.get('error', 'unknown error'), response.get('message', ''))
		return response.get('result') or {}

	async def __aenter__(self):
		await self.connect()
		return self

	async def __aexit__(self, *args):
		await self.close()
