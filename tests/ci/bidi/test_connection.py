"""Tests for BiDiConnection against a real aiohttp WebSocket server."""

import asyncio
import json

import pytest
from aiohttp import test_utils, web

from autom8.bidi.connection import BiDiConnection
from autom8.bidi.views import BiDiCommandError, BiDiConnectionClosed, BiDiTimeoutError


def _remote_end(received: list[dict]):
	"""A scripted remote end. The method name decides how it answers."""

	delayed: list[asyncio.Task] = []

	async def reply_later(ws: web.WebSocketResponse, data: dict) -> None:
		await asyncio.sleep(0.1)
		await ws.send_json({'type': 'success', 'id': data['id'], 'result': {'echo': data['params']}})

	async def handler(request: web.Request) -> web.WebSocketResponse:
		ws = web.WebSocketResponse()
		await ws.prepare(request)

		async for msg in ws:
			data = json.loads(msg.data)
			received.append(data)
			method = data['method']
			if method == 'test.echo':
				await ws.send_json({'type': 'success', 'id': data['id'], 'result': {'echo': data['params']}})
			elif method == 'test.slowEcho':
				delayed.append(asyncio.create_task(reply_later(ws, data)))
			elif method == 'test.withEvent':
				await ws.send_str('not json at all')
				await ws.send_json({'type': 'event', 'method': 'log.entryAdded', 'params': {}})
				await ws.send_json({'type': 'error', 'id': None, 'error': 'invalid argument', 'message': 'unrelated'})
				await ws.send_json({'type': 'success', 'id': data['id'], 'result': {'ok': True}})
			elif method == 'test.empty':
				await ws.send_json({'type': 'success', 'id': data['id']})
			elif method == 'test.fail':
				await ws.send_json(
					{'type': 'error', 'id': data['id'], 'error': 'no such frame', 'message': 'Browsing context not found'}
				)
			elif method == 'test.hangUp':
				await ws.close()
			# test.hang gets no answer
		return ws

	return handler


@pytest.fixture
def received():
	return []


@pytest.fixture
async def ws_url(received):
	app = web.Application()
	app.router.add_get('/session/abc', _remote_end(received))
	server = test_utils.TestServer(app)
	await server.start_server()
	yield f'ws://{server.host}:{server.port}/session/abc'
	await server.close()


@pytest.fixture
async def connection(ws_url):
	conn = BiDiConnection(ws_url, command_timeout=2)
	await conn.connect()
	yield conn
	await conn.close()


async def test_send_returns_result(connection, received):
	result = await connection.send('test.echo', {'context': 'ctx-1'})

	assert result == {'echo': {'context': 'ctx-1'}}
	assert received == [{'id': 1, 'method': 'test.echo', 'params': {'context': 'ctx-1'}}]


async def test_params_default_to_empty_object(connection, received):
	await connection.send('test.echo')

	assert received[0]['params'] == {}


async def test_ids_increase(connection, received):
	await connection.send('test.echo')
	await connection.send('test.echo')

	assert [message['id'] for message in received] == [1, 2]


async def test_concurrent_commands_are_correlated_by_id(connection):
	"""The slow reply arrives after the fast one; each caller still gets its own result."""
	slow, fast = await asyncio.gather(
		connection.send('test.slowEcho', {'n': 'slow'}),
		connection.send('test.echo', {'n': 'fast'}),
	)

	assert slow == {'echo': {'n': 'slow'}}
	assert fast == {'echo': {'n': 'fast'}}


async def test_events_and_noise_are_ignored(connection):
	assert await connection.send('test.withEvent') == {'ok': True}
	assert connection.is_alive


async def test_missing_result_is_empty_dict(connection):
	assert await connection.send('test.empty') == {}


async def test_error_response_raises_command_error(connection):
	with pytest.raises(BiDiCommandError) as exc_info:
		await connection.send('test.fail')

	error = exc_info.value
	assert error.method == 'test.fail'
	assert error.error == 'no such frame'
	assert error.message == 'Browsing context not found'
	assert str(error) == 'test.fail failed: no such frame - Browsing context not found'


async def test_timeout(connection):
	with pytest.raises(BiDiTimeoutError, match='test.hang timed out'):
		await connection.send('test.hang', timeout=0.1)

	# the connection stays usable after a timed out command
	assert await connection.send('test.echo') == {'echo': {}}


async def test_remote_close_fails_pending_command(connection):
	with pytest.raises(BiDiConnectionClosed):
		await connection.send('test.hangUp')

	await asyncio.sleep(0.05)
	assert not connection.is_alive
	with pytest.raises(BiDiConnectionClosed, match='connection is closed'):
		await connection.send('test.echo')


async def test_send_after_close(ws_url):
	conn = BiDiConnection(ws_url)
	await conn.connect()
	await conn.close()

	with pytest.raises(BiDiConnectionClosed):
		await conn.send('test.echo')


async def test_context_manager(ws_url):
	async with BiDiConnection(ws_url) as conn:
		assert conn.is_alive
		assert await conn.send('test.echo', {'a': 1}) == {'echo': {'a': 1}}

	assert not conn.is_alive


async def test_connect_failure_propagates(ws_url):
	conn = BiDiConnection(ws_url.replace('/session/abc', '/no-such-path'))

	with pytest.raises(Exception):
		await conn.connect()

	assert not conn.is_alive
