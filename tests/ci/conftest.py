"""
Shared fixtures for autom8 tests.

Two doubles stand in for the WebDriver BiDi transport:
- ``bidi_session``: a MagicMock whose verbs are AsyncMocks, for asserting exact parameters and error branches
- ``FakeRemoteEnd``: a tiny in-memory page that answers autom8's own scripts, for end-to-end scenarios
"""

import base64
import json
import re
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import (
	BooleanValue,
	BrowsingContextInfo,
	CaptureScreenshotResult,
	EmptyResult,
	EvaluateResultException,
	EvaluateResultSuccess,
	ExceptionDetails,
	GetTreeResult,
	NavigateResult,
	NullValue,
	RemoteValue,
	SessionState,
	StringValue,
	UndefinedValue,
)
from autom8.browser import Browser
from autom8.scripts import READY_STATE_SCRIPT

BIDI_VERBS = (
	'start',
	'close',
	'browsing_context_get_tree',
	'browsing_context_navigate',
	'browsing_context_reload',
	'browsing_context_traverse_history',
	'browsing_context_capture_screenshot',
	'script_evaluate',
	'script_call_function',
)


def success(value: RemoteValue) -> EvaluateResultSuccess:
	return EvaluateResultSuccess(result=value, realm='realm-1')


def string_result(value: str) -> EvaluateResultSuccess:
	return success(StringValue(value=value))


def bool_result(value: bool) -> EvaluateResultSuccess:
	return success(BooleanValue(value=value))


def exception_result(text: str = 'TypeError: boom') -> EvaluateResultException:
	return EvaluateResultException(exception_details=ExceptionDetails(text=text, lineNumber=0, columnNumber=5))


def empty_result() -> EmptyResult:
	return EmptyResult()


@pytest.fixture
def bidi_session():
	"""A WebDriverBiDiSession double with every verb as an AsyncMock."""
	session = MagicMock(spec=WebDriverBiDiSession)
	for verb in BIDI_VERBS:
		setattr(session, verb, AsyncMock())
	session.browsing_context_get_tree.return_value = GetTreeResult(contexts=[BrowsingContextInfo(context='ctx-1')])
	return session


@pytest.fixture
def browser(bidi_session):
	"""A Browser wired to ``bidi_session`` with its context already resolved."""
	browser = Browser('localhost', 4444)
	browser.webdriverbidi_session = bidi_session
	browser.browsing_context = 'ctx-1'
	return browser


_QUERY_SELECTOR = re.compile(r'document\.querySelector\(("(?:[^"\\]|\\.)*")\)')
_GET_ATTRIBUTE = re.compile(r'getAttribute\(("(?:[^"\\]|\\.)*")\)')
_PROPERTY_READ = re.compile(r'return element\.(\w+);')


class FakeRemoteEnd:
	"""In-memory remote end that understands the scripts autom8 sends.

	``elements`` maps a CSS selector to a dict with optional ``innerHTML``, ``innerText``,
	``attributes`` and ``clickable`` keys. ``ready_states`` is consumed one per readiness poll,
	the last entry repeating forever.
	"""

	def __init__(
		self,
		elements: dict[str, dict[str, Any]] | None = None,
		ready_states: list[str] | None = None,
		contexts: list[str] | None = None,
	):
		self.elements = elements or {}
		self.ready_states = list(ready_states or ['complete'])
		self.contexts = ['ctx-1'] if contexts is None else contexts
		self.storage: dict[str, str] = {}
		self.clicked: list[str] = []
		self.history: list[str] = []
		self.commands: list[str] = []
		self.on_click: dict[str, list[str]] = {}
		self.state = SessionState.NOT_STARTED

	async def start(self) -> None:
		self.state = SessionState.STARTED

	async def close(self) -> None:
		self.state = SessionState.CLOSED

	async def browsing_context_get_tree(self, params=None) -> GetTreeResult:
		self.commands.append('browsingContext.getTree')
		return GetTreeResult(contexts=[BrowsingContextInfo(context=c) for c in self.contexts])

	async def browsing_context_navigate(self, params) -> NavigateResult:
		self.commands.append('browsingContext.navigate')
		self.history.append(params.url)
		return NavigateResult(navigation='nav-1', url=params.url)

	async def browsing_context_reload(self, params) -> NavigateResult:
		self.commands.append('browsingContext.reload')
		return NavigateResult(url=self.history[-1] if self.history else 'about:blank')

	async def browsing_context_traverse_history(self, params) -> None:
		self.commands.append(f'browsingContext.traverseHistory({params.delta})')

	async def browsing_context_capture_screenshot(self, params) -> CaptureScreenshotResult:
		self.commands.append('browsingContext.captureScreenshot')
		return CaptureScreenshotResult(data=base64.b64encode(b'\x89PNG fake').decode())

	def _next_ready_state(self) -> str:
		if len(self.ready_states) > 1:
			return self.ready_states.pop(0)
		return self.ready_states[0]

	async def script_evaluate(self, params) -> EvaluateResultSuccess:
		self.commands.append('script.evaluate')
		expression = params.expression
		if expression == READY_STATE_SCRIPT:
			return string_result(self._next_ready_state())

		match = _QUERY_SELECTOR.search(expression)
		assert match is not None, f'unexpected script: {expression}'
		selector = json.loads(match.group(1))
		element = self.elements.get(selector)

		if 'getBoundingClientRect' in expression:
			return bool_result(element is not None and element.get('clickable', True))
		if '.click()' in expression:
			if element is None:
				return bool_result(False)
			self.clicked.append(selector)
			self.ready_states = list(self.on_click.get(selector, self.ready_states))
			return bool_result(True)
		if 'getAttribute' in expression:
			if element is None:
				return success(UndefinedValue())
			attribute = json.loads(_GET_ATTRIBUTE.search(expression).group(1))
			value = element.get('attributes', {}).get(attribute)
			return success(NullValue()) if value is None else string_result(value)
		if expression.rstrip().endswith('!== null'):
			return bool_result(element is not None)

		prop = _PROPERTY_READ.search(expression).group(1)
		if element is None:
			return success(NullValue())
		return string_result(element.get(prop, ''))

	async def script_call_function(self, params) -> EvaluateResultSuccess:
		self.commands.append('script.callFunction')
		args = [argument.value for argument in params.arguments or []]
		if 'setItem' in params.function_declaration:
			self.storage[args[0]] = args[1]
			return success(UndefinedValue())
		value = self.storage.get(args[0])
		return success(NullValue()) if value is None else string_result(value)


@pytest.fixture
def remote_end():
	return FakeRemoteEnd(
		elements={
			'h1': {'innerHTML': 'Example Domain', 'innerText': 'Example Domain'},
			'a': {'innerHTML': 'More information...', 'innerText': 'More information...', 'attributes': {}},
			'a#next': {'innerHTML': 'Next', 'attributes': {'href': '/page/2', 'id': 'next'}},
			'input[name="q"]': {'innerHTML': '', 'attributes': {'name': 'q', 'value': 'hello'}},
		}
	)


@pytest.fixture
def fake_browser(remote_end):
	"""An unopened Browser driving ``remote_end``."""
	browser = Browser('localhost', 4444)
	browser.webdriverbidi_session = remote_end  # type: ignore[assignment]
	return browser
