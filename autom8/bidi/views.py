"""Typed models for the subset of WebDriver BiDi that autom8 speaks.

Parameters are serialized with ``model_dump(by_alias=True, exclude_none=True)`` so the
python-side names stay snake_case while the wire keeps the protocol's camelCase.
"""

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ReadinessState(str, Enum):
	"""Document readiness a navigation command waits for"""

	NONE = 'none'
	INTERACTIVE = 'interactive'
	COMPLETE = 'complete'


class SessionState(str, Enum):
	NOT_STARTED = 'not_started'
	STARTED = 'started'
	CLOSED = 'closed'


# Capabilities
class CapabilityRequest(BaseModel):
	"""A single capability set. Unknown vendor keys (``moz:firefoxOptions`` etc.) pass through untouched."""

	model_config = ConfigDict(extra='allow', populate_by_name=True)

	accept_insecure_certs: bool | None = Field(default=None, alias='acceptInsecureCerts')
	browser_name: str | None = Field(default=None, alias='browserName')
	browser_version: str | None = Field(default=None, alias='browserVersion')
	platform_name: str | None = Field(default=None, alias='platformName')
	proxy: dict[str, Any] | None = None
	unhandled_prompt_behavior: dict[str, Any] | None = Field(default=None, alias='unhandledPromptBehavior')
	web_socket_url: bool = Field(default=True, alias='webSocketUrl')


class CapabilitiesRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	always_match: CapabilityRequest = Field(default_factory=CapabilityRequest, alias='alwaysMatch')
	first_match: list[CapabilityRequest] | None = Field(default=None, alias='firstMatch')

	def to_payload(self) -> dict[str, Any]:
		"""Serialize for ``POST /session``. A BiDi WebSocket is always requested."""
		payload = self.model_dump(by_alias=True, exclude_none=True)
		payload['alwaysMatch']['webSocketUrl'] = True
		return payload


# Command parameters
class ContextTarget(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	context: str
	sandbox: str | None = None


class GetTreeParameters(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	max_depth: int | None = Field(default=None, alias='maxDepth')
	root: str | None = None


class NavigateParameters(BaseModel):
	context: str
	url: str
	wait: ReadinessState | None = None


class ReloadParameters(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	context: str
	ignore_cache: bool | None = Field(default=None, alias='ignoreCache')
	wait: ReadinessState | None = None


class TraverseHistoryParameters(BaseModel):
	context: str
	delta: int


class ImageFormat(BaseModel):
	type: str = 'image/png'
	quality: float | None = Field(default=None, ge=0, le=1)


class CaptureScreenshotParameters(BaseModel):
	context: str
	origin: Literal['viewport', 'document'] | None = None
	format: ImageFormat | None = None
	clip: dict[str, Any] | None = None


class StringLocalValue(BaseModel):
	"""Primitive string argument for ``script.callFunction``"""

	type: Literal['string'] = 'string'
	value: str


class EvaluateParameters(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	expression: str
	target: ContextTarget
	await_promise: bool = Field(default=False, alias='awaitPromise')
	result_ownership: Literal['root', 'none'] | None = Field(default=None, alias='resultOwnership')
	user_activation: bool | None = Field(default=None, alias='userActivation')


class CallFunctionParameters(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	function_declaration: str = Field(alias='functionDeclaration')
	await_promise: bool = Field(default=False, alias='awaitPromise')
	target: ContextTarget
	arguments: list[StringLocalValue] | None = None
	result_ownership: Literal['root', 'none'] | None = Field(default=None, alias='resultOwnership')
	user_activation: bool | None = Field(default=None, alias='userActivation')


# Command results
class BrowsingContextInfo(BaseModel):
	model_config = ConfigDict(extra='allow', populate_by_name=True)

	context: str
	url: str = 'about:blank'
	children: list['BrowsingContextInfo'] | None = None
	parent: str | None = None
	user_context: str | None = Field(default=None, alias='userContext')


class GetTreeResult(BaseModel):
	contexts: list[BrowsingContextInfo]


class NavigateResult(BaseModel):
	navigation: str | None = None
	url: str = ''


class CaptureScreenshotResult(BaseModel):
	data: str


# Remote values
class StringValue(BaseModel):
	type: Literal['string'] = 'string'
	value: str


class BooleanValue(BaseModel):
	type: Literal['boolean'] = 'boolean'
	value: bool


class NullValue(BaseModel):
	type: Literal['null'] = 'null'


class UndefinedValue(BaseModel):
	type: Literal['undefined'] = 'undefined'


class NumberValue(BaseModel):
	type: Literal['number'] = 'number'
	# NaN, -0, Infinity and -Infinity arrive as strings
	value: int | float | str


class OtherRemoteValue(BaseModel):
	"""Any remote value that is not one of the primitives above (object, array, node, bigint, ...)"""

	model_config = ConfigDict(extra='allow')

	type: str
	value: Any = None


RemoteValue = Union[StringValue, BooleanValue, NullValue, UndefinedValue, NumberValue, OtherRemoteValue]

_PRIMITIVE_VALUE_MODELS: dict[str, type[BaseModel]] = {
	'string': StringValue,
	'boolean': BooleanValue,
	'null': NullValue,
	'undefined': UndefinedValue,
	'number': NumberValue,
}


def parse_remote_value(data: dict[str, Any]) -> RemoteValue:
	model = _PRIMITIVE_VALUE_MODELS.get(data.get('type', ''), OtherRemoteValue)
	return model.model_validate(data)  # type: ignore[return-value]


class ExceptionDetails(BaseModel):
	model_config = ConfigDict(extra='allow', populate_by_name=True)

	text: str = ''
	line_number: int | None = Field(default=None, alias='lineNumber')
	column_number: int | None = Field(default=None, alias='columnNumber')
	exception: dict[str, Any] | None = None
	stack_trace: dict[str, Any] | None = Field(default=None, alias='stackTrace')

	def __str__(self) -> str:
		if self.line_number is not None:
			return f'{self.text} (line {self.line_number}, column {self.column_number})'
		return self.text


class EvaluateResultSuccess(BaseModel):
	result: RemoteValue
	realm: str | None = None


class EvaluateResultException(BaseModel):
	exception_details: ExceptionDetails
	realm: str | None = None


class EmptyResult(BaseModel):
	"""The command completed without reporting a value"""

	model_config = ConfigDict(extra='allow')


EvaluateResult = Union[EvaluateResultSuccess, EvaluateResultException, EmptyResult]


def parse_evaluate_result(data: dict[str, Any]) -> EvaluateResult:
	"""Turn a raw ``script.evaluate``/``script.callFunction`` result into one of the three outcomes."""
	result_type = data.get('type')
	if result_type == 'success':
		return EvaluateResultSuccess(result=parse_remote_value(data.get('result') or {}), realm=data.get('realm'))
	if result_type == 'exception':
		details = ExceptionDetails.model_validate(data.get('exceptionDetails') or {})
		return EvaluateResultException(exception_details=details, realm=data.get('realm'))
	return EmptyResult.model_validate(data)


# Errors
class BiDiError(Exception):
	"""Base class for transport and protocol failures"""

	pass


class BiDiSessionError(BiDiError):
	"""Raised when a session cannot be started, closed or used in its current state"""

	pass


class BiDiConnectionClosed(BiDiError):
	pass


class BiDiTimeoutError(BiDiError):
	pass


class BiDiResponseError(BiDiError):
	"""Raised when a command result does not have the expected shape"""

	pass


class BiDiCommandError(BiDiError):
	"""An ``{"type": "error"}`` response from the remote end."""

	def __init__(self, method: str, error: str, message: str = ''):
		self.method = method
		self.error = error
		self.message = message
		super().__init__(f'{method} failed: {error}' + (f' - {message}' if message else ''))
