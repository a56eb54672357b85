"""WebDriver BiDi transport used by autom8.

Example:
    from autom8.bidi import WebDriverBiDiSession

    session = WebDriverBiDiSession('localhost', 4444)
    await session.start()
    tree = await session.browsing_context_get_tree()
    await session.close()
"""

from autom8.bidi.connection import BiDiConnection
from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import (
	BiDiCommandError,
	BiDiConnectionClosed,
	BiDiError,
	BiDiResponseError,
	BiDiSessionError,
	BiDiTimeoutError,
	CapabilitiesRequest,
	CapabilityRequest,
	EvaluateResult,
	ReadinessState,
	RemoteValue,
	SessionState,
)

__all__ = [
	'BiDiConnection',
	'WebDriverBiDiSession',
	# Capabilities
	'CapabilitiesRequest',
	'CapabilityRequest',
	# Protocol types
	'EvaluateResult',
	'ReadinessState',
	'RemoteValue',
	'SessionState',
	# Errors
	'BiDiError',
	'BiDiCommandError',
	'BiDiConnectionClosed',
	'BiDiResponseError',
	'BiDiSessionError',
	'BiDiTimeoutError',
]
