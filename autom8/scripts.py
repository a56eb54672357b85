"""Script bodies evaluated in the page and the decoding of their results.

Every script here returns an explicit value, so an empty evaluation result is always treated as
an error. Selectors and attribute names are embedded with ``json.dumps``: a JSON string is a
valid JavaScript string literal with every quote, backslash and control character escaped.
"""

import json
import logging

from autom8.bidi.views import EmptyResult, EvaluateResult, EvaluateResultException, EvaluateResultSuccess, RemoteValue
from autom8.browser.views import BrowserError

logger = logging.getLogger(__name__)

READY_STATE_SCRIPT = 'document.readyState'

SET_ITEM_DECLARATION = '(key, value) => localStorage.setItem(key, value)'
GET_ITEM_DECLARATION = '(key) => localStorage.getItem(key)'


def click_script(selector: str) -> str:
	return f"""
		(() => {{
			const element = document.querySelector({json.dumps(selector)});
			if (element) {{
				element.scrollIntoView({{ behavior: 'auto', block: 'center' }});
				element.click();
				return true;
			}}
			return false;
		}})()
	"""


def clickability_script(selector: str) -> str:
	"""True when the element exists, has a non-zero box, is not hidden and is not disabled."""
	return f"""
		(() => {{
			const element = document.querySelector({json.dumps(selector)});
			if (element) {{
				const rect = element.getBoundingClientRect();
				const style = window.getComputedStyle(element);
				const isVisible = rect.width > 0 && rect.height > 0 &&
					style.visibility !== 'hidden' &&
					style.display !== 'none';
				const isEnabled = !element.disabled;
				return isVisible && isEnabled;
			}}
			return false;
		}})()
	"""


def element_property_script(selector: str, property_name: str) -> str:
	"""Read ``property_name`` from the first match, or ``null`` when nothing matches."""
	return f"""
		(() => {{
			const element = document.querySelector({json.dumps(selector)});
			if (element) {{
				return element.{property_name};
			}}
			return null;
		}})()
	"""


def attribute_script(selector: str, attribute: str) -> str:
	# undefined (not null) marks a missing element: getAttribute already uses null for a missing attribute
	return f"""
		(() => {{
			const element = document.querySelector({json.dumps(selector)});
			if (element) {{
				return element.getAttribute({json.dumps(attribute)});
			}}
			return undefined;
		}})()
	"""


def presence_script(selector: str) -> str:
	return f'document.querySelector({json.dumps(selector)}) !== null'


def unwrap_success(outcome: EvaluateResult, error_cls: type[BrowserError], operation: str) -> RemoteValue:
	"""Return the remote value of a successful evaluation or raise ``error_cls``.

	Args:
		outcome: Result of ``script.evaluate``/``script.callFunction``
		error_cls: Domain error raised for exception and empty outcomes
		operation: Human readable name used in the error message, e.g. ``innerHTML extraction``
	"""
	if isinstance(outcome, EvaluateResultSuccess):
		return outcome.result
	if isinstance(outcome, EvaluateResultException):
		raise error_cls(f'Script exception during {operation}: {outcome.exception_details}')
	if isinstance(outcome, EmptyResult):
		raise error_cls(f'Empty result from {operation} script')
	raise error_cls(f'Unrecognized evaluation outcome from {operation}: {outcome!r}')
