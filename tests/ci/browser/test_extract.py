"""Tests for innerHTML, innerText and attribute extraction."""

import pytest

from autom8.bidi.views import BiDiCommandError, BooleanValue, NullValue, OtherRemoteValue, UndefinedValue
from autom8.browser import ElementError
from tests.ci.conftest import empty_result, exception_result, string_result, success


async def test_inner_html(browser, bidi_session):
	bidi_session.script_evaluate.return_value = string_result('<b>Example</b> Domain')

	assert await browser.extract_inner_html('h1') == '<b>Example</b> Domain'

	params = bidi_session.script_evaluate.await_args.args[0]
	assert 'return element.innerHTML;' in params.expression
	assert params.target.context == 'ctx-1'


async def test_inner_text_uses_inner_text_property(browser, bidi_session):
	bidi_session.script_evaluate.return_value = string_result('Example Domain')

	assert await browser.extract_inner_text('h1') == 'Example Domain'
	assert 'return element.innerText;' in bidi_session.script_evaluate.await_args.args[0].expression


async def test_empty_string_is_a_value(browser, bidi_session):
	bidi_session.script_evaluate.return_value = string_result('')

	assert await browser.extract_inner_html('div.empty') == ''


async def test_missing_element(browser, bidi_session):
	bidi_session.script_evaluate.return_value = success(NullValue())

	with pytest.raises(ElementError) as exc_info:
		await browser.extract_inner_html('div.nonexistent')

	assert exc_info.value.message == 'Element not found with selector: div.nonexistent'
	assert str(exc_info.value) == 'Element error: Element not found with selector: div.nonexistent'


@pytest.mark.parametrize('method,prop', [('extract_inner_html', 'innerHTML'), ('extract_inner_text', 'innerText')])
async def test_unexpected_value_type(browser, bidi_session, method, prop):
	bidi_session.script_evaluate.return_value = success(OtherRemoteValue(type='object', value=[]))

	with pytest.raises(ElementError, match=f'Unexpected result type from {prop} extraction'):
		await getattr(browser, method)('h1')


async def test_script_exception(browser, bidi_session):
	bidi_session.script_evaluate.return_value = exception_result('SyntaxError: bad selector')

	with pytest.raises(ElementError, match='Script exception during innerHTML extraction: SyntaxError: bad selector'):
		await browser.extract_inner_html('::bad')


async def test_empty_result(browser, bidi_session):
	bidi_session.script_evaluate.return_value = empty_result()

	with pytest.raises(ElementError, match='Empty result from innerText extraction script'):
		await browser.extract_inner_text('h1')


async def test_transport_failure(browser, bidi_session):
	bidi_session.script_evaluate.side_effect = BiDiCommandError('script.evaluate', 'no such frame')

	with pytest.raises(ElementError, match='Script evaluation failed: script.evaluate failed: no such frame'):
		await browser.extract_inner_html('h1')


class TestExtractAttribute:
	async def test_attribute_value(self, browser, bidi_session):
		bidi_session.script_evaluate.return_value = string_result('https://www.iana.org/domains/example')

		assert await browser.extract_attribute('a', 'href') == 'https://www.iana.org/domains/example'
		assert 'getAttribute("href")' in bidi_session.script_evaluate.await_args.args[0].expression

	async def test_missing_attribute_is_none(self, browser, bidi_session):
		bidi_session.script_evaluate.return_value = success(NullValue())

		assert await browser.extract_attribute('a', 'data-missing') is None

	async def test_missing_element_raises(self, browser, bidi_session):
		bidi_session.script_evaluate.return_value = success(UndefinedValue())

		with pytest.raises(ElementError, match='Element not found with selector: a.nonexistent'):
			await browser.extract_attribute('a.nonexistent', 'href')

	async def test_unexpected_value_type(self, browser, bidi_session):
		bidi_session.script_evaluate.return_value = success(BooleanValue(value=True))

		with pytest.raises(ElementError, match='Unexpected result type from attribute extraction'):
			await browser.extract_attribute('a', 'href')

	async def test_selector_and_attribute_are_escaped(self, browser, bidi_session):
		bidi_session.script_evaluate.return_value = string_result('x')

		await browser.extract_attribute('a[title="say \\"hi\\""]', 'data-"q"')

		expression = bidi_session.script_evaluate.await_args.args[0].expression
		assert 'document.querySelector("a[title=\\"say \\\\\\"hi\\\\\\"\\"]")' in expression
		assert 'getAttribute("data-\\"q\\"")' in expression
