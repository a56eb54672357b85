import logging

from autom8.bidi.session import WebDriverBiDiSession
from autom8.bidi.views import BiDiError, CaptureScreenshotParameters, ImageFormat
from autom8.browser.views import ScreenshotError

logger = logging.getLogger(__name__)


async def take_screenshot(session: WebDriverBiDiSession, context: str) -> str:
	"""Capture the whole document as PNG.

	Returns:
		Base64-encoded image data, left undecoded
	"""
	params = CaptureScreenshotParameters(context=context, origin='document', format=ImageFormat(type='image/png'))
	try:
		result = await session.browsing_context_capture_screenshot(params)
	except BiDiError as e:
		raise ScreenshotError(f'Taking the screenshot failed: {e}') from e

	logger.debug(f'Screenshot captured ({len(result.data)} base64 chars)')
	return result.data
