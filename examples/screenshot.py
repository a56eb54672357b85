"""
Save a screenshot of rust-lang.org, requesting explicit capabilities.

Prerequisites:
1. A WebDriver BiDi capable driver listening on localhost:4444
"""

import asyncio
from pathlib import Path

from dotenv import load_dotenv

from autom8 import Browser, CapabilitiesRequest, CapabilityRequest
from autom8.cli import save_screenshot

load_dotenv()


async def main():
	capabilities = CapabilitiesRequest(always_match=CapabilityRequest(accept_insecure_certs=True))
	browser = Browser.with_capabilities(capabilities, 'localhost', 4444)
	await browser.open()

	await browser.load('https://www.rust-lang.org/')
	await browser.wait_for_page_load()

	png = await browser.take_screenshot()
	path = save_screenshot(png, Path('screenshot.png'))
	print(f'Screenshot saved to {path}')

	await browser.close()


if __name__ == '__main__':
	asyncio.run(main())
