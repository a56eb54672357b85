"""
Open a page, go back and forth in history, then close the browser.

Prerequisites:
1. A WebDriver BiDi capable driver listening on localhost:4444 (e.g. `geckodriver --port 4444`)
"""

import asyncio

from dotenv import load_dotenv

from autom8 import Browser

load_dotenv()


async def main():
	browser = Browser('localhost', 4444)
	await browser.open()

	await browser.load('https://www.rust-lang.org/')
	await browser.wait_for_page_load()

	await browser.load('https://example.com')
	await browser.go_back()
	await browser.go_forward()
	await browser.reload()

	await asyncio.sleep(2)
	await browser.close()


if __name__ == '__main__':
	asyncio.run(main())
