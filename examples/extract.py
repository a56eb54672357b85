"""
Extract HTML, text and attributes from example.com.

Prerequisites:
1. A WebDriver BiDi capable driver listening on localhost:4444
"""

import asyncio

from dotenv import load_dotenv

from autom8 import Browser, ElementError

load_dotenv()


async def main():
	async with Browser('localhost', 4444) as browser:
		await browser.load('https://example.com')
		await browser.wait_for_page_load(5000)

		print('=== extract_inner_html ===')
		print(f'H1 inner HTML: {await browser.extract_inner_html("h1")}')

		print('\n=== extract_inner_text ===')
		print(f'H1 inner text: {await browser.extract_inner_text("h1")}')

		print('\n=== extract_attribute ===')
		href = await browser.extract_attribute('a', 'href')
		print(f'First link href: {href}' if href is not None else 'First link has no href attribute')

		print('\n=== non-existent element ===')
		try:
			await browser.extract_inner_html('div.non-existent')
		except ElementError as e:
			print(f'Expected error for non-existent element: {e}')

		print('\n=== body text ===')
		text = await browser.extract_inner_text('body')
		print(f'Body text (first 200 chars): {text[:200]}...' if len(text) > 200 else f'Body text: {text}')

		print('\n=== local storage ===')
		await browser.set_storage('visited', 'yes')
		print(f'visited = {await browser.get_storage("visited")}')


if __name__ == '__main__':
	asyncio.run(main())
