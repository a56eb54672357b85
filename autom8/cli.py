"""Command line entry point: ``autom8 extract`` and ``autom8 screenshot``."""

import argparse
import asyncio
import base64
import logging
import sys
from pathlib import Path

from autom8.browser import Browser, BrowserError
from autom8.config import CONFIG
from autom8.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog='autom8', description='Drive a remote browser over WebDriver BiDi')
	parser.add_argument('--host', default=None, help=f'WebDriver host (default: {CONFIG.AUTOM8_HOST})')
	parser.add_argument('--port', type=int, default=None, help=f'WebDriver port (default: {CONFIG.AUTOM8_PORT})')
	parser.add_argument('--log-level', default=None, choices=['debug', 'info', 'warning', 'error', 'critical'])

	# options shared by the page subcommands
	page_parser = argparse.ArgumentParser(add_help=False)
	page_parser.add_argument(
		'--timeout', type=int, default=10_000, help='Milliseconds to wait for the page to finish loading (default: 10000)'
	)

	subparsers = parser.add_subparsers(dest='command', required=True)

	extract_parser = subparsers.add_parser(
		'extract', parents=[page_parser], help='Print content of the first element matching a CSS selector'
	)
	extract_parser.add_argument('url')
	extract_parser.add_argument('selector')
	mode = extract_parser.add_mutually_exclusive_group()
	mode.add_argument('--text', action='store_true', help='Print innerText instead of innerHTML')
	mode.add_argument('--attribute', metavar='NAME', help='Print the value of an attribute')

	screenshot_parser = subparsers.add_parser('screenshot', parents=[page_parser], help='Save a PNG screenshot of a page')
	screenshot_parser.add_argument('url')
	screenshot_parser.add_argument('-o', '--output', type=Path, default=Path('screenshot.png'))

	return parser


def save_screenshot(data: str, path: Path) -> Path:
	"""Decode base64 screenshot data and write it to ``path``."""
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_bytes(base64.b64decode(data))
	return path


async def run_extract(browser: Browser, args: argparse.Namespace) -> str | None:
	await browser.load(args.url)
	await browser.wait_for_page_load(args.timeout)
	if args.attribute:
		return await browser.extract_attribute(args.selector, args.attribute)
	if args.text:
		return await browser.extract_inner_text(args.selector)
	return await browser.extract_inner_html(args.selector)


async def run_screenshot(browser: Browser, args: argparse.Namespace) -> Path:
	await browser.load(args.url)
	await browser.wait_for_page_load(args.timeout)
	data = await browser.take_screenshot()
	return save_screenshot(data, args.output)


async def run(args: argparse.Namespace) -> int:
	async with Browser(args.host, args.port) as browser:
		if args.command == 'extract':
			value = await run_extract(browser, args)
			if value is None:
				print(f'{args.selector} has no {args.attribute} attribute', file=sys.stderr)
				return 1
			print(value)
		elif args.command == 'screenshot':
			path = await run_screenshot(browser, args)
			print(f'Screenshot saved to {path}')
	return 0


def main(argv: list[str] | None = None) -> int:
	args = build_parser().parse_args(argv)
	setup_logging(log_level=args.log_level, force_setup=args.log_level is not None)
	try:
		return asyncio.run(run(args))
	except BrowserError as e:
		print(f'❌ {e}', file=sys.stderr)
		return 1
	except KeyboardInterrupt:
		return 130


if __name__ == '__main__':
	sys.exit(main())
