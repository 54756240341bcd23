"""CLI entry point: attach to a running browser session and drive it."""

import argparse
import asyncio
import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

import console as console_output
from browser import (
    BrowserConfig,
    BrowserController,
    BrowserSessionError,
    Channel,
    ConnectionFailed,
    Dimensions,
    EmulationError,
    ResizeError,
    SessionRuntimeState,
    TabNotFound,
    parse_config,
)
from devtools import DevToolsEndpoint, DevToolsError

logger = logging.getLogger(__name__)

_SIZE_PATTERN = re.compile(r"^(\d*)x(\d*)$")
_RETRY_DELAY_SECONDS = 0.5
_DEFAULT_PORT = 9222


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of a CLI run."""

    success: bool
    summary: str


def _parse_size(text: str) -> Dimensions:
    """Parse WIDTHxHEIGHT, where either side may be left empty (e.g. 800x or x600)."""
    match = _SIZE_PATTERN.match(text.strip().lower())
    if not match or not any(match.groups()):
        raise argparse.ArgumentTypeError(f"Invalid size '{text}'. Expected WIDTHxHEIGHT, WIDTHx or xHEIGHT")
    width, height = match.groups()
    return Dimensions(width=int(width) if width else None, height=int(height) if height else None)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Attach to a browser page over the remote-debugging protocol")
    parser.add_argument("marker", help="Session marker contained in the page URL")
    parser.add_argument(
        "--host",
        default=os.environ.get("CDP_HOST", "localhost"),
        help="Remote-debugging host (default: $CDP_HOST or localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Remote-debugging port (default: cdpPort from --config, $CDP_PORT, or 9222)",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get("BROWSER_CONFIG", ""),
        help="Browser config string, e.g. 'headless:emulation:width=1024;height=768' (default: $BROWSER_CONFIG)",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=10.0,
        help="Seconds to keep retrying until the page shows up and accepts a connection (default: 10)",
    )
    parser.add_argument("--resize", type=_parse_size, default=None, metavar="WxH", help="Resize the viewport")
    parser.add_argument("--screenshot", type=Path, default=None, metavar="PATH", help="Save a PNG screenshot")
    parser.add_argument("--close", action="store_true", help="Close the tab when done")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (DEBUG) logging")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path("cdp-session.log"),
        help="Log file path (default: cdp-session.log)",
    )
    return parser.parse_args()


def _resolve_port(args: argparse.Namespace, config: BrowserConfig) -> int:
    if args.port is not None:
        return args.port
    if config.cdp_port is not None:
        return config.cdp_port
    env_port = os.environ.get("CDP_PORT")
    return int(env_port) if env_port else _DEFAULT_PORT


async def _connect(
    controller: BrowserController,
    state: SessionRuntimeState,
    wait_seconds: float,
) -> Channel | TabNotFound | ConnectionFailed:
    """Retry connect until it yields a channel or the wait budget runs out."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + wait_seconds
    while True:
        result = await controller.connect(state)
        if isinstance(result, Channel) or loop.time() >= deadline:
            return result
        match result:
            case TabNotFound():
                console_output.waiting(f"No page with marker '{result.session_marker}' yet")
            case ConnectionFailed():
                console_output.waiting(f"Connection to {result.page.id} failed ({result.reason})")
        await asyncio.sleep(_RETRY_DELAY_SECONDS)


async def _run(args: argparse.Namespace, config: BrowserConfig, endpoint: DevToolsEndpoint) -> RunResult:
    state = SessionRuntimeState(session_marker=args.marker, endpoint=endpoint, config=config)
    controller = BrowserController.create(endpoint)

    try:
        try:
            result = await controller.connect(state) if args.wait <= 0 else await _connect(controller, state, args.wait)
        except EmulationError as e:
            console_output.warning(str(e))
            result = state.channel

        match result:
            case TabNotFound():
                return RunResult(False, f"No page with marker '{args.marker}' at {endpoint.http_url}")
            case ConnectionFailed():
                return RunResult(False, f"Could not connect to {result.page.id}: {result.reason}")

        assert state.page is not None
        console_output.connected(state.page, state.viewport_size)

        if args.resize is not None:
            previous = state.viewport_size
            try:
                await controller.resize(args.resize, state)
            except ResizeError as e:
                console_output.warning(str(e))
            console_output.resized(previous, state.viewport_size)

        if args.screenshot is not None:
            path = await controller.screenshot(args.screenshot, state)
            console_output.screenshot_saved(path)

        if args.close:
            await controller.close_tab(state)
            console_output.tab_closed(state.page)

        return RunResult(True, f"Session '{args.marker}' on {state.page.id}")
    except (BrowserSessionError, DevToolsError) as e:
        logger.error("Session run failed: %s", e)
        return RunResult(False, str(e))
    finally:
        try:
            await controller.disconnect(state)
        except Exception:
            # Ignore errors during cleanup (e.g., after Ctrl+C or a closed tab)
            logger.debug("Disconnect failed", exc_info=True)


def main() -> None:
    load_dotenv()

    args = _parse_args()

    try:
        config = parse_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    endpoint = DevToolsEndpoint(host=args.host, port=_resolve_port(args, config))

    log_format = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"
    log_datefmt = "%H:%M:%S"

    # Set up logging to file only (console output via Rich)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    file_handler = logging.FileHandler(args.log_file, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(log_format, datefmt=log_datefmt))
    root_logger.addHandler(file_handler)

    console_output.session_header(args.marker, endpoint, config)

    try:
        result = asyncio.run(_run(args, config, endpoint))
    except KeyboardInterrupt:
        console_output.console.print("\n[yellow]Interrupted by user (Ctrl+C)[/yellow]")
        sys.exit(130)  # Standard exit code for Ctrl+C

    if result.success:
        console_output.result_success(result.summary)
    else:
        console_output.result_fail(result.summary)
        sys.exit(1)


if __name__ == "__main__":
    main()
