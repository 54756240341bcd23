"""Rich console output for the session CLI."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from browser import BrowserConfig, ViewportSize
from devtools import DevToolsEndpoint, PageTarget

console = Console()


def _format_size(size: ViewportSize) -> str:
    return f"{size.width}x{size.height}"


def session_header(marker: str, endpoint: DevToolsEndpoint, config: BrowserConfig) -> None:
    """Print what the CLI is about to attach to."""
    console.print(f"[bold]Marker:[/bold] {marker}")
    console.print(f"[bold]Endpoint:[/bold] {endpoint.http_url}")
    mode = "headless" if config.headless else "headed"
    emulation = f", emulation (scale {config.scale_factor:g}{', mobile' if config.mobile else ''})" if config.emulation else ""
    console.print(f"[bold]Mode:[/bold] {mode}{emulation}")


def waiting(reason: str) -> None:
    console.print(f"  [dim]{reason}, retrying...[/dim]")


def connected(page: PageTarget, viewport: ViewportSize) -> None:
    console.print(f"[bold green]Connected[/bold green] to {page.id} [dim]{page.url}[/dim]")
    console.print(f"  viewport [white]{_format_size(viewport)}[/white]")


def resized(previous: ViewportSize, current: ViewportSize) -> None:
    console.print(f"  [bright_cyan]resize[/bright_cyan] {_format_size(previous)} → [bold]{_format_size(current)}[/bold]")


def screenshot_saved(path: Path) -> None:
    console.print(f"  [bright_cyan]screenshot[/bright_cyan] {path}")


def tab_closed(page: PageTarget) -> None:
    console.print(f"  [bright_cyan]closed[/bright_cyan] {page.id}")


def warning(message: str) -> None:
    console.print(f"  [bold yellow]⚠ {message}[/bold yellow]")


def result_success(summary: str) -> None:
    console.print(Panel(summary, title="Done", border_style="green"))


def result_fail(summary: str) -> None:
    console.print(Panel(summary, title="Failed", border_style="red"))
