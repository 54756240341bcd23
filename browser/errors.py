"""Result variants and error types for browser session operations."""

from dataclasses import dataclass

from devtools import PageTarget

from .geometry import ViewportSize


@dataclass(frozen=True, slots=True)
class TabNotFound:
    """No open page matched the session marker (yet)."""

    session_marker: str


@dataclass(frozen=True, slots=True)
class ConnectionFailed:
    """A control channel to the page could not be negotiated."""

    page: PageTarget
    reason: str


class BrowserSessionError(Exception):
    """Base class for session controller errors."""


class ChannelUnavailableError(BrowserSessionError):
    """Operation requires a ready control channel, but there is none."""


class EmulationError(BrowserSessionError):
    """One or more emulation overrides failed to apply.

    Overrides that succeeded stay in effect.
    """

    def __init__(self, failures: dict[str, Exception]) -> None:
        self.failures = failures
        details = "; ".join(f"{step}: {error}" for step, error in failures.items())
        super().__init__(f"Emulation setup failed ({details})")


class ResizeError(BrowserSessionError):
    """A resize step failed; the steps that succeeded are not rolled back."""

    def __init__(
        self,
        previous: ViewportSize,
        requested: ViewportSize,
        window_error: Exception | None = None,
        emulation_error: Exception | None = None,
    ) -> None:
        self.previous = previous
        self.requested = requested
        self.window_error = window_error
        self.emulation_error = emulation_error
        parts = []
        if window_error is not None:
            parts.append(f"window: {window_error}")
        if emulation_error is not None:
            parts.append(f"emulation: {emulation_error}")
        super().__init__(
            f"Resize {previous.width}x{previous.height} -> {requested.width}x{requested.height} "
            f"failed ({'; '.join(parts)})"
        )


class CaptureError(BrowserSessionError):
    """Screenshot capture or persistence failed."""


class TeardownError(BrowserSessionError):
    """Closing the page failed."""
