"""Run configuration for a browser session."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Option keys of the provider string and the config fields they map to
_OPTION_FIELDS = {
    "width": "width",
    "height": "height",
    "scaleFactor": "scale_factor",
    "mobile": "mobile",
    "touch": "touch",
    "userAgent": "user_agent",
    "cdpPort": "cdp_port",
    "timeout": "negotiation_timeout",
}
_EMULATION_OPTIONS = {"width", "height", "scaleFactor", "mobile", "touch", "userAgent"}
_FLAGS = {"headless", "emulation"}
_OPTION_SEPARATOR = re.compile(r"(?<!\\);")


class BrowserConfig(BaseModel):
    """Immutable snapshot of the run configuration."""

    model_config = ConfigDict(frozen=True)

    headless: bool = False
    emulation: bool = False
    scale_factor: float = Field(default=1.0, gt=0)
    mobile: bool = False
    touch: bool | None = None
    user_agent: str | None = None
    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    negotiation_timeout: float | None = Field(default=None, gt=0)
    cdp_port: int | None = Field(default=None, gt=0, lt=65536)

    @model_validator(mode="before")
    @classmethod
    def _headless_implies_emulation(cls, data: Any) -> Any:
        # A headless page has no window; its viewport only exists as an emulation override
        if isinstance(data, dict) and data.get("headless") in (True, "true", "1", 1):
            data = {**data, "emulation": True}
        return data


def parse_config(text: str) -> BrowserConfig:
    """Parse a provider configuration string.

    Format: colon-separated flags followed by semicolon-separated options, e.g.
    ``headless:emulation:width=1024;height=768;scaleFactor=2;mobile=true``.
    A literal semicolon inside a value (user agents) is escaped as ``\\;``.

    Raises:
        ValueError: On unknown flags/options or invalid values
    """
    values: dict[str, Any] = {}
    text = text.strip()
    if not text:
        return BrowserConfig()

    segments = text.split(":")
    options_at = next((i for i, segment in enumerate(segments) if "=" in segment), len(segments))

    for flag in segments[:options_at]:
        flag = flag.strip()
        if not flag:
            continue
        if flag not in _FLAGS:
            raise ValueError(f"Unknown browser config flag: '{flag}'. Supported flags: {', '.join(sorted(_FLAGS))}")
        values[flag] = True

    options = ":".join(segments[options_at:])
    for option in _OPTION_SEPARATOR.split(options):
        option = option.strip()
        if not option:
            continue
        key, sep, value = option.partition("=")
        key = key.strip()
        if not sep or key not in _OPTION_FIELDS:
            raise ValueError(f"Unknown browser config option: '{option}'")
        values[_OPTION_FIELDS[key]] = value.strip().replace("\\;", ";")
        if key in _EMULATION_OPTIONS:
            values["emulation"] = True

    return BrowserConfig.model_validate(values)
