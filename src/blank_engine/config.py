"""Engine configuration loaded from host settings or the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from blank_engine.runtime.telemetry import ENV_PREFIX
from blank_engine.style.models import StyleLike, StyleSpec
from blank_engine.style.resolver import Table

DEFAULT_STYLE: Tuple[str, ...] = (
    "trailing",
    "space-before-tab",
    "indentation",
    "empty",
    "space-after-tab",
)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _tokens(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.replace(",", " ").split())
    return tuple(str(item) for item in value)


def _style_value(value: Any) -> StyleLike:
    """Accept ``{"style": [...], "indent_tabs": bool, "tab_width": int}`` too."""

    if isinstance(value, Mapping):
        return StyleSpec(
            tokens=_tokens(value.get("style", ())),
            tabs_preferred=value.get("indent_tabs"),
            tab_width=value.get("tab_width"),
        )
    return StyleSpec.coerce(value)


def _table(
    raw: Any, convert: Callable[[Any], Any]
) -> Tuple[Tuple[str, Any], ...]:
    if not raw:
        return ()
    items = raw.items() if isinstance(raw, Mapping) else raw
    return tuple((str(key), convert(value)) for key, value in items)


@dataclass(slots=True)
class EngineConfig:
    """Style and action tables consulted when a buffer is activated."""

    default_style: StyleLike = DEFAULT_STYLE
    per_file_styles: Table[StyleLike] = field(default_factory=tuple)
    per_mode_styles: Table[StyleLike] = field(default_factory=tuple)
    default_actions: Sequence[str] = ()
    per_file_actions: Table[Sequence[str]] = field(default_factory=tuple)
    per_mode_actions: Table[Sequence[str]] = field(default_factory=tuple)
    tab_width: int = 8
    tabs_preferred: bool = True

    def __post_init__(self) -> None:
        if self.tab_width < 1:
            raise ValueError("tab_width must be >= 1")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from host-loaded settings (TOML, JSON, ...).

        Table entries keep their order; the first matching entry wins at
        resolution time.
        """

        return cls(
            default_style=_style_value(data.get("style", DEFAULT_STYLE)),
            per_file_styles=_table(data.get("file_styles"), _style_value),
            per_mode_styles=_table(data.get("mode_styles"), _style_value),
            default_actions=_tokens(data.get("actions", ())),
            per_file_actions=_table(data.get("file_actions"), _tokens),
            per_mode_actions=_table(data.get("mode_actions"), _tokens),
            tab_width=int(data.get("tab_width", 8)),
            tabs_preferred=bool(data.get("indent_tabs", True)),
        )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        style = _env("STYLE")
        actions = _env("ACTIONS")
        return cls(
            default_style=_tokens(style) if style is not None else DEFAULT_STYLE,
            default_actions=_tokens(actions) if actions is not None else (),
            tab_width=int(_env("TAB_WIDTH") or 8),
            tabs_preferred=_env_flag("INDENT_TABS", True),
        )


__all__ = ["DEFAULT_STYLE", "EngineConfig"]
