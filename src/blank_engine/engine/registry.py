"""Host-facing registry of per-buffer engine instances."""

from __future__ import annotations

from typing import Dict, Hashable, Iterator, List, Optional, Tuple

from blank_engine.classify.models import Match
from blank_engine.cleanup.models import Edit
from blank_engine.config import EngineConfig
from blank_engine.errors import UnknownBufferError
from blank_engine.patterns.registry import PatternRegistry, default_registry
from blank_engine.runtime import telemetry
from blank_engine.style.models import ActionKind, EffectiveStyle
from blank_engine.style.resolver import resolve, resolve_actions

from .policy import DefectReport, PolicyDecision, evaluate_activation, evaluate_save
from .session import BlankEngine, BufferSource

Span = Tuple[int, int]


class EngineRegistry:
    """Maps buffer ids to :class:`BlankEngine` instances.

    One registry per host. Every call naming a buffer that was never
    activated (or was deactivated) raises :class:`UnknownBufferError`.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        patterns: PatternRegistry | None = None,
        logger_name: str | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.patterns = patterns or default_registry
        self._engines: Dict[Hashable, BlankEngine] = {}
        self._settings: Dict[Hashable, Tuple[Optional[bool], Optional[int]]] = {}
        self._logger_name = logger_name or "blank_engine.engine"
        self.logger = telemetry.get_logger(self._logger_name)

    def __contains__(self, buffer_id: object) -> bool:
        return buffer_id in self._engines

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._engines)

    def __len__(self) -> int:
        return len(self._engines)

    def get(self, buffer_id: Hashable) -> BlankEngine:
        try:
            return self._engines[buffer_id]
        except KeyError:
            raise UnknownBufferError(buffer_id) from None

    def _resolve(
        self,
        file_id: Optional[str],
        mode_id: Optional[str],
        tabs_preferred: Optional[bool],
        tab_width: Optional[int],
    ) -> Tuple[EffectiveStyle, Tuple[ActionKind, ...]]:
        config = self.config
        style = resolve(
            file_id,
            mode_id,
            config.per_file_styles,
            config.per_mode_styles,
            config.default_style,
            tabs_preferred=(
                config.tabs_preferred if tabs_preferred is None else tabs_preferred
            ),
            tab_width=config.tab_width if tab_width is None else tab_width,
        )
        actions = resolve_actions(
            file_id,
            mode_id,
            config.per_file_actions,
            config.per_mode_actions,
            config.default_actions,
        )
        return style, actions

    def activate(
        self,
        buffer_id: Hashable,
        file_id: Optional[str],
        mode_id: Optional[str],
        *,
        source: BufferSource,
        cursor: int = 0,
        tabs_preferred: Optional[bool] = None,
        tab_width: Optional[int] = None,
    ) -> BlankEngine:
        """Create (or replace) the engine for ``buffer_id``.

        ``tabs_preferred`` and ``tab_width`` are the buffer's own settings;
        ``None`` falls back to the config.
        """

        with telemetry.span(
            "engine::activate",
            logger_name=self._logger_name,
            metadata={"buffer": buffer_id, "file_id": file_id, "mode_id": mode_id},
        ):
            style, actions = self._resolve(file_id, mode_id, tabs_preferred, tab_width)
            replaced = buffer_id in self._engines
            engine = BlankEngine(
                buffer_id,
                source,
                style,
                actions,
                cursor=cursor,
                registry=self.patterns,
                logger_name=self._logger_name,
            )
            self._engines[buffer_id] = engine
            self._settings[buffer_id] = (tabs_preferred, tab_width)
        telemetry.record_event(
            "engine.activate",
            data={
                "buffer": buffer_id,
                "kinds": [kind.value for kind in style.kinds],
                "replaced": replaced,
            },
            logger_name=self._logger_name,
        )
        return engine

    def deactivate(self, buffer_id: Hashable) -> bool:
        engine = self._engines.pop(buffer_id, None)
        self._settings.pop(buffer_id, None)
        if engine is None:
            return False
        telemetry.record_event(
            "engine.deactivate",
            data={"buffer": buffer_id},
            logger_name=self._logger_name,
        )
        return True

    def on_edit(self, buffer_id: Hashable, span: Span, new_length: int) -> None:
        self.get(buffer_id).on_edit(span[0], span[1], new_length)

    def on_cursor_move(self, buffer_id: Hashable, position: int) -> None:
        self.get(buffer_id).on_cursor_move(position)

    def update_identity(
        self,
        buffer_id: Hashable,
        *,
        file_id: Optional[str],
        mode_id: Optional[str],
    ) -> EffectiveStyle:
        """Recompute the style after the buffer was renamed or changed mode."""

        engine = self.get(buffer_id)
        tabs_preferred, tab_width = self._settings.get(buffer_id, (None, None))
        style, actions = self._resolve(file_id, mode_id, tabs_preferred, tab_width)
        engine.restyle(style, actions)
        self.logger.info(
            "restyled %s: %s", buffer_id, ", ".join(k.value for k in style.kinds)
        )
        return style

    def query_defects(
        self, buffer_id: Hashable, span: Optional[Span] = None
    ) -> List[Match]:
        return self.get(buffer_id).query_defects(span)

    def clean(self, buffer_id: Hashable, span: Optional[Span] = None) -> List[Edit]:
        return self.get(buffer_id).clean(span)

    def report(self, buffer_id: Hashable) -> DefectReport:
        return self.get(buffer_id).report()

    def evaluate_activation(self, buffer_id: Hashable) -> PolicyDecision:
        return evaluate_activation(self.get(buffer_id))

    def evaluate_save(self, buffer_id: Hashable) -> PolicyDecision:
        return evaluate_save(self.get(buffer_id))


__all__ = ["EngineRegistry"]
