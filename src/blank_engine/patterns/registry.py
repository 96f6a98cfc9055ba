"""Pattern registry mapping defect kinds to tab/space-aware regexes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from blank_engine.runtime.telemetry import span
from blank_engine.style.models import DefectKind, Variant


class TabPreference(str, Enum):
    """Which canonical form a pattern is evaluated against."""

    PREFER_TABS = "prefer-tabs"
    PREFER_SPACES = "prefer-spaces"
    FOLLOW_DEFAULT = "follow-default"

    @classmethod
    def for_kind(cls, kind: DefectKind) -> "TabPreference":
        if kind.variant is Variant.TAB:
            return cls.PREFER_TABS
        if kind.variant is Variant.SPACE:
            return cls.PREFER_SPACES
        return cls.FOLLOW_DEFAULT

    def uses_tabs(self, tabs_preferred: bool) -> bool:
        if self is TabPreference.PREFER_TABS:
            return True
        if self is TabPreference.PREFER_SPACES:
            return False
        return tabs_preferred


@dataclass(frozen=True, slots=True)
class Pattern:
    """Regex templates for one defect kind.

    Templates are ``%``-formatted with ``tab_width`` before compiling. The
    capture group delimits the span reported for a match.
    """

    kind: DefectKind
    tabs_template: str
    spaces_template: str
    tabs_group: int = 1
    spaces_group: int = 1
    flags: int = re.MULTILINE

    def __post_init__(self) -> None:
        if self.kind.variant is not Variant.GENERIC:
            raise ValueError("patterns are registered against the generic kind")

    def template(self, use_tabs: bool) -> str:
        return self.tabs_template if use_tabs else self.spaces_template

    def group(self, use_tabs: bool) -> int:
        return self.tabs_group if use_tabs else self.spaces_group


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    kind: DefectKind
    regex: "re.Pattern[str]"
    group: int
    use_tabs: bool
    tab_width: int


TRAILING_CHARS = "\t \u00a0"

DEFAULT_PATTERNS: Tuple[Pattern, ...] = (
    Pattern(
        kind=DefectKind.INDENTATION,
        tabs_template=r"^\t*( {%(tab_width)d,})[^\n\t]",
        spaces_template=r"^ *(\t+)[^\n]",
    ),
    Pattern(
        kind=DefectKind.SPACE_BEFORE_TAB,
        tabs_template=r"( +)(\t+)",
        spaces_template=r"( +)(\t+)",
        tabs_group=1,
        spaces_group=2,
    ),
    Pattern(
        kind=DefectKind.SPACE_AFTER_TAB,
        tabs_template=r"\t+( {%(tab_width)d,})",
        spaces_template=r"(\t+) {%(tab_width)d,}",
    ),
    Pattern(
        kind=DefectKind.TRAILING,
        tabs_template=rf"([{TRAILING_CHARS}]+)$",
        spaces_template=rf"([{TRAILING_CHARS}]+)$",
    ),
    Pattern(
        kind=DefectKind.EMPTY_AT_START,
        tabs_template=r"\A(([ \t]*\n)+)",
        spaces_template=r"\A(([ \t]*\n)+)",
        flags=0,
    ),
    Pattern(
        kind=DefectKind.EMPTY_AT_END,
        tabs_template=r"^([ \t\n]+)\Z",
        spaces_template=r"^([ \t\n]+)\Z",
    ),
)


def generic_kind(kind: DefectKind) -> DefectKind:
    """Map a tab/space variant back to the kind its pattern is stored under."""

    family = kind.family
    if family is None:
        return kind
    return DefectKind(family.value)


class PatternRegistry:
    """Owns pattern templates and a revision-keyed cache of compiled regexes."""

    def __init__(
        self, *, load_defaults: bool = True, logger_name: str | None = None
    ) -> None:
        self._patterns: Dict[DefectKind, Pattern] = {}
        self._cache: Dict[Tuple[DefectKind, bool, int], Tuple[int, CompiledPattern]] = {}
        self._revision = 0
        self._logger_name = logger_name or "blank_engine.patterns"
        if load_defaults:
            for pattern in DEFAULT_PATTERNS:
                self.register(pattern)

    def revision(self) -> int:
        return self._revision

    def register(self, pattern: Pattern, *, replace: bool = False) -> Pattern:
        if not replace and pattern.kind in self._patterns:
            raise ValueError(f"Pattern for '{pattern.kind.value}' already registered")
        self._patterns[pattern.kind] = pattern
        self._revision += 1
        return pattern

    def get(self, kind: DefectKind) -> Pattern:
        try:
            return self._patterns[generic_kind(kind)]
        except KeyError as exc:
            raise KeyError(f"No pattern registered for '{kind.value}'") from exc

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns.values())

    def __len__(self) -> int:
        return len(self._patterns)

    def compile(
        self,
        kind: DefectKind,
        *,
        tabs_preferred: bool,
        tab_width: int,
        preference: Optional[TabPreference] = None,
    ) -> CompiledPattern:
        """Return the compiled regex for ``kind`` in the selected tab mode.

        ``preference`` defaults to the kind's own variant: ``::tab`` kinds are
        always evaluated in tabs mode, ``::space`` kinds in spaces mode, and
        generic kinds follow ``tabs_preferred``.
        """

        if tab_width < 1:
            raise ValueError("tab_width must be >= 1")
        pref = preference or TabPreference.for_kind(kind)
        use_tabs = pref.uses_tabs(tabs_preferred)
        base = generic_kind(kind)
        key = (base, use_tabs, tab_width)
        cached = self._cache.get(key)
        if cached and cached[0] == self._revision:
            compiled = cached[1]
        else:
            with span(
                "patterns::compile",
                logger_name=self._logger_name,
                metadata={"kind": base.value, "tabs": use_tabs, "tab_width": tab_width},
            ):
                pattern = self.get(base)
                regex = re.compile(
                    pattern.template(use_tabs) % {"tab_width": tab_width},
                    pattern.flags,
                )
                compiled = CompiledPattern(
                    kind=base,
                    regex=regex,
                    group=pattern.group(use_tabs),
                    use_tabs=use_tabs,
                    tab_width=tab_width,
                )
                self._cache[key] = (self._revision, compiled)
        if compiled.kind is kind:
            return compiled
        return CompiledPattern(
            kind=kind,
            regex=compiled.regex,
            group=compiled.group,
            use_tabs=compiled.use_tabs,
            tab_width=compiled.tab_width,
        )

    def reset(self) -> None:
        self._cache.clear()


default_registry = PatternRegistry()

__all__ = [
    "CompiledPattern",
    "DEFAULT_PATTERNS",
    "Pattern",
    "PatternRegistry",
    "TRAILING_CHARS",
    "TabPreference",
    "default_registry",
    "generic_kind",
]
