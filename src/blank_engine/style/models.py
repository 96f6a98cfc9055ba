"""Dataclasses and enums describing defect kinds and effective styles."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple, Union

from blank_engine.runtime import telemetry

_LOGGER_NAME = "blank_engine.style"


class DefectFamily(str, Enum):
    """Families whose members come in generic/tab/space variants."""

    INDENTATION = "indentation"
    SPACE_BEFORE_TAB = "space-before-tab"
    SPACE_AFTER_TAB = "space-after-tab"


class Variant(str, Enum):
    GENERIC = "generic"
    TAB = "tab"
    SPACE = "space"


class DefectKind(str, Enum):
    """Named categories of blank defects; values double as style tokens."""

    EMPTY_AT_START = "empty-at-start"
    EMPTY_AT_END = "empty-at-end"
    TRAILING = "trailing"
    INDENTATION = "indentation"
    INDENTATION_TAB = "indentation::tab"
    INDENTATION_SPACE = "indentation::space"
    SPACE_BEFORE_TAB = "space-before-tab"
    SPACE_BEFORE_TAB_TAB = "space-before-tab::tab"
    SPACE_BEFORE_TAB_SPACE = "space-before-tab::space"
    SPACE_AFTER_TAB = "space-after-tab"
    SPACE_AFTER_TAB_TAB = "space-after-tab::tab"
    SPACE_AFTER_TAB_SPACE = "space-after-tab::space"

    @property
    def family(self) -> Optional[DefectFamily]:
        base = self.value.split("::", 1)[0]
        try:
            return DefectFamily(base)
        except ValueError:
            return None

    @property
    def variant(self) -> Variant:
        if self.value.endswith("::tab"):
            return Variant.TAB
        if self.value.endswith("::space"):
            return Variant.SPACE
        return Variant.GENERIC

    @property
    def cursor_suppressible(self) -> bool:
        return self in _CURSOR_SUPPRESSIBLE

    @property
    def boundary(self) -> bool:
        return self in (DefectKind.EMPTY_AT_START, DefectKind.EMPTY_AT_END)


_CURSOR_SUPPRESSIBLE = frozenset(
    {DefectKind.TRAILING, DefectKind.EMPTY_AT_START, DefectKind.EMPTY_AT_END}
)

# Shorthand tokens expanding to several kinds.
TOKEN_ALIASES: dict[str, Tuple[DefectKind, ...]] = {
    "empty": (DefectKind.EMPTY_AT_START, DefectKind.EMPTY_AT_END),
}


class ActionKind(str, Enum):
    """Host policies evaluated against defect presence."""

    CLEANUP_ON_ACTIVATE = "cleanup-on-activate"
    REPORT_ON_BOGUS_ON_ACTIVATE = "report-on-bogus-on-activate"
    CLEANUP_ON_SAVE = "cleanup-on-save"
    ABORT_SAVE_ON_BOGUS = "abort-save-on-bogus"
    WARN_ON_READONLY = "warn-on-readonly"


def _normalize_token(token: object) -> str:
    if isinstance(token, Enum):
        return str(token.value)
    return str(token).strip().lower()


def parse_kinds(tokens: Iterable[object]) -> Tuple[DefectKind, ...]:
    """Turn raw style tokens into unique kinds, first occurrence wins.

    Tokens that name no known kind are dropped; they typically belong to
    rendering concerns (``tabs``, ``spaces``, marks) the engine ignores.
    """

    seen: dict[DefectKind, None] = {}
    for token in tokens:
        key = _normalize_token(token)
        if key in TOKEN_ALIASES:
            kinds: Tuple[DefectKind, ...] = TOKEN_ALIASES[key]
        else:
            try:
                kinds = (DefectKind(key),)
            except ValueError:
                telemetry.get_logger(_LOGGER_NAME).debug(
                    "ignoring unknown style token %r", key
                )
                continue
        for kind in kinds:
            seen.setdefault(kind, None)
    return tuple(seen)


def parse_actions(tokens: Iterable[object]) -> Tuple[ActionKind, ...]:
    seen: dict[ActionKind, None] = {}
    for token in tokens:
        key = _normalize_token(token)
        try:
            seen.setdefault(ActionKind(key), None)
        except ValueError:
            telemetry.get_logger(_LOGGER_NAME).debug(
                "ignoring unknown action token %r", key
            )
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class StyleSpec:
    """A configured style: raw tokens plus optional tab overrides."""

    tokens: Tuple[str, ...] = ()
    tabs_preferred: Optional[bool] = None
    tab_width: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "tokens", tuple(_normalize_token(t) for t in self.tokens)
        )
        if self.tab_width is not None and self.tab_width < 1:
            raise ValueError("tab_width must be >= 1")

    @classmethod
    def coerce(cls, value: "StyleLike") -> "StyleSpec":
        if isinstance(value, StyleSpec):
            return value
        if isinstance(value, str):
            return cls(tokens=tuple(part for part in value.replace(",", " ").split()))
        return cls(tokens=tuple(str(_normalize_token(v)) for v in value))


StyleLike = Union[StyleSpec, str, Sequence[object]]


@dataclass(frozen=True, slots=True)
class EffectiveStyle:
    """Resolved, precedence-ordered style for one buffer."""

    kinds: Tuple[DefectKind, ...] = ()
    tabs_preferred: bool = True
    tab_width: int = 8

    def __post_init__(self) -> None:
        if self.tab_width < 1:
            raise ValueError("tab_width must be >= 1")
        object.__setattr__(self, "kinds", parse_kinds(self.kinds))

    @classmethod
    def from_tokens(
        cls,
        tokens: Iterable[object],
        *,
        tabs_preferred: bool = True,
        tab_width: int = 8,
    ) -> "EffectiveStyle":
        return cls(
            kinds=parse_kinds(tokens),
            tabs_preferred=tabs_preferred,
            tab_width=tab_width,
        )

    def __contains__(self, kind: object) -> bool:
        return kind in self.kinds

    def __bool__(self) -> bool:
        return bool(self.kinds)

    def precedence(self, kind: DefectKind) -> int:
        return self.kinds.index(kind)

    def select(self, family: DefectFamily) -> Optional[DefectKind]:
        """Return the single variant of ``family`` that should be evaluated.

        Generic beats the tab variant, which beats the space variant; the
        order inside ``kinds`` does not matter here.
        """

        for variant in (Variant.GENERIC, Variant.TAB, Variant.SPACE):
            for kind in self.kinds:
                if kind.family is family and kind.variant is variant:
                    return kind
        return None

    def evaluated_kinds(self) -> Tuple[DefectKind, ...]:
        """Kinds actually evaluated, in precedence order, one per family."""

        chosen = {family: self.select(family) for family in DefectFamily}
        result: list[DefectKind] = []
        for kind in self.kinds:
            family = kind.family
            if family is None or chosen[family] is kind:
                result.append(kind)
        return tuple(result)


__all__ = [
    "ActionKind",
    "DefectFamily",
    "DefectKind",
    "EffectiveStyle",
    "StyleLike",
    "StyleSpec",
    "TOKEN_ALIASES",
    "Variant",
    "parse_actions",
    "parse_kinds",
]
