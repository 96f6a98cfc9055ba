from __future__ import annotations

import re

import pytest

from blank_engine.patterns import Pattern, PatternRegistry, TabPreference, generic_kind
from blank_engine.style import DefectKind


def make_registry() -> PatternRegistry:
    return PatternRegistry(logger_name="tests.patterns")


def test_generic_kind_follows_buffer_preference() -> None:
    registry = make_registry()

    tabs = registry.compile(DefectKind.INDENTATION, tabs_preferred=True, tab_width=8)
    spaces = registry.compile(DefectKind.INDENTATION, tabs_preferred=False, tab_width=8)

    assert tabs.use_tabs and not spaces.use_tabs
    assert tabs.regex.search("          x")
    assert not tabs.regex.search("\tx")
    assert spaces.regex.search("\tx")


def test_variants_force_their_mode() -> None:
    registry = make_registry()

    forced_tabs = registry.compile(
        DefectKind.INDENTATION_TAB, tabs_preferred=False, tab_width=4
    )
    forced_spaces = registry.compile(
        DefectKind.SPACE_BEFORE_TAB_SPACE, tabs_preferred=True, tab_width=4
    )

    assert forced_tabs.kind is DefectKind.INDENTATION_TAB
    assert forced_tabs.use_tabs
    assert forced_tabs.regex.search("    x")
    assert not forced_spaces.use_tabs
    assert forced_spaces.group == 2


def test_tab_preference_for_kind() -> None:
    assert TabPreference.for_kind(DefectKind.INDENTATION) is TabPreference.FOLLOW_DEFAULT
    assert TabPreference.for_kind(DefectKind.INDENTATION_TAB) is TabPreference.PREFER_TABS
    assert TabPreference.FOLLOW_DEFAULT.uses_tabs(False) is False
    assert TabPreference.PREFER_SPACES.uses_tabs(True) is False
    assert generic_kind(DefectKind.SPACE_AFTER_TAB_TAB) is DefectKind.SPACE_AFTER_TAB


def test_duplicate_registration_requires_replace() -> None:
    registry = make_registry()
    pattern = Pattern(
        kind=DefectKind.TRAILING, tabs_template=r"(x+)$", spaces_template=r"(x+)$"
    )

    with pytest.raises(ValueError):
        registry.register(pattern)

    before = registry.compile(DefectKind.TRAILING, tabs_preferred=True, tab_width=8)
    revision = registry.revision()
    registry.register(pattern, replace=True)
    after = registry.compile(DefectKind.TRAILING, tabs_preferred=True, tab_width=8)

    assert registry.revision() == revision + 1
    assert before.regex.pattern != after.regex.pattern
    assert after.regex.pattern == "(x+)$"


def test_compile_cache_reuses_regex() -> None:
    registry = make_registry()

    first = registry.compile(DefectKind.SPACE_AFTER_TAB, tabs_preferred=True, tab_width=4)
    second = registry.compile(DefectKind.SPACE_AFTER_TAB, tabs_preferred=True, tab_width=4)

    assert first.regex is second.regex
    assert first.regex.flags & re.MULTILINE


def test_invalid_inputs_rejected() -> None:
    registry = make_registry()

    with pytest.raises(ValueError):
        Pattern(kind=DefectKind.INDENTATION_TAB, tabs_template="", spaces_template="")
    with pytest.raises(ValueError):
        registry.compile(DefectKind.TRAILING, tabs_preferred=True, tab_width=0)
    with pytest.raises(KeyError):
        PatternRegistry(load_defaults=False).get(DefectKind.TRAILING)
    assert len(registry) == 6
