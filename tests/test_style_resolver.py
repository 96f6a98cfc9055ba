from __future__ import annotations

from blank_engine.style import (
    ActionKind,
    DefectFamily,
    DefectKind,
    EffectiveStyle,
    StyleSpec,
    parse_kinds,
    resolve,
    resolve_actions,
)

DEFAULT = ("trailing", "space-before-tab", "indentation", "empty", "space-after-tab")


def test_per_file_entry_beats_default() -> None:
    style = resolve("a.txt", None, {r"\.txt$": ["trailing"]}, None, DEFAULT)

    assert style.kinds == (DefectKind.TRAILING,)


def test_first_matching_file_entry_wins_without_merging() -> None:
    per_file = [(r"\.txt$", "trailing"), (r"^a\.", "indentation empty")]

    style = resolve("a.txt", "text", per_file, {"text": ["space-after-tab"]}, DEFAULT)

    assert style.kinds == (DefectKind.TRAILING,)


def test_mode_entry_used_when_no_file_entry_matches() -> None:
    style = resolve(
        "main.c",
        "makefile",
        {r"\.txt$": ["trailing"]},
        {"makefile": "space-before-tab::tab trailing"},
        DEFAULT,
    )

    assert style.kinds == (DefectKind.SPACE_BEFORE_TAB_TAB, DefectKind.TRAILING)


def test_missing_ids_fall_back_to_default() -> None:
    style = resolve(None, None, {r".*": ["trailing"]}, {"x": ["empty"]}, DEFAULT)

    assert style.kinds == (
        DefectKind.TRAILING,
        DefectKind.SPACE_BEFORE_TAB,
        DefectKind.INDENTATION,
        DefectKind.EMPTY_AT_START,
        DefectKind.EMPTY_AT_END,
        DefectKind.SPACE_AFTER_TAB,
    )


def test_unknown_and_duplicate_tokens_are_dropped() -> None:
    style = resolve(None, None, None, None, "trailing tabs trailing empty newline")

    assert style.kinds == (
        DefectKind.TRAILING,
        DefectKind.EMPTY_AT_START,
        DefectKind.EMPTY_AT_END,
    )


def test_style_spec_overrides_buffer_settings() -> None:
    per_mode = {"go": StyleSpec(tokens=("indentation",), tabs_preferred=True, tab_width=4)}

    style = resolve(None, "go", None, per_mode, DEFAULT, tabs_preferred=False, tab_width=8)
    fallback = resolve(None, "c", None, per_mode, DEFAULT, tabs_preferred=False)

    assert (style.tabs_preferred, style.tab_width) == (True, 4)
    assert (fallback.tabs_preferred, fallback.tab_width) == (False, 8)


def test_resolve_actions_uses_same_precedence() -> None:
    actions = resolve_actions(
        "notes.md",
        "markdown",
        {r"\.md$": ["cleanup-on-save", "bogus-action"]},
        {"markdown": ["abort-save-on-bogus"]},
        ["warn-on-readonly"],
    )

    assert actions == (ActionKind.CLEANUP_ON_SAVE,)
    assert resolve_actions(None, None, None, None, "warn-on-readonly") == (
        ActionKind.WARN_ON_READONLY,
    )


def test_family_selection_prefers_generic_then_tab() -> None:
    style = EffectiveStyle.from_tokens(
        ["indentation::space", "indentation::tab", "trailing", "indentation"]
    )
    variants = EffectiveStyle.from_tokens(["indentation::space", "indentation::tab"])

    assert style.select(DefectFamily.INDENTATION) is DefectKind.INDENTATION
    assert style.evaluated_kinds() == (DefectKind.TRAILING, DefectKind.INDENTATION)
    assert variants.select(DefectFamily.INDENTATION) is DefectKind.INDENTATION_TAB
    assert variants.select(DefectFamily.SPACE_AFTER_TAB) is None


def test_kind_metadata() -> None:
    assert DefectKind.SPACE_AFTER_TAB_SPACE.family is DefectFamily.SPACE_AFTER_TAB
    assert DefectKind.TRAILING.family is None
    assert DefectKind.TRAILING.cursor_suppressible
    assert not DefectKind.INDENTATION.cursor_suppressible
    assert DefectKind.EMPTY_AT_END.boundary
    assert parse_kinds(["EMPTY"]) == (DefectKind.EMPTY_AT_START, DefectKind.EMPTY_AT_END)
