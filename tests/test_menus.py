"""Menu Transition Table: completeness audit and rendering."""

import pytest

from studybot.dispatch.commands import CommandType
from studybot.dispatch.menus import (
    EXEMPT_MENUS, FREE_TEXT_CAPTURE, MENU_TABLE, NUMBER_EMOJI, lookup, render_menu,
    valid_range, validate_table_completeness,
)
from studybot.handlers import HANDLERS
from studybot.state.session import ExpectingInput, MenuTag


class TestCompleteness:

    def test_audit_passes(self):
        assert validate_table_completeness() is True

    def test_every_tag_is_numbered_or_exempt(self):
        for tag in MenuTag:
            assert (tag in MENU_TABLE) != (tag in EXEMPT_MENUS), tag

    def test_every_expected_field_has_a_capture(self):
        assert set(FREE_TEXT_CAPTURE) == set(ExpectingInput)

    def test_every_command_type_has_a_handler(self):
        assert set(HANDLERS) == set(CommandType)

    def test_every_option_routes_to_a_handler(self):
        for spec in MENU_TABLE.values():
            for option in spec.options:
                assert option.command.type in HANDLERS
                assert option.label

    def test_templates_carry_no_input(self):
        for spec in MENU_TABLE.values():
            for option in spec.options:
                assert option.command.original_input == ""
                assert "menu_choice" not in option.command.payload


class TestLookups:

    @pytest.mark.parametrize("tag,expected", [
        (MenuTag.WELCOME, "1-5"),
        (MenuTag.MATH_TOPICS, "1-9"),
        (MenuTag.PRACTICE_TOPICS, "1-9"),
        (MenuTag.PANIC_LEVEL, "1-5"),
        (MenuTag.PANIC_MOMENTUM, "1-4"),
        (MenuTag.EXAM_PREP_PLAN_DECISION, "1-2"),
        ("post_answer", "1-5"),
        ("no_such_menu", "1-9"),
        (None, "1-9"),
    ])
    def test_valid_range(self, tag, expected):
        assert valid_range(tag) == expected

    def test_lookup_bounds(self):
        assert lookup(MenuTag.SETTINGS, 0) is None
        assert lookup(MenuTag.SETTINGS, 4) is None
        assert lookup(MenuTag.SETTINGS, 3).type == CommandType.MAIN_MENU
        assert lookup("unknown", 1) is None


class TestRendering:

    def test_options_are_numbered_in_order(self):
        text = render_menu(MenuTag.FRIENDS)
        spec = MENU_TABLE[MenuTag.FRIENDS]
        positions = [text.index(f"{NUMBER_EMOJI[i]} {option.label}") for i, option in enumerate(spec.options)]
        assert positions == sorted(positions)
        assert NUMBER_EMOJI[len(spec.options)] not in text

    def test_intro_comes_first(self):
        text = render_menu(MenuTag.MAIN, "Well done!")
        assert text.startswith("Well done!\n\n")
        assert MENU_TABLE[MenuTag.MAIN].prompt in text

    def test_exempt_state_has_no_menu(self):
        with pytest.raises(KeyError):
            render_menu(MenuTag.QUESTION_ACTIVE)
