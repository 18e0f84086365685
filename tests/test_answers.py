"""Answer Validator: the A-D alphabet and its decorated forms."""

import pytest

from studybot.dispatch.answers import validate_answer


class TestValidForms:

    @pytest.mark.parametrize("text", ["a", "A", " a ", "a)", "A.", "A:", "(a)", "( A )"])
    def test_letter_a_variants(self, text):
        result = validate_answer(text)
        assert result.valid
        assert result.letter == "A"

    @pytest.mark.parametrize("text,letter", [
        ("answer d", "D"),
        ("ANSWER: b", "B"),
        ("option c", "C"),
        ("Option - (d)", "D"),
        ("choice a.", "A"),
        ("answer  B!", "B"),
    ])
    def test_prefixed_forms(self, text, letter):
        result = validate_answer(text)
        assert result.valid
        assert result.letter == letter


class TestInvalidForms:

    @pytest.mark.parametrize("text", [
        "", "   ", "e", "E)", "ab", "a b", "menu", "1", "answer", "answer e",
        "I think a", "a or b", "aa", "(a", "a))",
    ])
    def test_rejected(self, text):
        result = validate_answer(text)
        assert not result.valid
        assert result.letter is None

    def test_correction_message_names_the_alphabet(self):
        result = validate_answer("banana")
        for letter in "ABCD":
            assert letter in result.message

    def test_none_is_rejected(self):
        assert not validate_answer(None).valid
