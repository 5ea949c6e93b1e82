# ============================================================================
# CONFIRMATION PROMPT TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - Keystroke interpretation and line-mode prompts
# PURPOSE: Verify y/N/a handling without a real terminal
# CREATED: 17 OCT 2026
# ============================================================================
"""
Confirmation Prompt Tests

Run with:
    pytest tests/test_confirmation.py -v
"""

import io

import pytest

from core.contracts import ConfirmResponse
from services.confirmation import ScriptedConfirmer, TerminalConfirmer, interpret_key


class TestInterpretKey:

    @pytest.mark.parametrize("key", ["y", "Y"])
    def test_yes(self, key):
        assert interpret_key(key)[0] is ConfirmResponse.YES

    def test_all_only_when_allowed(self):
        assert interpret_key("a", allow_all=True)[0] is ConfirmResponse.ALL
        response, echo = interpret_key("a", allow_all=False)
        assert response is ConfirmResponse.NO
        assert "invalid input" in echo

    @pytest.mark.parametrize("key", ["n", "N", "\r", "\n", ""])
    def test_no_and_enter(self, key):
        response, echo = interpret_key(key, allow_all=True)
        assert response is ConfirmResponse.NO
        assert "invalid" not in echo

    def test_other_key_is_no(self):
        response, echo = interpret_key("x")
        assert response is ConfirmResponse.NO
        assert echo == "x (invalid input, treating as N)"

    def test_ctrl_c_interrupts(self):
        with pytest.raises(KeyboardInterrupt):
            interpret_key("\x03")


class TestTerminalConfirmerLineMode:

    def _ask(self, text, allow_all=False):
        stdout = io.StringIO()
        confirmer = TerminalConfirmer(stdin=io.StringIO(text), stdout=stdout)
        return confirmer.ask("Overwrite users.sql?", allow_all=allow_all), stdout.getvalue()

    def test_prompt_suffix(self):
        _, out = self._ask("y\n", allow_all=True)
        assert out.startswith("Overwrite users.sql? (y/N/a[all]): ")
        _, out = self._ask("y\n")
        assert out.startswith("Overwrite users.sql? (y/N): ")

    def test_reads_first_character(self):
        assert self._ask("yes\n")[0] is ConfirmResponse.YES
        assert self._ask("all\n", allow_all=True)[0] is ConfirmResponse.ALL

    def test_blank_line_and_eof_are_no(self):
        assert self._ask("\n")[0] is ConfirmResponse.NO
        assert self._ask("")[0] is ConfirmResponse.NO


class TestScriptedConfirmer:

    def test_replays_then_defaults_to_no(self):
        confirmer = ScriptedConfirmer([ConfirmResponse.YES])
        assert confirmer.ask("one") is ConfirmResponse.YES
        assert confirmer.ask("two") is ConfirmResponse.NO
        assert confirmer.prompts == ["one", "two"]

    def test_all_not_allowed_is_no(self):
        assert ScriptedConfirmer([ConfirmResponse.ALL]).ask("q") is ConfirmResponse.NO
