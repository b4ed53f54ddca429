"""Tests for the value-or-cancelled prompts."""

import io

import pytest
from rich.console import Console

from compilerun.prompt import CANCELLED, Answer, Cancelled, Prompter


def _console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


def _replies(*replies: str):
    queue = list(replies)
    seen: list[str] = []

    def _input(prompt: str) -> str:
        seen.append(prompt)
        return queue.pop(0)

    return _input, seen


def _raise(exc: type[BaseException]):
    def _input(prompt: str) -> str:
        raise exc()

    return _input


class TestAnswerAndCancelled:
    def test_empty_answer_is_not_cancelled(self) -> None:
        assert not isinstance(Answer(""), Cancelled)
        assert Answer("") != CANCELLED

    def test_cancelled_repr(self) -> None:
        assert repr(CANCELLED) == "CANCELLED"


class TestPromptFlags:
    def test_typed_value(self) -> None:
        input_func, seen = _replies("-O2 -g")
        prompter = Prompter(_console(), input_func=input_func)
        assert prompter.prompt_flags("-Wall -Wextra") == Answer("-O2 -g")
        assert "Flags" in seen[0]
        assert "[-Wall -Wextra, - for none]" in seen[0]

    def test_empty_reply_keeps_default(self) -> None:
        input_func, _ = _replies("")
        prompter = Prompter(_console(), input_func=input_func)
        assert prompter.prompt_flags("-Wall -Wextra") == Answer("-Wall -Wextra")

    def test_dash_clears_default(self) -> None:
        input_func, _ = _replies(" - ")
        prompter = Prompter(_console(), input_func=input_func)
        assert prompter.prompt_flags("-Wall -Wextra") == Answer("")

    def test_dash_without_default_is_kept(self) -> None:
        input_func, _ = _replies("-")
        prompter = Prompter(_console(), input_func=input_func)
        assert prompter.prompt_run_args("") == Answer("-")

    def test_empty_default_and_reply_is_empty_answer(self) -> None:
        input_func, _ = _replies("")
        prompter = Prompter(_console(), input_func=input_func)
        assert prompter.prompt_flags("") == Answer("")

    @pytest.mark.parametrize("exc", [EOFError, KeyboardInterrupt])
    def test_cancel(self, exc: type[BaseException]) -> None:
        prompter = Prompter(_console(), input_func=_raise(exc))
        assert isinstance(prompter.prompt_flags("-Wall"), Cancelled)

    def test_preanswered_skips_input(self) -> None:
        prompter = Prompter(_console(), flags="", input_func=_raise(AssertionError))
        assert prompter.prompt_flags("-Wall -Wextra") == Answer("")


class TestPromptRunArgs:
    def test_typed_value(self) -> None:
        input_func, seen = _replies("  1 2 3  ")
        prompter = Prompter(_console(), input_func=input_func)
        assert prompter.prompt_run_args("") == Answer("1 2 3")
        assert "Arguments" in seen[0]

    def test_preanswered(self) -> None:
        prompter = Prompter(_console(), run_args="in.txt", input_func=_raise(AssertionError))
        assert prompter.prompt_run_args("x") == Answer("in.txt")

    def test_cancel(self) -> None:
        prompter = Prompter(_console(), input_func=_raise(EOFError))
        assert isinstance(prompter.prompt_run_args(""), Cancelled)


class TestPromptPath:
    def test_placeholder_shown(self) -> None:
        input_func, seen = _replies("/opt/bin/gcc")
        prompter = Prompter(_console(), input_func=input_func)
        assert prompter.prompt_path() == Answer("/opt/bin/gcc")
        assert "/usr/bin/gcc" in seen[0]

    def test_cancel(self) -> None:
        prompter = Prompter(_console(), input_func=_raise(KeyboardInterrupt))
        assert isinstance(prompter.prompt_path(), Cancelled)


class TestConfirmChangePath:
    def test_yes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("compilerun.prompt.Confirm.ask", lambda *a, **k: True)
        assert Prompter(_console()).confirm_change_path() is True

    def test_interrupt_is_no(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _ask(*args: object, **kwargs: object) -> bool:
            raise EOFError

        monkeypatch.setattr("compilerun.prompt.Confirm.ask", _ask)
        assert Prompter(_console()).confirm_change_path() is False
