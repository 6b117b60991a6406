#!/usr/bin/env python3
"""
Tests for the dispatcher and the Editor that owns it.
"""

import pytest
from unittest.mock import MagicMock

from edcmd.commands import load_builtins
from edcmd.config import Config
from edcmd.core import CommandError, CommandNotFoundError, CommandResult, FunctionRegistry
from edcmd.editor import Editor
from edcmd.interfaces import Evaluator, KeySource, MacroStore, Renderer, UndoBuffer
from edcmd.scratch import RecordingRenderer, ScratchBuffer, ScriptedKeys


# ============================================================================
# Fixtures
# ============================================================================

def make_editor(text="", point=None, keys=(), registry=None):
    """Editor over a scratch buffer with scripted keys and no error pause."""
    return Editor(
        ScratchBuffer(text, point),
        ScriptedKeys(keys),
        RecordingRenderer(),
        registry=load_builtins(user_commands=False) if registry is None else registry,
        config=Config(invalid_input_delay=0),
    )


@pytest.fixture
def editor():
    return make_editor("abcdef", 0)


@pytest.fixture
def recording_registry():
    """A registry whose commands record how they were called."""
    reg = FunctionRegistry()
    reg.calls = []

    @reg.register("record")
    def record(editor, count, explicit, args):
        reg.calls.append((count, explicit, args))

    @reg.register("broken")
    def broken(editor, count, explicit, args):
        raise CommandError("Buffer is read-only")

    @reg.register("refuse")
    def refuse(editor, count, explicit, args):
        return False

    @reg.register("oops")
    def oops(editor, count, explicit, args):
        return {}["missing"]

    reg.freeze()
    return reg


# ============================================================================
# Repetition Tests
# ============================================================================

class TestRepetition:
    """Tests for execute_with_repetition."""

    def test_repeats_with_undo_bracket(self, editor):
        """Three successes: one start marker, three calls, one end marker."""
        incr = MagicMock(return_value=True)
        decr = MagicMock(return_value=True)
        result = editor.dispatcher.execute_with_repetition(3, True, incr, decr, True)

        assert result is CommandResult.SUCCESS
        assert incr.call_count == 3
        decr.assert_not_called()
        assert editor.buffer.undo_log == [("start", 0), ("end", 0)]

    def test_stops_on_first_failure(self, editor):
        """A failure on the 3rd call stops the loop and still closes undo."""
        action = MagicMock(side_effect=[True, True, False, True, True])
        result = editor.dispatcher.execute_with_repetition(5, True, action, None, True)

        assert result is CommandResult.FAILURE
        assert action.call_count == 3
        assert editor.buffer.undo_log[-1][0] == "end"
        assert len(editor.buffer.undo_log) == 2

    def test_negative_count_uses_backward(self, editor):
        """A negative count runs the backward action |count| times."""
        forward = MagicMock(return_value=True)
        backward = MagicMock(return_value=True)
        result = editor.dispatcher.execute_with_repetition(-2, True, forward, backward)

        assert result is CommandResult.SUCCESS
        forward.assert_not_called()
        assert backward.call_count == 2

    def test_negative_count_without_backward(self, editor):
        """Without a backward action a negative count runs nothing."""
        forward = MagicMock(return_value=True)
        result = editor.dispatcher.execute_with_repetition(-2, True, forward)
        assert result is CommandResult.SUCCESS
        forward.assert_not_called()

    def test_zero_count(self, editor):
        """A zero count runs nothing but still brackets undo."""
        action = MagicMock(return_value=True)
        result = editor.dispatcher.execute_with_repetition(0, True, action, undo=True)
        assert result is CommandResult.SUCCESS
        action.assert_not_called()
        assert editor.buffer.undo_log == [("start", 0), ("end", 0)]

    def test_no_undo_markers_by_default(self, editor):
        """Without undo no markers are written."""
        editor.dispatcher.execute_with_repetition(2, False, MagicMock(return_value=None))
        assert editor.buffer.undo_log == []

    def test_abort_stops_loop(self, editor):
        """ABORT ends the loop and is returned as is."""
        action = MagicMock(return_value=CommandResult.ABORT)
        result = editor.dispatcher.execute_with_repetition(4, True, action)
        assert result is CommandResult.ABORT
        assert action.call_count == 1

    def test_undo_end_written_on_exception(self, editor):
        """The end marker is written even if the action raises."""
        action = MagicMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            editor.dispatcher.execute_with_repetition(2, True, action, undo=True)
        assert editor.buffer.undo_log == [("start", 0), ("end", 0)]

    def test_undo_markers_track_point(self):
        """Markers record point before and after the repetitions."""
        editor = make_editor("abcdef", 4)
        result = editor.run_command("backward-delete-char", count=2, explicit=True)
        assert result is CommandResult.SUCCESS
        assert editor.buffer.text == "abef"
        assert editor.buffer.undo_log == [("start", 4), ("end", 2)]


# ============================================================================
# execute_named Tests
# ============================================================================

class TestExecuteNamed:
    """Tests for name resolution and invocation."""

    def test_runs_registered_command(self, editor):
        """A registered name runs with the given count."""
        assert editor.dispatcher.execute_named("forward-char", 2, True) is CommandResult.SUCCESS
        assert editor.buffer.point == 2

    def test_passes_count_explicit_and_args(self, recording_registry):
        """The action receives count, explicit flag and arguments."""
        editor = make_editor(registry=recording_registry)
        editor.dispatcher.execute_named("record", 7, True, ["x"])
        assert recording_registry.calls == [(7, True, ["x"])]

    def test_false_return_is_failure(self, recording_registry):
        """An action returning False fails."""
        editor = make_editor(registry=recording_registry)
        assert editor.dispatcher.execute_named("refuse") is CommandResult.FAILURE

    def test_command_error_is_reported(self, recording_registry):
        """A CommandError becomes FAILURE with the message shown."""
        editor = make_editor(registry=recording_registry)
        assert editor.dispatcher.execute_named("broken") is CommandResult.FAILURE
        assert editor.minibuffer.contents == "Buffer is read-only"
        assert editor.renderer.bells == 1

    def test_unexpected_exception_is_reported(self, recording_registry):
        """Any exception from an action becomes FAILURE with a message."""
        editor = make_editor(registry=recording_registry)
        assert editor.run_command("oops") is CommandResult.FAILURE
        assert editor.minibuffer.contents == "oops: KeyError: 'missing'"
        assert editor.renderer.bells == 1

    def test_macro_fallback(self, editor):
        """An unknown command name is played as a macro."""
        editor.macros.define("two-right", ["forward-char", "forward-char"])
        assert editor.dispatcher.execute_named("two-right") is CommandResult.SUCCESS
        assert editor.buffer.point == 2

    def test_macro_always_succeeds(self):
        """Macro playback counts as success even if a step fails."""
        editor = make_editor("ab", 0)
        editor.macros.define("far", ["forward-char"] * 5)
        assert editor.dispatcher.execute_named("far") is CommandResult.SUCCESS
        assert editor.buffer.point == 2

    def test_macro_with_unknown_step(self, editor):
        """An unknown step stops the macro but playback still succeeds."""
        editor.macros.define("m", ["forward-char", "no-such-cmd", "forward-char"])
        assert editor.run_command("m") is CommandResult.SUCCESS
        assert editor.buffer.point == 1
        assert editor.minibuffer.contents == "No such command: no-such-cmd"

    def test_macro_with_unknown_step_from_mx(self, editor):
        """A macro chosen from M-x is not reported as undefined."""
        editor.macros.define("m", ["forward-char", "no-such-cmd"])
        editor.keys.source.feed("m", "RET")
        result = editor.run_command("execute-extended-command")
        assert result is CommandResult.SUCCESS
        assert editor.minibuffer.contents == "No such command: no-such-cmd"

    def test_self_referencing_macro(self, editor):
        """A macro that calls itself is stopped instead of recursing."""
        editor.macros.define("loop", ["forward-char", "loop"])
        assert editor.run_command("loop") is CommandResult.SUCCESS
        assert editor.buffer.point == 1
        assert editor.minibuffer.contents == "Macro loop calls itself"

    def test_macro_replayable_after_error(self, editor):
        """A macro that stopped on an error can be played again."""
        editor.macros.define("loop", ["forward-char", "loop"])
        editor.run_command("loop")
        editor.run_command("loop")
        assert editor.buffer.point == 2

    def test_command_wins_over_macro(self, editor):
        """A command and a macro with the same name: the command runs."""
        editor.macros.define("forward-char", ["backward-char"])
        editor.dispatcher.execute_named("forward-char")
        assert editor.buffer.point == 1

    def test_not_found(self, editor):
        """Unknown names raise without running anything."""
        with pytest.raises(CommandNotFoundError, match="nope"):
            editor.dispatcher.execute_named("nope")
        assert editor.buffer.point == 0

    def test_external_macro_store(self):
        """Any MacroStore implementation can be plugged in."""
        macros = MagicMock()
        macros.macro_lookup.return_value = "the-macro"
        editor = Editor(
            ScratchBuffer(),
            ScriptedKeys(),
            RecordingRenderer(),
            registry=load_builtins(user_commands=False),
            macros=macros,
        )
        assert editor.dispatcher.execute_named("kmacro") is CommandResult.SUCCESS
        macros.macro_play.assert_called_once_with("the-macro")


# ============================================================================
# Editor Tests
# ============================================================================

class TestEditor:
    """Tests for Editor wiring and run_command."""

    def test_run_command_unknown(self, editor):
        """Unknown names are reported, not raised."""
        assert editor.run_command("nope") is CommandResult.FAILURE
        assert editor.minibuffer.contents == "No such command `nope'"

    def test_config_reaches_minibuffer(self):
        """Config values are applied to the minibuffer."""
        editor = Editor(
            ScratchBuffer(),
            ScriptedKeys(),
            RecordingRenderer(),
            registry=load_builtins(user_commands=False),
            config=Config(invalid_input_delay=0.5, ring_bell=False),
        )
        assert editor.minibuffer.invalid_input_delay == 0.5
        assert editor.minibuffer.ring_bell is False

    def test_default_registry(self):
        """Without a registry the built-ins are loaded."""
        editor = Editor(ScratchBuffer(), ScriptedKeys(), RecordingRenderer())
        assert "execute-extended-command" in editor.registry
        assert editor.registry.frozen

    def test_collaborators_satisfy_protocols(self, editor):
        """The in-memory collaborators implement the collaborator protocols."""
        assert isinstance(editor.buffer, UndoBuffer)
        assert isinstance(editor.keys.source, KeySource)
        assert isinstance(editor.renderer, Renderer)
        assert isinstance(editor.macros, MacroStore)
        assert isinstance(editor.evaluator, Evaluator)

    def test_histories_shared_with_minibuffer(self, editor):
        """The minibuffer uses the editor's history store."""
        assert editor.minibuffer.histories is editor.histories
        assert "files" in editor.histories
        assert "functions" in editor.histories


# ============================================================================
# Extended Command Tests
# ============================================================================

class TestExtendedCommand:
    """Tests for M-x."""

    def _mx(self, editor, *keys, text=None, count=1, explicit=False):
        if text:
            editor.keys.source.type_text(text)
        editor.keys.source.feed(*keys)
        return editor.run_command("execute-extended-command", count=count, explicit=explicit)

    def test_runs_named_command_with_count(self, editor):
        """M-x passes the prefix count to the chosen command."""
        result = self._mx(editor, "RET", text="forward-char", count=3, explicit=True)
        assert result is CommandResult.SUCCESS
        assert editor.buffer.point == 3
        assert list(editor.histories.get("functions")) == ["forward-char"]

    def test_prompt_plain(self, editor):
        self._mx(editor, "C-g")
        assert editor.renderer.lines[0] == ("M-x ", 4)

    def test_prompt_with_count(self, editor):
        self._mx(editor, "C-g", count=3, explicit=True)
        assert editor.renderer.lines[0][0] == "3 M-x "

    def test_prompt_with_bare_prefix(self, editor):
        editor.prefix_arg_empty = True
        self._mx(editor, "C-g", count=4, explicit=True)
        assert editor.renderer.lines[0][0] == "C-u M-x "

    def test_cancel(self, editor):
        """C-g at the prompt fails the command and reports Quit."""
        assert self._mx(editor, "C-g") is CommandResult.FAILURE
        assert editor.minibuffer.contents == "Quit"
        assert len(editor.histories.get("functions")) == 0

    def test_empty_name(self, editor):
        """An empty name is refused and the read continues."""
        self._mx(editor, "RET", "C-g")
        assert ("No function name given", 22) in editor.renderer.lines

    def test_undefined_name_then_retry(self, editor):
        """A bad name is reported; the buffer can be fixed and resubmitted."""
        result = self._mx(editor, "RET", "C-a", "C-k", *"forward-char", "RET", text="nope")
        assert result is CommandResult.SUCCESS
        assert ("Undefined function name `nope'", 30) in editor.renderer.lines
        assert editor.buffer.point == 1

    def test_internal_command_not_offered(self, editor):
        """Non-interactive commands cannot be run from M-x."""
        result = self._mx(editor, "RET", "C-g", text="setq")
        assert result is CommandResult.FAILURE

    def test_tab_completion(self, editor):
        """TAB completes a unique prefix."""
        self._mx(editor, "TAB", "RET", text="forward-c")
        assert editor.buffer.point == 1

    def test_macro_by_name(self, editor):
        """Macro names are offered and played."""
        editor.macros.define("hop", ["forward-char", "forward-char"])
        assert self._mx(editor, "RET", text="hop") is CommandResult.SUCCESS
        assert editor.buffer.point == 2

    def test_history_recall(self, editor):
        """M-p recalls the previous command name."""
        self._mx(editor, "RET", text="forward-char")
        self._mx(editor, "M-p", "RET")
        assert editor.buffer.point == 2
        assert list(editor.histories.get("functions")) == ["forward-char", "forward-char"]

    def test_command_failure_propagates(self):
        """The chosen command's failure is the result of M-x."""
        editor = make_editor("ab", 2)
        result = self._mx(editor, "RET", text="forward-char")
        assert result is CommandResult.FAILURE
        assert editor.minibuffer.contents == "End of buffer"
