"""
Minibuffer: the single-line area used for prompts, messages and reads.

`read_line` is the core read loop: edit a line, then validate it (completion,
then the caller's acceptance test) and go back to editing until the input is
accepted or the user cancels with C-g. Nested reads are kept on a stack of
InputRequest frames; only the top frame receives keys.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from edcmd.core.completion import Completion, is_member
from edcmd.core.datamodels import CompletionStatus, InputRequest
from edcmd.core.exceptions import EmptyInputError, InvalidInputError
from edcmd.core.history import FILES, HistoryStore
from edcmd.core.paths import compact_path, expand_path
from edcmd.keys import KEYBOARD_QUIT, RET, SPC, TAB, KeyReader, is_printable

if TYPE_CHECKING:
    from edcmd.core.history import History
    from edcmd.interfaces import Renderer

logger = logging.getLogger(__name__)

# Acceptance test: (text, completion) -> bool
AcceptFn = Callable[[str, Optional[Completion]], bool]

NUMBER_ERROR = "Please enter a number."
YN_ERROR = "Please answer y or n.  "
YESNO_ERROR = "Please answer yes or no."


def _format_error(template: str | None, text: str) -> str:
    if not template:
        return f"Invalid input `{text}'"
    return template.replace("%s", text)


class Minibuffer:
    """Echo area and interactive line reader."""

    def __init__(
        self,
        keys: KeyReader,
        renderer: "Renderer",
        histories: HistoryStore | None = None,
        invalid_input_delay: float = 2.0,
        ring_bell: bool = True,
    ):
        self.keys = keys
        self.renderer = renderer
        self.histories = histories or HistoryStore()
        self.invalid_input_delay = invalid_input_delay
        self.ring_bell = ring_bell
        # Last message written; None when the echo area is clear
        self.contents: str | None = None
        self._frames: list[InputRequest] = []

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def write(self, msg: str) -> None:
        """Show a message in the minibuffer."""
        self.contents = msg
        self.renderer.render_minibuffer(msg, len(msg))

    def error(self, msg: str) -> None:
        """Show an error message and ring the bell."""
        logger.debug(f"Minibuffer error: {msg}")
        self.write(msg)
        self.ding()

    def clear(self) -> None:
        self.contents = None
        self.renderer.render_minibuffer("", 0)

    def dismiss(self) -> None:
        """Forget the current message without redrawing the echo area."""
        self.contents = None

    def no_error(self) -> bool:
        """True if nothing is currently shown in the echo area."""
        return self.contents is None

    def ding(self) -> None:
        if self.ring_bell:
            self.renderer.ding()

    def keyboard_quit(self) -> None:
        """Report a user abort."""
        self.error("Quit")

    # ------------------------------------------------------------------
    # Input request stack
    # ------------------------------------------------------------------

    @property
    def current(self) -> InputRequest | None:
        """The active input request, if a read is in progress."""
        return self._frames[-1] if self._frames else None

    @property
    def depth(self) -> int:
        return len(self._frames)

    def _push(self, request: InputRequest) -> InputRequest:
        self._frames.append(request)
        logger.debug(f"Input request pushed (depth {len(self._frames)}): {request.prompt!r}")
        return request

    def _pop(self, request: InputRequest) -> None:
        if not self._frames or self._frames[-1] is not request:
            raise RuntimeError("minibuffer input requests popped out of order")
        self._frames.pop()

    # ------------------------------------------------------------------
    # Line editor
    # ------------------------------------------------------------------

    def _render(self, request: InputRequest) -> None:
        self.renderer.render_minibuffer(
            request.prompt + request.value, len(request.prompt) + request.cursor
        )

    def _set_value(self, request: InputRequest, value: str) -> None:
        request.value = value
        request.cursor = len(value)

    def _insert(self, request: InputRequest, text: str) -> None:
        v, c = request.value, request.cursor
        request.value = v[:c] + text + v[c:]
        request.cursor = c + len(text)

    def _complete_in_place(self, request: InputRequest) -> None:
        completion = request.completion
        status = completion.try_complete(request.value)
        if status in (CompletionStatus.MATCHED, CompletionStatus.MATCHED_NONUNIQUE):
            self._set_value(request, completion.match)
            if status is CompletionStatus.MATCHED_NONUNIQUE:
                self.renderer.render_candidate_list(completion.matches)
        elif status is CompletionStatus.NONUNIQUE:
            self.renderer.render_candidate_list(completion.matches)
        else:
            self.ding()

    def _edit(self, request: InputRequest) -> str | None:
        """Edit `request` until RET (returns the text) or C-g (returns None).

        End of key input also cancels.
        """
        history = request.history
        if history is not None:
            history.reset()
        typed: str | None = None  # text before history recall began

        while True:
            self._render(request)
            key = self.keys.next_key()
            v, c = request.value, request.cursor

            if key is None or key == KEYBOARD_QUIT:
                return None
            elif key == RET:
                return request.value
            elif key in ("C-a", "HOME"):
                request.cursor = 0
            elif key in ("C-e", "END"):
                request.cursor = len(v)
            elif key in ("C-b", "LEFT"):
                if c > 0:
                    request.cursor = c - 1
                else:
                    self.ding()
            elif key in ("C-f", "RIGHT"):
                if c < len(v):
                    request.cursor = c + 1
                else:
                    self.ding()
            elif key in ("BACKSPACE", "C-h"):
                if c > 0:
                    request.value = v[:c - 1] + v[c:]
                    request.cursor = c - 1
                else:
                    self.ding()
            elif key in ("C-d", "DELETE"):
                if c < len(v):
                    request.value = v[:c] + v[c + 1:]
                else:
                    self.ding()
            elif key == "C-k":
                request.value = v[:c]
            elif key in ("M-p", "UP"):
                if history is None:
                    self.ding()
                    continue
                if history.cursor is None:
                    typed = v
                entry = history.previous()
                if entry is None:
                    self.ding()
                else:
                    self._set_value(request, entry)
            elif key in ("M-n", "DOWN"):
                if history is None or history.cursor is None:
                    self.ding()
                    continue
                entry = history.next()
                self._set_value(request, entry if entry is not None else typed or "")
            elif key == TAB or (
                key == SPC and request.completion is not None and not request.completion.filename
            ):
                if request.completion is None:
                    self.ding()
                else:
                    self._complete_in_place(request)
            elif key == SPC:
                self._insert(request, " ")
            elif is_printable(key):
                self._insert(request, key)
            else:
                self.ding()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _validate(
        self,
        request: InputRequest,
        text: str,
        empty_error: str | None,
        accept: AcceptFn | None,
        invalid_error: str | None,
    ) -> str | None:
        """Check submitted text.

        Returns:
            The accepted text, or None if the candidates were listed and the
            user must keep editing.

        Raises:
            EmptyInputError: Empty text where a value is required.
            InvalidInputError: `accept` rejected the text.
        """
        if not text and empty_error is not None:
            raise EmptyInputError(empty_error)

        completion = request.completion
        if completion is not None:
            status = completion.try_complete(text)
            if status is CompletionStatus.MATCHED:
                text = completion.match
                self._set_value(request, text)
            elif status is CompletionStatus.NONUNIQUE:
                self.renderer.render_candidate_list(completion.matches)
                return None

        if accept is not None and not accept(text, completion):
            raise InvalidInputError(_format_error(invalid_error, text))
        return text

    def read_line(
        self,
        prompt: str,
        value: str = "",
        completion: Completion | None = None,
        history: "History | None" = None,
        empty_error: str | None = None,
        accept: AcceptFn | None = None,
        invalid_error: str | None = None,
    ) -> str | None:
        """Read a line, retrying until it is accepted.

        Args:
            prompt: Prompt shown before the input
            value: Initial contents
            completion: Candidates for TAB and for completion on submit
            history: History recalled with M-p/M-n; accepted input is appended
            empty_error: If given, empty input is rejected with this message
            accept: Acceptance test called as accept(text, completion)
            invalid_error: Message for rejected input; `%s` is the input

        Returns:
            The accepted text, or None if the user cancelled.
        """
        request = self._push(InputRequest(prompt, value, completion=completion, history=history))
        try:
            while True:
                text = self._edit(request)
                if text is None:
                    logger.debug(f"Read cancelled: {prompt!r}")
                    return None

                try:
                    text = self._validate(request, text, empty_error, accept, invalid_error)
                except EmptyInputError as e:
                    self.error(str(e))
                    self._set_value(request, "")
                    self.keys.wait(self.invalid_input_delay)
                    continue
                except InvalidInputError as e:
                    self.error(str(e))
                    self.keys.wait(self.invalid_input_delay)
                    continue

                if text is None:
                    continue

                if history is not None:
                    history.append(text)
                self.clear()
                return text
        finally:
            self._pop(request)

    def read(self, prompt: str, value: str = "") -> str | None:
        """Read a string with no completion or validation."""
        return self.read_line(prompt, value)

    def read_completion(
        self,
        prompt: str,
        completion: Completion,
        value: str = "",
        history: "History | None" = None,
        empty_error: str | None = None,
        invalid_error: str | None = None,
    ) -> str | None:
        """Read one of the completion's candidates.

        Cancelling reports a keyboard quit.
        """
        text = self.read_line(
            prompt,
            value,
            completion=completion,
            history=history,
            empty_error=empty_error,
            accept=is_member,
            invalid_error=invalid_error,
        )
        if text is None:
            self.keyboard_quit()
        return text

    def read_number(self, prompt: str) -> int | None:
        """Read a non-negative integer; None if cancelled."""
        text = self.read_line(
            prompt,
            empty_error=NUMBER_ERROR,
            accept=lambda t, _: t.isascii() and t.isdigit(),
            invalid_error=NUMBER_ERROR,
        )
        if text is None:
            self.keyboard_quit()
            return None
        return int(text)

    def read_yn(self, prompt: str) -> bool | None:
        """Ask for a single y/n key; None on C-g."""
        errmsg = ""
        while True:
            self.write(errmsg + prompt)
            key = self.keys.next_key()
            if key == "y":
                return True
            if key == "n":
                return False
            if key is None or key == KEYBOARD_QUIT:
                return None
            errmsg = YN_ERROR

    def read_yesno(self, prompt: str) -> bool | None:
        """Ask for a typed yes/no answer; None if cancelled."""
        text = self.read_completion(
            prompt,
            Completion(["no", "yes"]),
            empty_error=YESNO_ERROR,
            invalid_error=YESNO_ERROR,
        )
        if text is None:
            return None
        return text == "yes"

    def read_filename(self, prompt: str, value: str, file: str | None = None) -> str | None:
        """Read a file name with filename completion.

        The initial value is shown with the home directory as `~` and the
        cursor placed before `file`, when given.

        Returns:
            The expanded absolute path, or None if cancelled or the typed
            name cannot be expanded.
        """
        expanded = expand_path(value)
        if expanded is None:
            return None
        initial = compact_path(expanded)
        cursor = len(initial) - len(file) if file else len(initial)

        history = self.histories.get(FILES) if FILES in self.histories else None
        request = self._push(
            InputRequest(prompt, initial, cursor, Completion(filename=True), history)
        )
        try:
            text = self._edit(request)
        finally:
            self._pop(request)

        if text is None:
            return None
        path = expand_path(text)
        if path is not None and history is not None:
            history.append(text)
        self.clear()
        return path
