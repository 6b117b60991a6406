"""
Completion engine for minibuffer reads.

A Completion holds a sorted candidate list and answers prefix queries
against it. In filename mode the candidates are re-read from the directory
named by the typed text on every attempt.
"""

from __future__ import annotations

import bisect
import logging
import os
from typing import Iterable

from edcmd.core.datamodels import CompletionStatus
from edcmd.core.paths import split_path

logger = logging.getLogger(__name__)


def _common_prefix(strings: list[str]) -> str:
    """Longest common prefix of a non-empty list."""
    return os.path.commonprefix(strings)


class Completion:
    """Candidate set for one minibuffer read."""

    def __init__(self, candidates: Iterable[str] = (), filename: bool = False):
        self.candidates: list[str] = sorted(candidates)
        self.filename = filename
        self.match: str = ""
        self.matches: list[str] = []

    def add(self, candidate: str) -> None:
        """Insert a candidate, keeping the list sorted."""
        bisect.insort(self.candidates, candidate)

    def _reread(self, typed: str) -> tuple[str, str] | None:
        """Reload candidates from the directory part of `typed`.

        Returns:
            (directory prefix as typed, basename to match), or None if the
            directory cannot be listed.
        """
        dir_part, base = split_path(typed)
        directory = os.path.expanduser(dir_part) if dir_part else "."
        try:
            with os.scandir(directory) as it:
                names = []
                for entry in it:
                    try:
                        is_dir = entry.is_dir()
                    except OSError:
                        is_dir = False
                    names.append(entry.name + "/" if is_dir else entry.name)
        except OSError as e:
            logger.debug(f"Cannot list {directory}: {e}")
            return None
        self.candidates = sorted(names)
        return dir_part, base

    def try_complete(self, typed: str) -> CompletionStatus:
        """Complete `typed` against the candidates.

        On MATCHED and MATCHED_NONUNIQUE, `self.match` holds the completed
        text. On NONUNIQUE, `self.matches` holds the candidates to display.
        """
        self.match = ""
        self.matches = []

        prefix_dir = ""
        search = typed
        if self.filename:
            reread = self._reread(typed)
            if reread is None:
                return CompletionStatus.NOTMATCHED
            prefix_dir, search = reread

        matches = [c for c in self.candidates if c.startswith(search)]
        self.matches = matches
        if not matches:
            status = CompletionStatus.NOTMATCHED
        elif len(matches) == 1:
            self.match = prefix_dir + matches[0]
            status = CompletionStatus.MATCHED
        elif search in matches:
            self.match = prefix_dir + search
            status = CompletionStatus.MATCHED_NONUNIQUE
        else:
            common = _common_prefix(matches)
            if len(common) > len(search):
                self.match = prefix_dir + common
                status = CompletionStatus.MATCHED
            else:
                status = CompletionStatus.NONUNIQUE

        logger.debug(f"Completion of {typed!r}: {status.value} ({len(matches)} matches)")
        return status

    def is_member(self, text: str) -> bool:
        """Exact membership test."""
        if self.filename:
            return os.path.exists(os.path.expanduser(text))
        idx = bisect.bisect_left(self.candidates, text)
        return idx < len(self.candidates) and self.candidates[idx] == text

    def __contains__(self, text: str) -> bool:
        return self.is_member(text)

    def __len__(self) -> int:
        return len(self.candidates)


def try_complete(completion: Completion, typed: str) -> CompletionStatus:
    """Complete `typed` against `completion`; see Completion.try_complete."""
    return completion.try_complete(typed)


def is_member(text: str, completion: Completion | None) -> bool:
    """Test `text` for exact membership in `completion`."""
    return completion is not None and completion.is_member(text)
