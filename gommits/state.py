"""State machine behind the interactive interface.

``AppState.update`` takes one message (a key press, a window resize or the
result of background work) and changes the state in place. It returns the
commands the caller should carry out next: ``Quit``, ``Run`` (call a
function and feed its result back as a message) or ``Delay`` (after some
seconds, feed back the message built from the current time).
"""

from __future__ import annotations

import os
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import partial
from typing import Union

from gommits.excel import ExcelExportError, export_to_excel
from gommits.git import (
    GitError,
    detect_default_branch,
    gather_commits,
    get_current_branch,
    is_git_repo,
)
from gommits.models import (
    CommitInfo,
    ExportExcelMsg,
    FetchCommitsMsg,
    HideToastMsg,
    ResetToHomeMsg,
    Screen,
    ShowToastMsg,
    TickMsg,
    Toast,
    ToastType,
)

INFO = "info"
ERROR = "error"
SUCCESS = "success"

WELCOME = "Welcome to Gommits App!"
DIRECTORY_PLACEHOLDER = "Enter path to Git repository"
DIRECTORY_PROMPT = "Please enter the path to a Git repository"
AUTHOR_PLACEHOLDER = "Enter author name or email"
AUTHOR_PROMPT = "Please enter the author name or email to filter commits"
MAX_COMMITS_PLACEHOLDER = "Enter maximum number of commits (0 for no limit)"
OPTIONS_PROMPT = "Configure additional options"
PARENT_BRANCH_PROMPT = "Enter parent branch name for comparison"

TOAST_DURATION = 3.0
TICK_INTERVAL = 0.05
SLIDE_IN = 0.3
FADE_IN = 0.2
FADE_OUT = 0.5

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class KeyType(Enum):
    """Kinds of key press the interface reacts to."""

    CTRL_C = auto()
    ESC = auto()
    ENTER = auto()
    TAB = auto()
    BACKSPACE = auto()
    RUNES = auto()


@dataclass(frozen=True)
class KeyMsg:
    """A key press; ``runes`` holds the typed text for ``KeyType.RUNES``."""

    type: KeyType
    runes: str = ""
    alt: bool = False


@dataclass(frozen=True)
class WindowSizeMsg:
    """The terminal was resized."""

    width: int
    height: int


@dataclass(frozen=True)
class Quit:
    """Command: stop the interface."""


@dataclass(frozen=True)
class Run:
    """Command: call ``func`` and deliver its return value as a message."""

    func: Callable[[], object]


@dataclass(frozen=True)
class Delay:
    """Command: after ``seconds``, deliver ``message(now)`` as a message."""

    seconds: float
    message: Callable[[float], object]


Command = Union[Quit, Run, Delay]


@dataclass
class TextInput:
    """Single-line text field editing at its end."""

    value: str = ""
    placeholder: str = DIRECTORY_PLACEHOLDER
    char_limit: int = 256
    width: int = 50

    def set_value(self, value: str) -> None:
        """Replace the text, cut to the character limit."""
        if self.char_limit > 0:
            value = value[: self.char_limit]
        self.value = value

    def insert(self, text: str) -> None:
        """Append typed text as far as the character limit allows."""
        if self.char_limit > 0:
            text = text[: max(0, self.char_limit - len(self.value))]
        self.value += text

    def backspace(self) -> None:
        """Delete the last character, if any."""
        self.value = self.value[:-1]


def fetch_commits(
    directory: str,
    author: str,
    max_commits: int,
    current_branch_only: bool,
    parent_branch: str,
) -> FetchCommitsMsg:
    """Gather commits and wrap them, or the error, in a message."""
    try:
        commits, branch = gather_commits(directory, author, parent_branch, current_branch_only)
    except GitError as exc:
        return FetchCommitsMsg(error=exc)
    if max_commits > 0:
        commits = commits[:max_commits]
    return FetchCommitsMsg(commits=commits, branch=branch)


def export_excel(commits: Sequence[CommitInfo], repo_path: str) -> ExportExcelMsg:
    """Export commits to a workbook and report the outcome as a message."""
    try:
        export_to_excel(commits, repo_path)
    except ExcelExportError as exc:
        return ExportExcelMsg(path=repo_path, error=exc)
    return ExportExcelMsg(path=repo_path)


def _parse_max_commits(text: str) -> int:
    match = _LEADING_INT.match(text)
    if not match:
        return 0
    return max(0, int(match.group(1)))


@dataclass
class AppState:
    """Everything the interface shows and remembers between key presses."""

    screen: Screen = Screen.HOME
    text_input: TextInput = field(default_factory=TextInput)
    directory: str = ""
    author: str = ""
    message: str = WELCOME
    message_style: str = INFO
    commits: list[CommitInfo] = field(default_factory=list)
    branch: str = ""
    max_commits: int = 0
    show_files: bool = True
    current_branch_only: bool = True
    parent_branch: str = "main"
    quitting: bool = False
    width: int = 0
    height: int = 0
    toast: Toast = field(default_factory=lambda: Toast(duration=TOAST_DURATION))
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    def update(self, msg: object) -> list[Command]:
        """Apply one message and return the commands to carry out."""
        if isinstance(msg, KeyMsg):
            return self._on_key(msg)
        if isinstance(msg, FetchCommitsMsg):
            self._on_fetched(msg)
            return []
        if isinstance(msg, ExportExcelMsg):
            return self._on_exported(msg)
        if isinstance(msg, ShowToastMsg):
            return self._on_show_toast(msg)
        if isinstance(msg, HideToastMsg):
            self._hide_toast()
            return []
        if isinstance(msg, TickMsg):
            return self._on_tick()
        if isinstance(msg, ResetToHomeMsg):
            self.screen = Screen.HOME
            self._prompt(DIRECTORY_PLACEHOLDER, "", WELCOME)
        elif isinstance(msg, WindowSizeMsg):
            self.width = msg.width
            self.height = msg.height
        return []

    def _info(self, message: str) -> None:
        self.message = message
        self.message_style = INFO

    def _error(self, message: str) -> None:
        self.message = message
        self.message_style = ERROR

    def _prompt(self, placeholder: str, value: str, message: str) -> None:
        self.text_input.placeholder = placeholder
        self.text_input.set_value(value)
        self._info(message)

    def _on_key(self, key: KeyMsg) -> list[Command]:
        if key.type in (KeyType.CTRL_C, KeyType.ESC):
            self.quitting = True
            return [Quit()]
        if key.type is KeyType.ENTER:
            handled, commands = self._on_enter()
            if handled:
                return commands
        elif key.type is KeyType.TAB:
            self._on_tab(key.alt)
        elif key.type is KeyType.RUNES:
            self._on_runes(key.runes)
        self._edit_text(key)
        return []

    def _edit_text(self, key: KeyMsg) -> None:
        if key.type is KeyType.RUNES:
            self.text_input.insert(key.runes)
        elif key.type is KeyType.BACKSPACE:
            self.text_input.backspace()

    def _on_enter(self) -> tuple[bool, list[Command]]:
        """Handle Enter; the flag says whether key processing ends here."""
        if self.screen is Screen.HOME:
            self.screen = Screen.DIRECTORY
            self._prompt(DIRECTORY_PLACEHOLDER, "", DIRECTORY_PROMPT)
        elif self.screen is Screen.DIRECTORY:
            return self._choose_directory(), []
        elif self.screen is Screen.AUTHOR:
            author = self.text_input.value
            if not author:
                self._error("Error: Author name cannot be empty")
                return True, []
            self.author = author
            self.screen = Screen.OPTIONS
            self._prompt(MAX_COMMITS_PLACEHOLDER, "0", OPTIONS_PROMPT)
            self.current_branch_only = True
        elif self.screen is Screen.OPTIONS:
            return True, self._confirm_options()
        elif self.screen is Screen.RESULTS:
            self._info("Exporting commits to Excel...")
            return True, [Run(partial(export_excel, list(self.commits), self.directory))]
        return False, []

    def _choose_directory(self) -> bool:
        directory = os.path.abspath(self.text_input.value or ".")
        if not is_git_repo(directory):
            self._error(f"Error: {directory} is not a Git repository")
            return True
        try:
            branch = get_current_branch(directory)
        except GitError as exc:
            self._error(f"Error getting branch name: {exc}")
            return True
        self.branch = branch
        self.directory = directory
        self.parent_branch = detect_default_branch(directory)
        self.screen = Screen.AUTHOR
        self._prompt(AUTHOR_PLACEHOLDER, "", AUTHOR_PROMPT)
        return False

    def _confirm_options(self) -> list[Command]:
        if self.message == PARENT_BRANCH_PROMPT:
            if self.text_input.value:
                self.parent_branch = self.text_input.value
            self._prompt(MAX_COMMITS_PLACEHOLDER, "0", OPTIONS_PROMPT)
            return []
        self.max_commits = _parse_max_commits(self.text_input.value)
        self._info(f"Fetching commits for author '{self.author}' in {self.directory}...")
        return [
            Run(
                partial(
                    fetch_commits,
                    self.directory,
                    self.author,
                    self.max_commits,
                    self.current_branch_only,
                    self.parent_branch,
                )
            )
        ]

    def _on_tab(self, alt: bool) -> None:
        if self.screen is Screen.DIRECTORY:
            self.text_input.set_value(".")
        elif self.screen is Screen.OPTIONS:
            if alt:
                self.show_files = not self.show_files
            else:
                self.current_branch_only = not self.current_branch_only

    def _on_runes(self, key: str) -> None:
        if self.screen is Screen.OPTIONS and key == "p":
            self._prompt(PARENT_BRANCH_PROMPT, self.parent_branch, PARENT_BRANCH_PROMPT)
        elif key == "b" and self.screen is not Screen.HOME:
            self._go_back()

    def _go_back(self) -> None:
        if self.screen is Screen.DIRECTORY:
            self.screen = Screen.HOME
            self._info(WELCOME)
        elif self.screen is Screen.AUTHOR:
            self.screen = Screen.DIRECTORY
            self._prompt(DIRECTORY_PLACEHOLDER, self.directory, DIRECTORY_PROMPT)
        elif self.screen is Screen.OPTIONS:
            self.screen = Screen.AUTHOR
            self._prompt(AUTHOR_PLACEHOLDER, self.author, AUTHOR_PROMPT)
        elif self.screen is Screen.RESULTS:
            self.screen = Screen.OPTIONS
            self._prompt(MAX_COMMITS_PLACEHOLDER, str(self.max_commits), OPTIONS_PROMPT)

    def _on_fetched(self, msg: FetchCommitsMsg) -> None:
        if msg.error is not None:
            self._error(f"Error: {msg.error}")
            return
        self.commits = list(msg.commits)
        self.branch = msg.branch
        self.screen = Screen.RESULTS
        self.message = f"Found {len(self.commits)} commits in branch '{self.branch}'"
        self.message_style = SUCCESS

    def _on_exported(self, msg: ExportExcelMsg) -> list[Command]:
        if msg.error is not None:
            toast = ShowToastMsg("❌ Export failed", ToastType.ERROR, TOAST_DURATION)
        else:
            toast = ShowToastMsg(
                f"✅ Exported {len(self.commits)} commits to Excel", ToastType.SUCCESS, TOAST_DURATION
            )
        return [Run(partial(lambda t: t, toast))]

    def _on_show_toast(self, msg: ShowToastMsg) -> list[Command]:
        self.toast = Toast(
            message=msg.message,
            type=msg.type,
            visible=True,
            opacity=0.0,
            position=0.0,
            start_time=self.clock(),
            duration=msg.duration,
        )
        return [
            Delay(msg.duration, lambda _now: HideToastMsg()),
            Delay(TICK_INTERVAL, TickMsg),
        ]

    def _hide_toast(self) -> None:
        self.toast.visible = False
        self.toast.opacity = 0.0
        self.toast.position = 0.0

    def _on_tick(self) -> list[Command]:
        toast = self.toast
        if not toast.visible:
            return []
        elapsed = self.clock() - toast.start_time
        if elapsed >= toast.duration:
            self._hide_toast()
            return []

        if elapsed < SLIDE_IN:
            remaining = 1 - elapsed / SLIDE_IN
            toast.position = 1 - remaining ** 3
        else:
            toast.position = 1.0

        fade_out_start = toast.duration - FADE_OUT
        if elapsed < FADE_IN:
            toast.opacity = elapsed / FADE_IN
        elif elapsed >= fade_out_start:
            toast.opacity = 1.0 - (elapsed - fade_out_start) / FADE_OUT
        else:
            toast.opacity = 1.0
        return [Delay(TICK_INTERVAL, TickMsg)]