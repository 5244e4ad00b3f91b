"""Data types shared by the git layer, the exporters and the interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


@dataclass
class CommitInfo:
    """A single commit together with the files it touched."""

    hash: str
    author: str
    email: str
    date: str
    message: str
    files: list[str] = field(default_factory=list)


class Screen(IntEnum):
    """The screens of the interactive interface, in navigation order."""

    HOME = 0
    DIRECTORY = 1
    AUTHOR = 2
    OPTIONS = 3
    RESULTS = 4


class ToastType(IntEnum):
    """Kind of a toast notification."""

    SUCCESS = 0
    ERROR = 1


@dataclass
class Toast:
    """Animated notification state; times are in seconds."""

    message: str = ""
    type: ToastType = ToastType.SUCCESS
    visible: bool = False
    opacity: float = 0.0
    position: float = 0.0
    start_time: float = 0.0
    duration: float = 3.0


@dataclass(frozen=True)
class FetchCommitsMsg:
    """Result of gathering commits in the background."""

    commits: list[CommitInfo] = field(default_factory=list)
    branch: str = ""
    error: Exception | None = None


@dataclass(frozen=True)
class ExportExcelMsg:
    """Result of exporting commits to a workbook."""

    path: str = ""
    error: Exception | None = None


@dataclass(frozen=True)
class ResetToHomeMsg:
    """Request to return to the home screen."""


@dataclass(frozen=True)
class ShowToastMsg:
    """Request to show a toast for ``duration`` seconds."""

    message: str
    type: ToastType = ToastType.SUCCESS
    duration: float = 3.0


@dataclass(frozen=True)
class HideToastMsg:
    """Request to hide the current toast."""


@dataclass(frozen=True)
class TickMsg:
    """Animation tick carrying the time it fired at."""

    time: float