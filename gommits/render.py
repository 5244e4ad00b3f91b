"""Turning the interface state into styled terminal text."""

from __future__ import annotations

import re
import textwrap
import unicodedata
from dataclasses import dataclass, replace

from gommits.models import Screen, Toast, ToastType
from gommits.state import ERROR, INFO, SUCCESS, AppState, TextInput

RESET = "\x1b[0m"
_ANSI = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_ZERO_WIDTH_CATEGORIES = ("Mn", "Me", "Cf")

TITLE = "Gommits - Commit Analyzer"
TOAST_FADE_BACKGROUND = "#1a1a1a"
MAX_DISPLAY_COMMITS = 5
MAX_MESSAGE_LENGTH = 60
MAX_LISTED_FILES = 3


def _char_width(char: str) -> int:
    if unicodedata.category(char) in _ZERO_WIDTH_CATEGORIES:
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


def _line_width(line: str) -> int:
    return sum(_char_width(char) for char in _ANSI.sub("", line))


def visible_width(text: str) -> int:
    """Return the width in cells of the widest line, ignoring escape codes."""
    return max((_line_width(line) for line in text.split("\n")), default=0)


def _rgb(color: str) -> tuple[int, int, int]:
    digits = color.lstrip("#")
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def _sgr(foreground: str | None = None, background: str | None = None, bold: bool = False) -> str:
    codes = []
    if bold:
        codes.append("1")
    if foreground:
        codes.append("38;2;{};{};{}".format(*_rgb(foreground)))
    if background:
        codes.append("48;2;{};{};{}".format(*_rgb(background)))
    return f"\x1b[{';'.join(codes)}m" if codes else ""


def _paint(sgr: str, text: str) -> str:
    return f"{sgr}{text}{RESET}" if sgr else text


@dataclass(frozen=True)
class Style:
    """Colours, spacing, border and alignment applied to a block of text.

    ``width`` counts the padding but not the border or the margin.
    """

    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    padding: tuple[int, int] = (0, 0)
    margin: int = 0
    border: bool = False
    border_foreground: str | None = None
    align: str = "left"
    width: int | None = None

    def _align(self, line: str, inner: int) -> str:
        short = max(0, inner - _line_width(line))
        if self.align == "center":
            left = short // 2
            return " " * left + line + " " * (short - left)
        return line + " " * short

    def render(self, text: str) -> str:
        """Return ``text`` laid out and coloured by this style."""
        pad_v, pad_h = self.padding
        lines = text.replace("\t", "    ").split("\n")
        inner = max((_line_width(line) for line in lines), default=0)
        if self.width is not None:
            wrap_width = max(1, self.width - 2 * pad_h)
            lines = [
                wrapped
                for line in lines
                for wrapped in (textwrap.wrap(line, wrap_width) or [""])
            ]
            inner = max(wrap_width, max((_line_width(line) for line in lines), default=0))

        blank = " " * inner
        body = [blank] * pad_v + [self._align(line, inner) for line in lines] + [blank] * pad_v
        sgr = _sgr(self.foreground, self.background, self.bold)
        side_pad = " " * pad_h
        body = [_paint(sgr, side_pad + line + side_pad) for line in body]
        outer = inner + 2 * pad_h

        if self.border:
            border_sgr = _sgr(self.border_foreground)
            top = _paint(border_sgr, "╭" + "─" * outer + "╮")
            bottom = _paint(border_sgr, "╰" + "─" * outer + "╯")
            side = _paint(border_sgr, "│")
            body = [top, *(side + line + side for line in body), bottom]
            outer += 2

        if self.margin:
            spaces = " " * self.margin
            full = " " * (outer + 2 * self.margin)
            body = (
                [full] * self.margin
                + [spaces + line + spaces for line in body]
                + [full] * self.margin
            )
        return "\n".join(body)


TITLE_STYLE = Style(
    foreground="#FAFAFA", background="#7D56F4", bold=True, padding=(0, 1), align="center", width=60
)
INFO_STYLE = Style(foreground="#FAFAFA", background="#2D3748", padding=(0, 1), align="center", width=60)
ERROR_STYLE = Style(foreground="#FAFAFA", background="#E53E3E", padding=(0, 1), align="center", width=60)
SUCCESS_STYLE = Style(foreground="#FAFAFA", background="#38A169", padding=(0, 1), align="center", width=60)
HIGHLIGHT_STYLE = Style(foreground="#7D56F4")
DIMMED_STYLE = Style(foreground="#9E9E9E")
COMMIT_HASH_STYLE = Style(foreground="#2D3748", bold=True)
COMMIT_AUTHOR_STYLE = Style(foreground="#38A169")
COMMIT_FILES_STYLE = Style(foreground="#7D56F4")
TOAST_STYLE = Style(
    foreground="#FAFAFA",
    background="#38A169",
    bold=True,
    padding=(1, 3),
    margin=1,
    border=True,
    border_foreground="#2F855A",
    align="center",
)
TOAST_ERROR_STYLE = replace(TOAST_STYLE, background="#E53E3E", border_foreground="#C53030")

MESSAGE_STYLES = {INFO: INFO_STYLE, ERROR: ERROR_STYLE, SUCCESS: SUCCESS_STYLE}


def place(width: int, height: int, text: str) -> str:
    """Centre ``text`` in a box of ``width`` by ``height`` cells.

    Lines wider, or blocks taller, than the box are left as they are.
    """
    lines = text.split("\n")
    block = visible_width(text)
    if width > block:
        centred = []
        for line in lines:
            total = width - _line_width(line)
            left = total // 2
            centred.append(" " * left + line + " " * (total - left))
        lines = centred
    gap = height - len(lines)
    if gap > 0:
        blank = " " * max(width, block)
        top = gap // 2
        lines = [blank] * top + lines + [blank] * (gap - top)
    return "\n".join(lines)


def bool_to_yes_no(value: bool) -> str:
    """Return "Yes" or "No"."""
    return "Yes" if value else "No"


def help_text(enter_action: str, include_back: bool, include_quit: bool, show_tab_hint: bool) -> str:
    """Build the key help line shown under each screen."""
    parts = []
    if enter_action:
        parts.append(HIGHLIGHT_STYLE.render("Enter") + " to " + enter_action)
    if include_back:
        parts.append(HIGHLIGHT_STYLE.render("B") + " for back")
    if include_quit:
        parts.append(HIGHLIGHT_STYLE.render("Esc") + " to quit")
    text = "Press " + ", ".join(parts) + ".\n" if parts else ""
    if show_tab_hint:
        text += DIMMED_STYLE.render("Hint: Press Tab to use current directory (.).") + "\n"
    return text


def blend(color: str, background: str, opacity: float) -> str:
    """Mix ``color`` over ``background`` at ``opacity``; return ``#rrggbb``."""
    mixed = (
        int(c * opacity + b * (1 - opacity)) for c, b in zip(_rgb(color), _rgb(background))
    )
    return "#{:02x}{:02x}{:02x}".format(*mixed)


def render_toast(toast: Toast) -> str:
    """Render a toast faded to its opacity; empty when it is not showing."""
    if not toast.visible or toast.opacity <= 0:
        return ""
    if toast.type is ToastType.ERROR:
        style, fill, edge = TOAST_ERROR_STYLE, "#E53E3E", "#C53030"
    else:
        style, fill, edge = TOAST_STYLE, "#38A169", "#2F855A"
    if toast.opacity < 1.0:
        style = replace(
            style,
            background=blend(fill, TOAST_FADE_BACKGROUND, toast.opacity),
            border_foreground=blend(edge, TOAST_FADE_BACKGROUND, toast.opacity),
            foreground=blend("#FAFAFA", TOAST_FADE_BACKGROUND, toast.opacity),
        )
    return style.render(toast.message)


def _text_input_view(text_input: TextInput) -> str:
    prompt = "> "
    if not text_input.value:
        return prompt + DIMMED_STYLE.render(text_input.placeholder)
    value = text_input.value
    if text_input.width > 0:
        value = value[-text_input.width:]
    return prompt + value + "\x1b[7m \x1b[0m"


def _home_content() -> str:
    return (
        "Welcome to Gommits App!\n\n"
        "This application helps you analyze Git commits and export changed files.\n\n"
        + HIGHLIGHT_STYLE.render("Features:\n")
        + "• Find commits by specific authors\n"
        "• View detailed commit information\n"
        "• Export changed files to Excel\n"
        "• Stylized terminal output\n\n"
        + help_text("start", False, True, False)
    )


def _options_content(state: AppState) -> str:
    key = HIGHLIGHT_STYLE.render
    return (
        _text_input_view(state.text_input)
        + "\n\n"
        + "Press " + key("Enter") + " to fetch commits.\n"
        + "Press " + key("Tab") + " to toggle current branch only ("
        + bool_to_yes_no(state.current_branch_only) + ").\n"
        + "Press " + key("Alt+Tab") + " to toggle show files ("
        + bool_to_yes_no(state.show_files) + ").\n"
        + "Press " + key("P") + " to edit parent branch (" + state.parent_branch + ").\n"
        + help_text("", True, True, False)
    )


def _results_content(state: AppState, reserved: int) -> str:
    out = []
    commits = state.commits
    if not commits:
        out.append("No commits found for this author.\n\n")
    else:
        out.append(f"Found {len(commits)} commits:\n\n")
        available = max(10, state.height - 15 - reserved)
        lines_per_commit = 7 if state.show_files else 5
        max_display = min(MAX_DISPLAY_COMMITS, max(1, available // lines_per_commit))
        shown = commits[:max_display]
        for commit in shown:
            out.append(COMMIT_HASH_STYLE.render(f"Commit: {commit.hash}") + "\n")
            out.append(f"  Author: {COMMIT_AUTHOR_STYLE.render(commit.author)}\n")
            out.append(f"  Date: {commit.date}\n")
            message = commit.message
            if len(message) > MAX_MESSAGE_LENGTH:
                message = message[: MAX_MESSAGE_LENGTH - 3] + "..."
            out.append(f"  Message: {message}\n")
            if state.show_files and commit.files:
                listed = ", ".join(commit.files[:MAX_LISTED_FILES])
                extra = len(commit.files) - MAX_LISTED_FILES
                if extra > 0:
                    listed = f"{listed} and {extra} more..."
                out.append(f"  Files: {COMMIT_FILES_STYLE.render(listed)}\n")
            out.append("\n")
        if len(commits) > len(shown):
            out.append(DIMMED_STYLE.render(f"...and {len(commits) - len(shown)} more commits\n"))
    out.append("\n")
    out.append("Press " + HIGHLIGHT_STYLE.render("Enter") + " to export to Excel.\n")
    out.append(help_text("", True, True, False))
    return "".join(out)


def _screen_content(state: AppState, reserved: int) -> str:
    if state.screen is Screen.HOME:
        return _home_content()
    if state.screen is Screen.DIRECTORY:
        return _text_input_view(state.text_input) + "\n\n" + help_text("continue", True, True, True)
    if state.screen is Screen.AUTHOR:
        return _text_input_view(state.text_input) + "\n\n" + help_text("continue", True, True, False)
    if state.screen is Screen.OPTIONS:
        return _options_content(state)
    return _results_content(state, reserved)


def render_view(state: AppState) -> str:
    """Render the whole screen for ``state``, with the toast above it if shown."""
    out = []
    showing_toast = state.toast.visible and state.toast.opacity > 0
    reserved = 4 if showing_toast else 0

    if showing_toast:
        toast = render_toast(state.toast)
        if toast:
            offset = int(2 * (1 - state.toast.position))
            indent = max(0, (state.width - visible_width(toast)) // 2)
            out.append("\n" * offset + " " * indent + toast + "\n\n")

    out.append(place(state.width, 3, TITLE_STYLE.render(TITLE)))
    out.append("\n")
    message_style = MESSAGE_STYLES.get(state.message_style, INFO_STYLE)
    out.append(place(state.width, 2, message_style.render(state.message)))
    out.append("\n\n")

    content_height = max(5, state.height - 8 - 3 - reserved)
    out.append(place(state.width, content_height, _screen_content(state, reserved)))

    key = HIGHLIGHT_STYLE.render
    footer = (
        "Navigation: " + key("Enter") + " to proceed, " + key("B") + " for back, "
        + key("Esc/Ctrl+C") + " to quit"
    )
    out.append("\n\n")
    out.append(place(state.width, 1, DIMMED_STYLE.render(footer)))
    return "".join(out)