"""Terminal front end: reads keys, runs background work and redraws."""

from __future__ import annotations

import argparse
import heapq
import itertools
import queue
import sys
import time
from concurrent.futures import Future, ThreadPoolExecutor

from blessed import Terminal

from gommits.render import render_view
from gommits.state import AppState, Delay, KeyMsg, KeyType, Quit, Run, WindowSizeMsg

POLL_INTERVAL = 0.05

_NAMED_KEYS = {
    "KEY_ENTER": KeyType.ENTER,
    "KEY_ESCAPE": KeyType.ESC,
    "KEY_TAB": KeyType.TAB,
    "KEY_BACKSPACE": KeyType.BACKSPACE,
    "KEY_DELETE": KeyType.BACKSPACE,
}

_RAW_KEYS = {
    "\r": KeyType.ENTER,
    "\n": KeyType.ENTER,
    "\t": KeyType.TAB,
    "\x7f": KeyType.BACKSPACE,
    "\x08": KeyType.BACKSPACE,
    "\x1b": KeyType.ESC,
}


def translate_key(keystroke) -> KeyMsg | None:
    """Turn a terminal keystroke into a key message, or None if it means nothing here."""
    text = str(keystroke)
    name = getattr(keystroke, "name", None)
    if not text and not name:
        return None
    if text == "\x03" or name == "KEY_CTRL_C":
        return KeyMsg(KeyType.CTRL_C)
    if text == "\x1b\t" or name == "KEY_ALT_TAB":
        return KeyMsg(KeyType.TAB, alt=True)
    if name in _NAMED_KEYS:
        return KeyMsg(_NAMED_KEYS[name])
    if text in _RAW_KEYS:
        return KeyMsg(_RAW_KEYS[text])
    if name:
        return None
    if text.isprintable():
        return KeyMsg(KeyType.RUNES, runes=text)
    return None


def _run(term: Terminal, state: AppState) -> None:
    results: queue.Queue[Future] = queue.Queue()
    delays: list = []
    order = itertools.count()
    pool = ThreadPoolExecutor(max_workers=2)

    def carry_out(commands) -> None:
        for command in commands:
            if isinstance(command, Quit):
                state.quitting = True
            elif isinstance(command, Run):
                pool.submit(command.func).add_done_callback(results.put)
            elif isinstance(command, Delay):
                deadline = time.monotonic() + command.seconds
                heapq.heappush(delays, (deadline, next(order), command.message))

    def dispatch(msg) -> None:
        carry_out(state.update(msg))

    size = None
    drawn = None
    try:
        while not state.quitting:
            current = (term.width, term.height)
            if current != size:
                size = current
                dispatch(WindowSizeMsg(*current))

            while True:
                try:
                    future = results.get_nowait()
                except queue.Empty:
                    break
                dispatch(future.result())

            now = time.monotonic()
            while delays and delays[0][0] <= now:
                _, _, build = heapq.heappop(delays)
                dispatch(build(now))
            if state.quitting:
                break

            view = render_view(state)
            if view != drawn:
                drawn = view
                frame = view.replace("\n", term.clear_eol + "\r\n")
                sys.stdout.write(term.home + term.clear + frame)
                sys.stdout.flush()

            timeout = POLL_INTERVAL
            if delays:
                timeout = max(0.0, min(timeout, delays[0][0] - time.monotonic()))
            msg = translate_key(term.inkey(timeout=timeout))
            if msg is not None:
                dispatch(msg)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


def main(argv=None) -> int:
    """Start the interactive commit browser."""
    parser = argparse.ArgumentParser(
        prog="gommits",
        description="Find commits by author in a Git repository and export them to Excel.",
    )
    parser.parse_args(argv)
    term = Terminal()
    try:
        with term.fullscreen(), term.raw(), term.hidden_cursor():
            _run(term, AppState())
    except Exception as exc:
        print(f"Error running program: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())