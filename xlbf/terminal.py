"""Single-character console input and output used by the interactive shell."""

from __future__ import annotations

import sys

_CTRL_C = "\x03"


def _read_raw_char() -> str:
    if sys.platform == "win32":
        import msvcrt

        return msvcrt.getwch()

    if not sys.stdin.isatty():
        return sys.stdin.read(1)

    import termios
    import tty

    fileno = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fileno)
    try:
        tty.setraw(fileno)
        return sys.stdin.read(1)
    finally:
        termios.tcsetattr(fileno, termios.TCSADRAIN, old_settings)


def read_char() -> int:
    """Read one character code without echoing it; 0 at end of input."""
    ch = _read_raw_char()
    if not ch:
        return 0
    if ch == _CTRL_C:
        raise KeyboardInterrupt
    if ch == "\r":
        return ord("\n")
    return ord(ch)


def write_text(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


__all__ = ["read_char", "write_text"]
