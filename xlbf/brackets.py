from __future__ import annotations

from typing import Dict

from .errors import BrainfuckSyntaxError


def find_matching_bracket(code: str, position: int) -> int:
    """Return the index of the bracket paired with ``code[position]``.

    ``[`` scans forward and ``]`` scans backward. The nesting counter starts
    at 1, grows on brackets facing the same way and shrinks on the opposite
    ones; the partner is where it reaches 0. Raises ``BrainfuckSyntaxError``
    when the scan runs off the end of the program.
    """
    opener = code[position]
    if opener == "[":
        same, other, step, missing = "[", "]", 1, "]"
    elif opener == "]":
        same, other, step, missing = "]", "[", -1, "["
    else:
        raise ValueError(f"No bracket at position {position}: {opener!r}")

    depth = 1
    index = position + step
    while 0 <= index < len(code):
        char = code[index]
        if char == same:
            depth += 1
        elif char == other:
            depth -= 1
            if depth == 0:
                return index
        index += step
    raise BrainfuckSyntaxError(missing, position)


class BracketMatcher:
    """Caches partner lookups for one program.

    Only successful matches are stored, so an unmatched bracket is still
    reported when execution reaches it and not before.
    """

    def __init__(self, code: str) -> None:
        self.code = code
        self._partners: Dict[int, int] = {}

    def match(self, position: int) -> int:
        partner = self._partners.get(position)
        if partner is None:
            partner = find_matching_bracket(self.code, position)
            self._partners[position] = partner
            self._partners[partner] = position
        return partner


__all__ = ["BracketMatcher", "find_matching_bracket"]
