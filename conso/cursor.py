"""
Token cursor: an immutable token sequence plus a consumption depth.

A cursor is created once per match attempt from the frozen input tokens. The
command layer never advances a scope's cursor in place: every declaration
takes a snapshot, lets a constraint consume from it, and keeps the snapshot
only when the constraint succeeded.

    >>> cursor = TokenCursor(["multiply", "5", "200"])
    >>> probe = cursor.snapshot()
    >>> probe.next(), probe.depth, cursor.depth
    ('multiply', 1, 0)
"""
from collections.abc import Iterable

from .utils import Unset


class TokenCursor:
    __slots__ = ("_tokens", "_depth")

    def __init__(self, tokens, depth=0, /):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("TokenCursor() argument must be an iterable of strings")
        tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("TokenCursor() argument must be an iterable of strings")
        if not isinstance(depth, int) or isinstance(depth, bool):
            raise TypeError("TokenCursor() depth must be an integer")
        if not 0 <= depth <= len(tokens):
            raise ValueError("TokenCursor() depth must be within the token sequence")
        self._tokens = tokens
        self._depth = depth

    @property
    def tokens(self):
        """All tokens of the attempt, consumed or not."""
        return self._tokens

    @property
    def depth(self):
        """Number of tokens consumed so far."""
        return self._depth

    def next(self):
        """
        Consume one token.

        Returns the token, or Unset when the input ran out (the depth is left
        untouched in that case).
        """
        if self._depth >= len(self._tokens):
            return Unset
        token = self._tokens[self._depth]
        self._depth += 1
        return token

    def remaining_empty(self):
        return self._depth == len(self._tokens)

    def remaining(self):
        return self._tokens[self._depth:]

    def consumed(self):
        return self._tokens[:self._depth]

    def snapshot(self):
        """Independent copy; consuming it never moves this cursor."""
        return TokenCursor(self._tokens, self._depth)

    def commit(self, snapshot, /):
        """
        Adopt the position of a snapshot taken from this cursor.

        Used after a speculative consume succeeded on the snapshot.
        """
        if not isinstance(snapshot, TokenCursor) or snapshot._tokens is not self._tokens:
            raise ValueError("commit() argument must be a snapshot of the same cursor")
        self._depth = snapshot._depth

    def __eq__(self, other):
        if not isinstance(other, TokenCursor):
            return NotImplemented
        return self._tokens == other._tokens and self._depth == other._depth

    __hash__ = None

    def __len__(self):
        return len(self._tokens) - self._depth

    def __repr__(self):
        return f"{type(self).__name__}({list(self._tokens)!r}, depth={self._depth})"


__all__ = (
    "TokenCursor",
)
