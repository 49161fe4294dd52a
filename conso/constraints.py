r"""
Conso constraints: how a command consumes tokens and how it names itself.

Overview
- Constraint: the capability every head/argument of a command provides.
  • describe(callback): emit zero or more human-readable name fragments.
  • consume(cursor): advance the cursor and return a value, or return Unset.
    On failure the cursor position is unspecified; callers snapshot first.

- Built-in constraints
  • Literal("greet"): one token equal to the literal; value None.
  • Capture(): any one token; value is the token; described as <string>.
  • Number(lo, hi, type=int): one token converted by `type` within [lo, hi);
    described as number(lo..hi).
  • Chain(a, b, ...): members in sequence, fails fast; value is a tuple.
  • Either(a, b): first member that matches (each on its own snapshot).
  • Maybe(c): optional member; value is None when absent.
  • Many(c): zero or more repetitions; value is a list.

- constrain(object): coerce declaration shorthands into constraints
  • "text" → Literal, range(lo, hi) → Number, (a, b) → Chain, str → Capture.

Notes
- Chain does not roll back partial consumption; Either, Maybe and Many are the
  only constraints that backtrack, and only within themselves. Alternatives
  between commands are declared as sibling commands instead.

Quick example:
    >>> from conso.cursor import TokenCursor
    >>> constraint = constrain(("move", range(0, 10)))
    >>> constraint.consume(TokenCursor(["move", "3"]))
    (None, 3)
"""
from .utils import Unset


class Constraint:
    """
    Base class of every constraint.

    Subclasses implement describe() and consume(). The base provides
    description() (fragments joined by a space) and a repr built from it.
    """
    __slots__ = ()

    def describe(self, callback, /):
        raise NotImplementedError

    def consume(self, cursor, /):
        raise NotImplementedError

    def description(self):
        fragments = []
        self.describe(fragments.append)
        return " ".join(fragments)

    def __repr__(self):
        return f"<{type(self).__name__} {self.description()!r}>"


class Literal(Constraint):
    __slots__ = ("_text",)

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError("Literal() argument must be a string")
        # empty or spaced text is allowed; split input never matches it
        self._text = text

    @property
    def text(self):
        return self._text

    def describe(self, callback, /):
        callback(self._text)

    def consume(self, cursor, /):
        if cursor.next() != self._text:
            return Unset
        return None

    def __eq__(self, other):
        if not isinstance(other, Literal):
            return NotImplemented
        return self._text == other._text

    def __hash__(self):
        return hash((Literal, self._text))


class Capture(Constraint):
    """Any single token, captured as a string."""
    __slots__ = ()

    def describe(self, callback, /):
        callback("<string>")

    def consume(self, cursor, /):
        return cursor.next()


class Number(Constraint):
    """
    A single numeric token within a half-open bound.

    Parameters
    - lo, hi: bounds, lo inclusive and hi exclusive (the way range() reads).
    - type: converter applied to the token (int by default, float works too).
      Tokens the converter rejects with ValueError do not match.
    """
    __slots__ = ("_lo", "_hi", "_type")

    def __init__(self, lo, hi, /, type=int):
        if not callable(type):
            raise TypeError("Number() type must be callable")
        if lo > hi:
            raise ValueError("Number() lower bound must not exceed the upper bound")
        self._lo = lo
        self._hi = hi
        self._type = type

    @classmethod
    def from_range(cls, bounds, /):
        if not isinstance(bounds, range):
            raise TypeError("from_range() argument must be a range")
        if bounds.step != 1:
            raise ValueError("from_range() argument must have a step of 1")
        return cls(bounds.start, bounds.stop)

    @property
    def bounds(self):
        return self._lo, self._hi

    def describe(self, callback, /):
        callback(f"number({self._lo}..{self._hi})")

    def consume(self, cursor, /):
        if (token := cursor.next()) is Unset:
            return Unset
        # ascii numerals only; digit separators and padding are rejected
        if not token.isascii() or "_" in token or token != token.strip():
            return Unset
        try:
            value = self._type(token)
        except ValueError:
            return Unset
        if not self._lo <= value < self._hi:
            return Unset
        return value


class Chain(Constraint):
    """
    Sequential composition; the value is the tuple of member values.

    Chain() with no members consumes nothing and always matches, which is what
    Ctx.otherwise() declares.
    """
    __slots__ = ("_members",)

    def __init__(self, *members):
        self._members = tuple(map(constrain, members))

    @property
    def members(self):
        return self._members

    def describe(self, callback, /):
        for member in self._members:
            member.describe(callback)

    def consume(self, cursor, /):
        values = ()
        for member in self._members:
            if (value := member.consume(cursor)) is Unset:
                return Unset
            values += (value,)
        return values


class Either(Constraint):
    __slots__ = ("_first", "_second")

    def __init__(self, first, second, /):
        self._first = constrain(first)
        self._second = constrain(second)

    def describe(self, callback, /):
        callback("[")
        self._first.describe(callback)
        callback("|")
        self._second.describe(callback)
        callback("]")

    def consume(self, cursor, /):
        for member in (self._first, self._second):
            probe = cursor.snapshot()
            if (value := member.consume(probe)) is not Unset:
                cursor.commit(probe)
                return value
        return Unset


class Maybe(Constraint):
    __slots__ = ("_inner",)

    def __init__(self, inner, /):
        self._inner = constrain(inner)

    def describe(self, callback, /):
        callback("(")
        self._inner.describe(callback)
        callback(")?")

    def consume(self, cursor, /):
        probe = cursor.snapshot()
        if (value := self._inner.consume(probe)) is Unset:
            return None
        cursor.commit(probe)
        return value


class Many(Constraint):
    __slots__ = ("_inner",)

    def __init__(self, inner, /):
        self._inner = constrain(inner)

    def describe(self, callback, /):
        callback("(")
        self._inner.describe(callback)
        callback(")*")

    def consume(self, cursor, /):
        values = []
        while True:
            probe = cursor.snapshot()
            if (value := self._inner.consume(probe)) is Unset:
                return values
            # zero-width repetitions would never terminate
            if probe.depth == cursor.depth:
                return values
            cursor.commit(probe)
            values.append(value)


def constrain(object, /):
    """
    Coerce a declaration shorthand into a Constraint.

    - Constraint     → itself
    - str            → Literal(object)
    - range          → Number.from_range(object)
    - tuple          → Chain(*object)
    - the type str   → Capture()

    Raises
    - TypeError for anything else.
    """
    if isinstance(object, Constraint):
        return object
    if isinstance(object, str):
        return Literal(object)
    if isinstance(object, range):
        return Number.from_range(object)
    if isinstance(object, tuple):
        return Chain(*object)
    if object is str:
        return Capture()
    raise TypeError(f"constrain() argument must be a constraint, a string, a range or a tuple, not {type(object).__name__!r}")


__all__ = (
    "Constraint",
    "Literal",
    "Capture",
    "Number",
    "Chain",
    "Either",
    "Maybe",
    "Many",
    "constrain",
)
