"""
Conso outcomes (okay, help, errors), the outcome slot, and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for the matching errors.
- FinishedState: the terminal result of one match attempt.
  • Okay: a command ran; optionally carries the value a handler quit with.
  • Help: an explicit `help` request; carries the rendered HelpTree.
  • CommandError: a depth-stamped failure (NoMatchingCommandError,
    ExcessArgumentsError, InvalidArgumentError, UnresolvedScopeError) with an
    optional HelpTree attached for suggestions.
- OutcomeSlot: the single write-once holder shared by every Command of an
  attempt. The first resolve() wins; later writes are ignored.
- CommandWarning / UnreachableCommandWarning: declaration mistakes found while
  rendering help.
- trigger(): surface a finished state on a rich console.

Errors are data
- Errors are recorded into the slot while the declaration routine runs and
  are only inspected once the traversal returned. CommandError derives from
  Exception so a non-shell driver may raise it afterwards; nothing raises it
  mid-traversal.

Rendering (plain text, no color)
    # Error
    multiply 5 200
               ^^^ Invalid argument
    Potential inputs: number(0..100)
"""
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset, mainattr

console = Console(stderr=True, highlight=False)
"""Console errors are rendered on when the driver is given none."""

output = Console(highlight=False)
"""Console help is rendered on when the driver is given none."""


class FaultCode(IntEnum):
    """
    canonical fault codes for matching errors (stable identifiers).

    grouping
    - routing (1110x): NO_MATCHING_COMMAND, UNRESOLVED_SCOPE
    - arguments (1111x): INVALID_ARGUMENT, EXCESS_ARGUMENTS

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- routing errors (11xxx) ---
    NO_MATCHING_COMMAND = 11101
    UNRESOLVED_SCOPE    = 11102

    # --- argument errors (11xxx) ---
    INVALID_ARGUMENT    = 11111
    EXCESS_ARGUMENTS    = 11112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(mainattr("__codes__", {}).get(self, self.value))


class FinishedState:
    __slots__ = ()

    def __trigger__(self, **options):
        raise NotImplementedError


class Okay(FinishedState):
    __slots__ = ("value",)

    def __init__(self, value=Unset, /):
        self.value = value

    def __trigger__(self, **options):
        pass

    def __repr__(self):
        return f"Okay({self.value!r})"


class Help(FinishedState):
    __slots__ = ("tree",)

    def __init__(self, tree, /):
        self.tree = tree

    def __rich__(self):
        lines = [Text("# Help information")]
        indent = 0
        if self.tree.path_segment:
            lines.append(Text(self.tree.label))
            lines.extend(map(Text, self.tree.notes(1)))
            indent = 1
        if rendered := self.tree.full(indent):
            lines.append(Text(rendered))
        return Group(*lines)

    def __trigger__(self, **options):
        options.get("console", output).print(self, soft_wrap=True)

    def __repr__(self):
        return f"Help({self.tree!r})"


class CommandError(FinishedState, Exception):
    """
    Base of the matching errors.

    Attributes
    - depth: index of the token the error points at (tokens consumed so far).
    - tokens: the full input of the attempt, echoed when rendering.
    - help: HelpTree with contextual suggestions, or Unset until attached.
    """
    code = None
    message = None

    def __init__(self, depth, /, tokens=(), *, help=Unset):
        if not isinstance(depth, int) or depth < 0:
            raise ValueError(f"{type(self).__name__}() depth must be a non-negative integer")
        super().__init__(self.message)
        self.depth = depth
        self.tokens = tuple(tokens)
        self.help = help

    def __str__(self):
        return f"[{self.code.normalize()}] {self.message} (at token {self.depth})"

    def __rich__(self):
        length = sum(len(token) + 1 for token in self.tokens[:self.depth])
        width = len(self.tokens[self.depth]) if self.depth < len(self.tokens) else 1
        lines = [
            Text("# Error"),
            Text(" ".join(self.tokens)),
            Text(" " * length + "^" * width + " " + self.message),
        ]
        if self.help is not Unset and (suggestions := self.help.terse()):
            lines.append(Text("Potential inputs: " + suggestions))
        return Group(*lines)

    def __trigger__(self, **options):
        options.get("console", console).print(self, soft_wrap=True)

    def __repr__(self):
        return f"{type(self).__name__}(depth={self.depth}, tokens={list(self.tokens)!r})"


class NoMatchingCommandError(CommandError):
    code = FaultCode.NO_MATCHING_COMMAND
    message = "Input did not match any wanted command"


class UnresolvedScopeError(CommandError):
    code = FaultCode.UNRESOLVED_SCOPE
    message = "Argument did not match any possible command"


class InvalidArgumentError(CommandError):
    code = FaultCode.INVALID_ARGUMENT
    message = "Invalid argument"


class ExcessArgumentsError(CommandError):
    code = FaultCode.EXCESS_ARGUMENTS
    message = "Excess arguments passed"


class OutcomeSlot:
    """
    Write-once holder of the finished state of one match attempt.

    Every Command created during the attempt shares the same slot. resolve()
    is the only way to write it and enforces first-write-wins, so call sites
    never need to re-check before writing. The slot also carries the driver
    options (console, prompt, stream, shell) for nested interactive loops.
    """
    __slots__ = ("_state", "options")

    def __init__(self, **options):
        self._state = Unset
        self.options = MappingProxyType(options)

    @property
    def state(self):
        return self._state

    @property
    def resolved(self):
        return self._state is not Unset

    def resolve(self, state, /):
        """Record state if nothing was recorded yet; report whether it was."""
        if not isinstance(state, FinishedState):
            raise TypeError("resolve() argument must be a finished state")
        if self._state is not Unset:
            return False
        self._state = state
        return True

    def attach(self, tree, /):
        """Attach suggestions to a recorded error that has none yet."""
        if isinstance(self._state, CommandError) and self._state.help is Unset:
            self._state.help = tree

    def __repr__(self):
        return f"{type(self).__name__}({self._state!r})"


class CommandWarning(Warning):
    def __init__(self, message, /):
        super().__init__(message)
        self.message = message


class UnreachableCommandWarning(CommandWarning):
    def __init__(self, command, /):
        super().__init__(f"command {command!r} has no sub-commands and cannot be run")
        self.command = command


def trigger(state, /, **options):
    """
    surface a finished state with the given runtime options.

    contract
    - state must provide a __trigger__ method (see FinishedState).
    - options: console (rich Console to print on) and any other context.
    """
    if not hasattr(state, "__trigger__") or not callable(state.__trigger__):
        raise TypeError("trigger() argument must have a __trigger__ method")
    state.__trigger__(**options)


__all__ = (
    "FaultCode",
    "FinishedState",
    "Okay",
    "Help",
    "CommandError",
    "NoMatchingCommandError",
    "UnresolvedScopeError",
    "InvalidArgumentError",
    "ExcessArgumentsError",
    "OutcomeSlot",
    "CommandWarning",
    "UnreachableCommandWarning",
    "trigger",
)
