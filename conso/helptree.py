"""
Help tree: a purely descriptive record of a declaration routine.

A HelpTree is filled during a help-mode traversal (branches are appended in
declaration order, then decorated) and rendered once afterwards:

- full(indent): every branch as "<hook * indent><path>", its descriptions one
  level deeper, then its own branches one level deeper. A branch that has no
  sub-commands and cannot be run is flagged with UNREACHABLE.
- terse(): the immediate branches' paths joined by " | ", used to suggest
  alternatives next to an error. A fallback with no tokens of its own is
  rendered as OTHERWISE by full() and left out of terse().

    greet
     | Give the world a wonderful greeting
    inv
     | Manage inventory
     | list
     |  | List all items in the inventory
"""
import warnings

from rich.text import Text

from .faults import UnreachableCommandWarning
from .utils import mainattr

INDENT = " | "
UNREACHABLE = "TODO: This command cannot be called..."
OTHERWISE = "<otherwise>"


class HelpTree:
    __slots__ = ("path_segment", "descriptions", "branches", "is_standalone_command")

    def __init__(self, path_segment=(), /):
        self.path_segment = list(path_segment)
        self.descriptions = []
        self.branches = []
        self.is_standalone_command = False

    def branch(self):
        """Append a new, empty child branch and return it."""
        self.branches.append(child := HelpTree())
        return child

    @property
    def label(self):
        return " ".join(self.path_segment)

    @property
    def reachable(self):
        return self.is_standalone_command or bool(self.branches)

    def notes(self, indent=0, /, hook=None):
        """Yield this tree's own descriptions, one line each."""
        if hook is None:
            hook = mainattr("__indent__", INDENT)
        for description in self.descriptions:
            for line in description.splitlines() or [""]:
                yield hook * indent + line

    def lines(self, indent=0, /, hook=None):
        """Yield the full rendering line by line."""
        if hook is None:
            hook = mainattr("__indent__", INDENT)
        for branch in self.branches:
            yield hook * indent + (branch.label or OTHERWISE)
            yield from branch.notes(indent + 1, hook=hook)
            if not branch.reachable:
                warnings.warn(UnreachableCommandWarning(branch.label or OTHERWISE), stacklevel=2)
                yield hook * (indent + 1) + UNREACHABLE
            yield from branch.lines(indent + 1, hook=hook)

    def full(self, indent=0, /):
        return "\n".join(self.lines(indent))

    def terse(self):
        return " | ".join(branch.label for branch in self.branches if branch.label)

    def __rich__(self):
        return Text(self.full())

    def __repr__(self):
        return f"<{type(self).__name__} {self.label!r} branches={len(self.branches)}>"


__all__ = (
    "HelpTree",
    "INDENT",
    "UNREACHABLE",
    "OTHERWISE",
)
