"""
Conso command layer: match tokens against a declared command tree.

What this module provides
- Ctx: the object a declaration routine receives. Its command(...) family
  declares one node of the command tree; what that declaration *does* depends
  on the interpretation mode the Ctx carries.
- Command: one declared node. Fluent methods (description, arg,
  sub_commands, run, run_with, user_loop) behave per mode.
- RunCtx: what a run_with(...) handler receives (parsed data and quit()).
- Drivers: parse(tokens, declare), args(declare), user_loop(declare).

Core idea
- There is no command tree object. A declaration routine is a plain callable
  taking a Ctx; it is invoked once per interpretation mode:
  • Mode.MATCH: consume tokens, pick exactly one command, run its handler.
  • Mode.HELP:  describe every declaration into a HelpTree; no handler runs.
  • Mode.SEEK:  walk down an already matched path, then describe what lies
    below it (contextual suggestions for errors).
  Routines must therefore keep side effects inside run/run_with handlers.

Quick start
    from conso import parse

    def declare(ctx):
        ctx.command("greet").description("Say hello").run(lambda: print("hello"))
        ctx.command("multiply") \\
            .arg(range(0, 100)) \\
            .arg(range(0, 100)) \\
            .run(lambda a, b: print(a * b))

    parse(["multiply", "5", "7"], declare)    # prints 35
    parse(["help"], declare)                   # prints the help tree

Matching policy
- Siblings are tried in declaration order, each on its own snapshot of the
  scope cursor. The first command whose head matches is committed to: if it
  later fails (bad argument, excess tokens, nothing below matched) the error
  is recorded and later siblings are not tried.
- The outcome slot is written once per attempt; the first write wins.
- A lone `help` token at any scope answers with that scope's help tree.
- `help <path>` answers with the help of the command the path leads to.

Finalization
- Every Command finalizes exactly once: when its Ctx declares the next
  command, when the declaration routine returns, when run/run_with/user_loop
  complete, or when a `with` block around it exits.
  • matching: a head that matched but resolved nothing records
    UnresolvedScopeError at its depth.
  • help: the head and argument descriptions become the branch path.
"""
import sys
from collections.abc import Iterable
from enum import Enum
from types import SimpleNamespace

from .constraints import constrain
from .cursor import TokenCursor
from .faults import *
from .faults import output
from .helptree import HelpTree
from .utils import *

HELP_TOKEN = "help"
USER_LOOP = "User loop"
PROMPT = "~> "


class Mode(Enum):
    MATCH = "match"
    HELP = "help"
    SEEK = "seek"


def _walk(declare, ctx):
    """Run one declaration routine against ctx; the last command always finalizes."""
    try:
        declare(ctx)
    finally:
        ctx.close()


def _pick(cursor, slot, declare, *, require):
    """
    Match one scope: the top level, or the routine given to sub_commands().

    Parameters
    - cursor: position right after the tokens consumed by enclosing commands.
    - slot: outcome slot of the attempt.
    - declare: the scope's declaration routine.
    - require: when True an unresolved scope is an error; nested scopes pass
      False so the parent command may still fall back to its own run().
    """
    if cursor.remaining() == (HELP_TOKEN,):
        tree = HelpTree(cursor.consumed())
        _walk(declare, Ctx(Mode.HELP, tree=tree))
        slot.resolve(Help(tree))
        return

    _walk(declare, Ctx(Mode.MATCH, cursor=cursor, slot=slot))

    if require and not slot.resolved:
        slot.resolve(NoMatchingCommandError(cursor.depth, cursor.tokens))

    _suggest(cursor, slot, declare)


def _suggest(cursor, slot, declare):
    """
    Attach contextual help to a recorded error that has none yet.

    An error at this scope's own depth gets the scope's full help. A deeper
    error gets the help of the command reached by re-walking the tokens
    between this scope and the error (seek mode).
    """
    error = slot.state
    if not isinstance(error, CommandError) or error.help is not Unset:
        return

    tree = HelpTree(cursor.tokens[:error.depth])
    if error.depth <= cursor.depth:
        _walk(declare, Ctx(Mode.HELP, tree=tree))
    else:
        focus = TokenCursor(cursor.tokens[:error.depth], cursor.depth)
        _walk(declare, Ctx(Mode.SEEK, cursor=focus, tree=tree, found=SimpleNamespace(found=False)))
    slot.attach(tree)


def _describe(cursor, slot, declare):
    """
    Answer `help <path>`: the help of the command the path leads to.

    The path is walked in seek mode. When no declared command is reached the
    path token is reported as an unresolved scope, with the top-level help
    attached.
    """
    focus = cursor.snapshot()
    focus.next()
    tree = HelpTree(focus.remaining())
    found = SimpleNamespace(found=False)
    _walk(declare, Ctx(Mode.SEEK, cursor=focus, tree=tree, found=found))
    if found.found:
        slot.resolve(Help(tree))
        return
    slot.resolve(UnresolvedScopeError(focus.depth, cursor.tokens))
    _suggest(focus, slot, declare)


class RunCtx:
    """
    Handle given to run_with() handlers.

    - data: tuple of the values parsed for the command.
    - quit(value): ask the enclosing interactive loop to return value once
      the current attempt completes.
    """
    __slots__ = ("_data", "_result")

    def __init__(self, data, /):
        self._data = tuple(data)
        self._result = Unset

    @property
    def data(self):
        return self._data

    @property
    def result(self):
        return self._result

    def quit(self, value=None, /):
        self._result = value

    def __repr__(self):
        return f"{type(self).__name__}({self._data!r})"


class Ctx:
    """
    Declaration context passed to a declaration routine.

    Invariants
    - At most one pending (declared, not yet finalized) Command per Ctx.
    - Matching mode never advances the scope cursor itself; each declaration
      consumes from its own snapshot.
    """
    __slots__ = ("_mode", "_cursor", "_slot", "_tree", "_found", "_pending")

    def __init__(self, mode, /, *, cursor=Unset, slot=Unset, tree=Unset, found=Unset):
        if not isinstance(mode, Mode):
            raise TypeError("Ctx() mode must be a Mode")
        self._mode = mode
        self._cursor = cursor
        self._slot = slot
        self._tree = tree
        self._found = found
        self._pending = None

    @property
    def mode(self):
        return self._mode

    def command(self, constraint, /):
        """
        Declare a command whose head is `constraint`.

        The value parsed by the head is dropped; the command's data starts
        empty and grows with each arg(...).
        """
        return self._declare(constraint, keep=False)

    def data_command(self, constraint, /):
        """Declare a command whose head value is kept as its first datum."""
        return self._declare(constraint, keep=True)

    def otherwise(self):
        """Declare a fallback command that consumes no token."""
        return self.command(())

    def close(self):
        """Finalize the pending command, if any."""
        if self._pending is not None:
            pending, self._pending = self._pending, None
            pending.finalize()

    def _declare(self, constraint, keep):
        constraint = constrain(constraint)
        self.close()
        match self._mode:
            case Mode.MATCH:
                command = self._match(constraint, keep)
            case Mode.HELP:
                command = Command(Mode.HELP, constraint, tree=self._tree.branch())
            case Mode.SEEK:
                command = self._seek(constraint)
        self._pending = command
        return command

    def _match(self, constraint, keep):
        if self._slot.resolved:
            return Command()
        probe = self._cursor.snapshot()
        if (value := constraint.consume(probe)) is Unset:
            return Command()
        return Command(Mode.MATCH, constraint, cursor=probe, slot=self._slot, data=(value,) if keep else ())

    def _seek(self, constraint):
        if self._found.found:
            return Command()
        probe = self._cursor.snapshot()
        if constraint.consume(probe) is Unset:
            return Command()
        if probe.remaining_empty():
            self._found.found = True
            return Command(Mode.HELP, tree=self._tree, anchored=True)
        return Command(Mode.SEEK, constraint, cursor=probe, tree=self._tree, found=self._found)

    def __repr__(self):
        return f"<{type(self).__name__} mode={self._mode.value}>"


class Command:
    """
    One declared node of the command tree, bound to its declaration site.

    States
    - dead (mode None): the head did not match; every method is a no-op.
    - Mode.MATCH: owns the advanced cursor, the parsed data and the slot.
    - Mode.HELP: owns its constraints and the HelpTree branch it describes.
      An anchored help command describes the tree it was given in place (the
      target of a seek) instead of a branch of its own.
    - Mode.SEEK: owns the focus cursor still to be walked down.
    """
    __slots__ = (
        "_mode",
        "_constraints",
        "_cursor",
        "_slot",
        "_data",
        "_tree",
        "_found",
        "_anchored",
        "_finalized",
    )

    def __init__(self, mode=None, constraint=Unset, /, *, cursor=Unset, slot=Unset, data=(), tree=Unset, found=Unset, anchored=False):
        self._mode = mode
        self._constraints = [] if constraint is Unset else [constraint]
        self._cursor = cursor
        self._slot = slot
        self._data = data
        self._tree = tree
        self._found = found
        self._anchored = anchored
        self._finalized = False

    @property
    def mode(self):
        return self._mode

    @property
    def alive(self):
        return self._mode is not None

    @property
    def data(self):
        """Values parsed so far (matching mode), Unset once an argument failed."""
        return self._data

    def description(self, text, /):
        if not isinstance(text, str):
            raise TypeError("description() argument must be a string")
        if self._mode is Mode.HELP:
            self._tree.descriptions.append(text)
        return self

    def arg(self, constraint, /):
        """
        Extend the command with one more argument constraint.

        matching: consume from the command's cursor; on failure record
        InvalidArgumentError at the depth the argument started.
        """
        constraint = constrain(constraint)
        match self._mode:
            case Mode.MATCH:
                if self._slot.resolved:
                    return self
                depth = self._cursor.depth
                if (value := constraint.consume(self._cursor)) is Unset:
                    self._slot.resolve(InvalidArgumentError(depth, self._cursor.tokens))
                    self._data = Unset
                else:
                    self._data += (value,)
            case Mode.HELP:
                if self._anchored:
                    # arguments still expected below the reached path
                    self._tree = self._tree.branch()
                    self._anchored = False
                self._constraints.append(constraint)
            case Mode.SEEK:
                if constraint.consume(self._cursor) is Unset:
                    self._mode = None
                elif self._cursor.remaining_empty():
                    self._found.found = True
                    self._mode = Mode.HELP
                    self._anchored = True
                    self._constraints = []
        return self

    def sub_commands(self, declare, /):
        """
        Descend into a nested declaration routine.

        matching: the routine matches the tokens left after this command; if
        it resolves nothing this command can still resolve through run().
        """
        if not callable(declare):
            raise TypeError("sub_commands() argument must be callable")
        match self._mode:
            case Mode.MATCH:
                if not self._slot.resolved:
                    _pick(self._cursor, self._slot, declare, require=False)
            case Mode.HELP:
                _walk(declare, Ctx(Mode.HELP, tree=self._tree))
            case Mode.SEEK:
                _walk(declare, Ctx(Mode.SEEK, cursor=self._cursor, tree=self._tree, found=self._found))
        return self

    def run(self, handler, /):
        """Run handler(*data) when this command is the match; finalizes."""
        if not callable(handler):
            raise TypeError("run() argument must be callable")

        def call():
            handler(*self._data)
            return Unset

        try:
            match self._mode:
                case Mode.MATCH:
                    self._execute(call)
                case Mode.HELP:
                    self._tree.is_standalone_command = True
        finally:
            self.finalize()

    def run_with(self, handler, /):
        """Run handler(RunCtx) when this command is the match; finalizes."""
        if not callable(handler):
            raise TypeError("run_with() argument must be callable")

        def call():
            handler(context := RunCtx(self._data))
            return context.result

        try:
            match self._mode:
                case Mode.MATCH:
                    self._execute(call)
                case Mode.HELP:
                    self._tree.is_standalone_command = True
        finally:
            self.finalize()

    def user_loop(self, declare, /):
        """
        Enter a nested interactive loop when this command is the match.

        The nested loop runs until one of its handlers quits; its value is not
        propagated, so an enclosing loop keeps going.
        """
        if not callable(declare):
            raise TypeError("user_loop() argument must be callable")

        def call():
            user_loop(declare, **self._slot.options)
            return Unset

        try:
            match self._mode:
                case Mode.MATCH:
                    self._execute(call)
                case Mode.HELP:
                    self._tree.is_standalone_command = True
                    self._tree.descriptions.append(USER_LOOP)
                    _walk(declare, Ctx(Mode.HELP, tree=self._tree))
                case Mode.SEEK:
                    _walk(declare, Ctx(Mode.SEEK, cursor=self._cursor, tree=self._tree, found=self._found))
        finally:
            self.finalize()

    def _execute(self, call):
        if self._slot.resolved:
            return
        if not self._cursor.remaining_empty():
            self._slot.resolve(ExcessArgumentsError(self._cursor.depth, self._cursor.tokens))
            return
        self._slot.resolve(Okay(call()))

    def finalize(self):
        """Scope-exit action; runs once, later calls are no-ops."""
        if self._finalized:
            return
        self._finalized = True
        match self._mode:
            case Mode.MATCH:
                if not self._slot.resolved:
                    self._slot.resolve(UnresolvedScopeError(self._cursor.depth, self._cursor.tokens))
            case Mode.HELP:
                if not self._anchored:
                    for constraint in self._constraints:
                        constraint.describe(self._tree.path_segment.append)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.finalize()
        return False

    def __repr__(self):
        mode = "dead" if self._mode is None else self._mode.value
        return f"<{type(self).__name__} {mode}>"


def _tokenize(tokens, name):
    """Normalize driver input into a tuple of tokens (a string is whitespace-split)."""
    if isinstance(tokens, str):
        return tuple(tokens.split())
    if not isinstance(tokens, Iterable):
        raise TypeError(f"{name}() argument must be a string or an iterable of strings")
    tokens = tuple(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError(f"{name}() argument must be a string or an iterable of strings")
    return tokens


def _options(**options):
    return {name: value for name, value in options.items() if value is not Unset}


def parse(tokens, declare, /, *, shell=True, console=Unset, prompt=Unset, stream=Unset):
    """
    Match tokens against the declaration routine once.

    Input starting with `help` followed by a command path is a help request
    for that command instead.

    Parameters
    - tokens: Iterable[str], or a str split on whitespace.
    - declare: declaration routine, called with a Ctx.
    - shell: render the outcome (help on stdout, errors on stderr).
    - console: rich Console used for every rendering of the attempt.
    - prompt, stream: forwarded to nested interactive loops.

    Returns
    - the FinishedState of the attempt: Okay, Help or a CommandError.
    """
    if not callable(declare):
        raise TypeError("parse() second argument must be callable")
    cursor = TokenCursor(_tokenize(tokens, "parse"))
    slot = OutcomeSlot(shell=shell, **_options(console=console, prompt=prompt, stream=stream))
    if len(cursor) > 1 and cursor.tokens[0] == HELP_TOKEN:
        _describe(cursor, slot, declare)
    else:
        _pick(cursor, slot, declare, require=True)
    if shell:
        trigger(slot.state, **_options(console=console))
    return slot.state


def args(declare, /, *, shell=True, console=Unset, prompt=Unset, stream=Unset):
    """
    Match the process arguments (sys.argv[1:]) against the declaration routine.

    An error exits the process with status 1 after being rendered; with
    shell=False it is raised instead.
    """
    state = parse(sys.argv[1:], declare, shell=shell, console=console, prompt=prompt, stream=stream)
    if isinstance(state, CommandError):
        if shell:
            sys.exit(1)
        raise state from None
    return state


def user_loop(declare, /, *, shell=True, console=Unset, prompt=Unset, stream=Unset):
    """
    Prompt for lines and match each one until a handler quits.

    Each line is whitespace-split and parsed like parse(); errors and help are
    rendered and the loop continues. A handler calling RunCtx.quit(value) ends
    the loop once that attempt completes, and user_loop returns value.

    Parameters
    - prompt: marker printed before each line ("~> ", or __main__.__prompt__).
    - stream: text stream to read lines from instead of standard input.

    Raises
    - EOFError: the input ran out before any handler quit.
    """
    if not callable(declare):
        raise TypeError("user_loop() argument must be callable")
    marker = coalesce(prompt, mainattr("__prompt__", PROMPT))
    reader = coalesce(console, output)
    while True:
        line = reader.input(marker, markup=False, stream=coalesce(stream))
        if stream is not Unset and not line:
            raise EOFError("user_loop() input stream is exhausted")
        state = parse(line, declare, shell=shell, console=console, prompt=prompt, stream=stream)
        if isinstance(state, Okay) and state.value is not Unset:
            return state.value


__all__ = (
    "Mode",
    "Ctx",
    "Command",
    "RunCtx",
    "parse",
    "args",
    "user_loop",
)
