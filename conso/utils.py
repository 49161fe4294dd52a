"""
Conso utilities shared by the cursor, the constraints and the command layer.

- Unset: the "nothing was produced" marker. An exhausted cursor returns it,
  a constraint that failed to consume returns it, and a run_with handler that
  never called quit() leaves its result at Unset. None is never used for
  this, because None is a perfectly good parsed value (see Maybe).
- coalesce(value, default): turn Unset into a concrete default.
- mainattr(name, default): read a host hook from the __main__ module.

Only the names in __all__ are meant to be imported from here.
"""
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance per process; calling UnsetType() again
    returns it, and copying or pickling it preserves identity. The marker is
    false in a boolean context, yet callers compare with `is Unset` so that
    None, 0 and "" keep their own meaning.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """
    Replace Unset by default; any other value (None included) is returned.

        coalesce(">> ", "~> ")    -> ">> "
        coalesce(Unset, "~> ")    -> "~> "
    """
    return default if object is Unset else object


def mainattr(name, default=None, /):
    """
    Look up a host-level hook on the __main__ module.

    The host application customizes conso by defining dunder attributes in its
    entry script, for example:

        __prompt__ = "game> "
        __indent__ = "  "
        __codes__ = {FaultCode.INVALID_ARGUMENT: "E-ARG"}

    Returns default when __main__ does not define the hook.
    """
    if not isinstance(name, str):
        raise TypeError("mainattr() argument must be a string")
    return getattr(__import__("__main__"), name, default)


Unset = UnsetType()
"""The single "nothing was produced" marker."""


__all__ = (
    "coalesce",
    "mainattr",
    "UnsetType",
    "Unset",
)
