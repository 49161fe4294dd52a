__title__ = 'conso'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .commands import *
from .constraints import *
from .cursor import *
from .faults import *
from .helptree import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the commands (Ctx, Command, drivers)
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the constraints
__all__ += constraints.__all__  # type: ignore[attr-defined]
# Load the exposed API of the cursor
__all__ += cursor.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults (outcomes and errors)
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the help tree
__all__ += helptree.__all__  # type: ignore[attr-defined]
