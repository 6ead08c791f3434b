__title__ = 'adept'
__author__ = 'Kyle Manke'
__license__ = 'MIT'
__version__ = "0.1.0"

from .options import *
from .formatting import *
from .fetching import *
from .index import *
from .commands import *
from .faults import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of every submodule
__all__ += options.__all__  # type: ignore[attr-defined]
__all__ += formatting.__all__  # type: ignore[attr-defined]
__all__ += fetching.__all__  # type: ignore[attr-defined]
__all__ += index.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
