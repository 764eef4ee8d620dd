__title__ = 'kiln'
__author__ = 'Kiln Developers'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from . import types
from .base import *
from .context import *
from .faults import *
from .recipes import *

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
    "version_info",
    "types",
)

# Load the exposed API of the scopes
__all__ += base.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the recipes
__all__ += recipes.__all__  # type: ignore[attr-defined]
