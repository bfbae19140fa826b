__title__ = 'argpath'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .faults import *
from .tokens import *
from .scalars import *
from .registry import *
from .decoders import *
from .resolver import *
from .driver import *
from .logs import *

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

# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the argument tokens
__all__ += tokens.__all__  # type: ignore[attr-defined]
# Load the exposed API of the scalar codec
__all__ += scalars.__all__  # type: ignore[attr-defined]
# Load the exposed API of the decoder registry
__all__ += registry.__all__  # type: ignore[attr-defined]
# Load the exposed API of the built-in decoders
__all__ += decoders.__all__  # type: ignore[attr-defined]
# Load the exposed API of the path resolver
__all__ += resolver.__all__  # type: ignore[attr-defined]
# Load the exposed API of the driver
__all__ += driver.__all__  # type: ignore[attr-defined]
# Load the exposed API of the logging setup
__all__ += logs.__all__  # type: ignore[attr-defined]
