"""Computation of supported machine images for a landscape."""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import ConflictingFiltersError
from .models.domain.filterkind import OsImagesFilterKind
from .models.domain.machineimage import MachineImage
from .pipeline import compute_machine_images

__all__ = [
    "ConflictingFiltersError",
    "MachineImage",
    "OsImagesFilterKind",
    "__version__",
    "compute_machine_images",
]


__version__: str
"""The application version string (PEP 440 / SemVer compatible)."""

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0"
