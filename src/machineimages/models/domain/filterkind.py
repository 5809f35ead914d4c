"""Kinds of filters applied to flattened machine images.

This needs to be its own module so that both the catalog document model and
the pipeline can use it without importing each other.
"""

from enum import StrEnum

from ...constants import CLASSIFICATION_KEY
from .machineimage import OsImage

__all__ = ["OsImagesFilterKind"]


class OsImagesFilterKind(StrEnum):
    """Category of machine image versions selected by a filter.

    Apart from ``ALL``, each kind corresponds to a value of the
    ``classification`` attribute of a machine image version.
    """

    ALL = "all"
    SUPPORTED = "supported"
    PREVIEW = "preview"
    DEPRECATED = "deprecated"

    def matches(self, image: OsImage) -> bool:
        """Whether a flattened image belongs to this category.

        Versions without a classification are only matched by ``ALL``.
        """
        if self is OsImagesFilterKind.ALL:
            return True
        classification = image.version.get(CLASSIFICATION_KEY)
        if classification is None:
            return False
        return str(classification).lower() == self.value
