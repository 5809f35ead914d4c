"""Input document for a machine image computation.

This is what the command-line interface reads.  Library callers normally
pass the catalogs to `~machineimages.pipeline.compute_machine_images`
directly.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain.filterkind import OsImagesFilterKind
from ..domain.machineimage import MachineImage

__all__ = ["MachineImagesRequest"]


class MachineImagesRequest(BaseModel):
    """All catalogs and settings needed to compute machine images."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    lss_images: Annotated[
        list[MachineImage],
        Field(
            title="LSS images",
            description="Machine images from the secondary (LSS) catalog",
            default_factory=list,
        ),
    ]

    landscape_images: Annotated[
        list[MachineImage],
        Field(
            title="Landscape images",
            description="Machine images from the landscape catalog",
            default_factory=list,
        ),
    ]

    provider_images: Annotated[
        list[MachineImage],
        Field(
            title="Provider images",
            description=(
                "Global provider configuration for image versions. Consulted"
                " only if the landscape provider catalog has no match."
            ),
            default_factory=list,
        ),
    ]

    provider_landscape_images: Annotated[
        list[MachineImage],
        Field(
            title="Landscape provider images",
            description=(
                "Landscape-specific provider configuration for image"
                " versions. Takes precedence over the global provider"
                " catalog."
            ),
            default_factory=list,
        ),
    ]

    disabled_machine_images: Annotated[
        list[str],
        Field(
            title="Disabled images",
            description="Names of images to leave out of the result",
            default_factory=list,
        ),
    ]

    include_filters: Annotated[
        list[OsImagesFilterKind],
        Field(
            title="Include filters",
            description=(
                "Only versions matching one of these kinds are kept. An"
                " empty list selects everything."
            ),
            default_factory=list,
        ),
    ]

    exclude_filters: Annotated[
        list[OsImagesFilterKind],
        Field(
            title="Exclude filters",
            description="Versions matching any of these kinds are dropped",
            default_factory=list,
        ),
    ]
