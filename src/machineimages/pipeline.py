"""Computation of the machine images offered in a landscape.

Images from the landscape and LSS catalogs are flattened into individual
(name, version) pairs, deduplicated, filtered, regrouped by name, and sorted.
Each surviving version is then merged with its provider configuration, and
versions without any provider configuration are dropped.
"""

from __future__ import annotations

from structlog.stdlib import BoundLogger, get_logger

from .constants import DISTINGUISHED_OS_NAME, ROOT_LOGGER
from .exceptions import ConflictingFiltersError
from .models.domain.filterkind import OsImagesFilterKind
from .models.domain.machineimage import (
    MachineImage,
    MachineImageVersion,
    OsImage,
    get_version,
)

__all__ = [
    "compute_machine_images",
    "enrich_machine_images",
    "filter_os_images",
    "flatten_images",
    "group_os_images",
    "lookup_version_config",
    "remove_duplicates",
    "sort_machine_images",
    "validate_filters",
]


def compute_machine_images(
    lss_images: list[MachineImage],
    landscape_images: list[MachineImage],
    provider_images: list[MachineImage],
    provider_landscape_images: list[MachineImage],
    disabled_names: list[str],
    include_filters: list[OsImagesFilterKind],
    exclude_filters: list[OsImagesFilterKind],
    *,
    logger: BoundLogger | None = None,
) -> list[MachineImage]:
    """Compute the machine images to offer.

    Parameters
    ----------
    lss_images
        Images from the secondary (LSS) catalog.
    landscape_images
        Images from the landscape catalog.  These come before LSS images
        when duplicates are removed.
    provider_images
        Global provider configuration for image versions.
    provider_landscape_images
        Landscape provider configuration for image versions, which takes
        precedence over ``provider_images``.
    disabled_names
        Names of images that must not appear in the result.
    include_filters
        Kinds of versions to keep.  If empty, all versions are kept.
    exclude_filters
        Kinds of versions to drop.
    logger
        Logger to use.  If not given, the package logger is used.

    Returns
    -------
    list of MachineImage
        Images sorted by name with GardenLinux first, each carrying only
        versions that have provider configuration.

    Raises
    ------
    ConflictingFiltersError
        Raised if a filter kind is in both the include and exclude lists.
    """
    if logger is None:
        logger = get_logger(ROOT_LOGGER)
    logger.info("Computing machine images")

    if not include_filters:
        include_filters = [OsImagesFilterKind.ALL]
    validate_filters(include_filters, exclude_filters)

    flat = flatten_images(landscape_images) + flatten_images(lss_images)
    logger.debug(f"Flattened {len(flat)} image versions")
    flat = remove_duplicates(flat)
    logger.debug(f"{len(flat)} image versions left after deduplication")

    flat = filter_os_images(flat, include_filters, exclude_filters)
    if not flat:
        logger.debug("No image versions left after filtering")
        return []
    logger.debug(f"{len(flat)} image versions left after filtering")

    images = sort_machine_images(group_os_images(flat))
    return enrich_machine_images(
        images,
        disabled_names,
        provider_landscape_images,
        provider_images,
        logger=logger,
    )


def validate_filters(
    include_filters: list[OsImagesFilterKind],
    exclude_filters: list[OsImagesFilterKind],
) -> None:
    """Check that no filter kind is both included and excluded.

    Raises
    ------
    ConflictingFiltersError
        Raised if the two lists share at least one kind.
    """
    excluded = set(exclude_filters)
    conflicts = [x for x in dict.fromkeys(include_filters) if x in excluded]
    if conflicts:
        raise ConflictingFiltersError(conflicts)


def flatten_images(images: list[MachineImage]) -> list[OsImage]:
    """Turn images into one record per (name, version) pair."""
    return [
        OsImage(name=image.name, version=version)
        for image in images
        for version in image.versions
    ]


def remove_duplicates(images: list[OsImage]) -> list[OsImage]:
    """Drop structurally identical records, keeping the first of each.

    Records are compared with `OsImage` equality, which also requires
    attribute values to have the same type.

    Version records are arbitrary and possibly unhashable mappings, so this
    is a quadratic equality scan.  Catalogs only hold tens of entries.
    """
    result: list[OsImage] = []
    for image in images:
        if image not in result:
            result.append(image)
    return result


def filter_os_images(
    images: list[OsImage],
    include_filters: list[OsImagesFilterKind],
    exclude_filters: list[OsImagesFilterKind],
) -> list[OsImage]:
    """Apply include and exclude filters.

    If ``ALL`` is one of the include filters, nothing is dropped by
    inclusion.  Otherwise a record must match at least one include filter.
    A record matching any exclude filter is always dropped.

    Raises
    ------
    ConflictingFiltersError
        Raised if the two lists share at least one kind.
    """
    validate_filters(include_filters, exclude_filters)
    include_all = OsImagesFilterKind.ALL in include_filters
    return [
        image
        for image in images
        if (include_all or any(f.matches(image) for f in include_filters))
        and not any(f.matches(image) for f in exclude_filters)
    ]


def group_os_images(images: list[OsImage]) -> list[MachineImage]:
    """Group flattened records back into one image per name."""
    grouped: dict[str, list[MachineImageVersion]] = {}
    for image in images:
        grouped.setdefault(image.name, []).append(image.version)
    return [
        MachineImage(name=name, versions=versions)
        for name, versions in grouped.items()
    ]


def sort_machine_images(images: list[MachineImage]) -> list[MachineImage]:
    """Sort images by name, with the GardenLinux image always first."""
    return sorted(
        images, key=lambda i: (i.name != DISTINGUISHED_OS_NAME, i.name)
    )


def enrich_machine_images(
    images: list[MachineImage],
    disabled_names: list[str],
    provider_landscape_images: list[MachineImage],
    provider_images: list[MachineImage],
    *,
    logger: BoundLogger | None = None,
) -> list[MachineImage]:
    """Merge provider configuration into each image version.

    Disabled images are dropped.  Each version of the remaining images is
    merged with its provider configuration, and versions with no provider
    configuration (or no version identifier) are dropped.  Images left
    without versions are dropped as well.  The input images are not
    modified.
    """
    if logger is None:
        logger = get_logger(ROOT_LOGGER)
    result: list[MachineImage] = []
    for image in images:
        if image.name in disabled_names:
            logger.debug(f"Skipping disabled image {image.name}")
            continue

        versions: list[MachineImageVersion] = []
        for version in image.versions:
            number = get_version(version)
            if number is None:
                logger.debug(
                    f"Dropping version of {image.name} without identifier"
                )
                continue
            config = lookup_version_config(
                image.name, number, provider_landscape_images, provider_images
            )
            if config is None:
                logger.debug(
                    f"Dropping {image.name} {number}: no provider config"
                )
                continue
            versions.append({**version, **config})

        if versions:
            result.append(MachineImage(name=image.name, versions=versions))
    return result


def lookup_version_config(
    name: str,
    version: str,
    provider_landscape_images: list[MachineImage],
    provider_images: list[MachineImage],
) -> MachineImageVersion | None:
    """Find the provider configuration for one image version.

    The landscape provider catalog is searched first, then the global one.

    Returns
    -------
    dict or None
        The first matching provider record, or `None` if neither catalog has
        one.
    """
    for catalog in (provider_landscape_images, provider_images):
        config = _find_version(name, version, catalog)
        if config is not None:
            return config
    return None


def _find_version(
    name: str, version: str, images: list[MachineImage]
) -> MachineImageVersion | None:
    for image in images:
        if image.name != name:
            continue
        for candidate in image.versions:
            if get_version(candidate) == version:
                return candidate
    return None
