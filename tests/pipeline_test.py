"""Tests for the individual stages of the machine image pipeline."""

from __future__ import annotations

import pytest

from machineimages.exceptions import ConflictingFiltersError
from machineimages.models.domain.filterkind import OsImagesFilterKind
from machineimages.models.domain.machineimage import OsImage
from machineimages.pipeline import (
    enrich_machine_images,
    filter_os_images,
    flatten_images,
    group_os_images,
    lookup_version_config,
    remove_duplicates,
    sort_machine_images,
    validate_filters,
)

from .support.data import make_image


def test_validate_filters() -> None:
    validate_filters([OsImagesFilterKind.ALL], [])
    validate_filters(
        [OsImagesFilterKind.SUPPORTED], [OsImagesFilterKind.DEPRECATED]
    )

    with pytest.raises(ConflictingFiltersError) as excinfo:
        validate_filters(
            [
                OsImagesFilterKind.PREVIEW,
                OsImagesFilterKind.SUPPORTED,
                OsImagesFilterKind.PREVIEW,
            ],
            [OsImagesFilterKind.DEPRECATED, OsImagesFilterKind.PREVIEW],
        )
    assert excinfo.value.conflicts == [OsImagesFilterKind.PREVIEW]
    assert "preview" in str(excinfo.value)


def test_flatten_images() -> None:
    images = [
        make_image("Ubuntu", {"version": "1"}, {"version": "2"}),
        make_image("Empty"),
        make_image("SuSE", {"version": "3"}),
    ]
    assert flatten_images(images) == [
        OsImage(name="Ubuntu", version={"version": "1"}),
        OsImage(name="Ubuntu", version={"version": "2"}),
        OsImage(name="SuSE", version={"version": "3"}),
    ]
    assert flatten_images([]) == []


def test_remove_duplicates() -> None:
    images = [
        OsImage(name="Ubuntu", version={"version": "1", "arch": "amd64"}),
        OsImage(name="SuSE", version={"version": "1"}),
        OsImage(name="Ubuntu", version={"arch": "amd64", "version": "1"}),
        OsImage(name="Ubuntu", version={"version": "1", "arch": "arm64"}),
        OsImage(name="SuSE", version={"version": "1"}),
        OsImage(name="Ubuntu", version={"version": "1", "tags": ["a"]}),
        OsImage(name="Ubuntu", version={"version": "1", "tags": ["a"]}),
    ]
    deduped = remove_duplicates(images)
    assert deduped == [
        OsImage(name="Ubuntu", version={"version": "1", "arch": "amd64"}),
        OsImage(name="SuSE", version={"version": "1"}),
        OsImage(name="Ubuntu", version={"version": "1", "arch": "arm64"}),
        OsImage(name="Ubuntu", version={"version": "1", "tags": ["a"]}),
    ]
    assert remove_duplicates(deduped) == deduped


def test_filter_os_images() -> None:
    images = [
        OsImage(name="a", version={"version": "1", "classification": "x"}),
        OsImage(
            name="a", version={"version": "2", "classification": "supported"}
        ),
        OsImage(
            name="a", version={"version": "3", "classification": "preview"}
        ),
        OsImage(
            name="a",
            version={"version": "4", "classification": "deprecated"},
        ),
        OsImage(name="a", version={"version": "5"}),
    ]

    def versions(result: list[OsImage]) -> list[str]:
        return [x.version["version"] for x in result]

    all_kind = OsImagesFilterKind.ALL
    supported = OsImagesFilterKind.SUPPORTED
    preview = OsImagesFilterKind.PREVIEW
    deprecated = OsImagesFilterKind.DEPRECATED

    assert filter_os_images(images, [all_kind], []) == images
    assert versions(filter_os_images(images, [supported], [])) == ["2"]
    assert versions(
        filter_os_images(images, [supported, preview], [])
    ) == ["2", "3"]
    assert versions(
        filter_os_images(images, [all_kind], [deprecated, preview])
    ) == ["1", "2", "5"]
    assert versions(
        filter_os_images(images, [all_kind, supported], [deprecated])
    ) == ["1", "2", "3", "5"]
    assert filter_os_images(images, [supported], [all_kind]) == []

    with pytest.raises(ConflictingFiltersError):
        filter_os_images(images, [supported], [supported])


def test_group_os_images() -> None:
    images = [
        OsImage(name="Ubuntu", version={"version": "2"}),
        OsImage(name="SuSE", version={"version": "1"}),
        OsImage(name="Ubuntu", version={"version": "1"}),
    ]
    grouped = group_os_images(images)
    assert {x.name: x.versions for x in grouped} == {
        "Ubuntu": [{"version": "2"}, {"version": "1"}],
        "SuSE": [{"version": "1"}],
    }


def test_sort_machine_images() -> None:
    images = [
        make_image("ubuntu"),
        make_image("SuSE"),
        make_image("GardenLinux"),
        make_image("Flatcar"),
        make_image("gardenlinux"),
    ]
    names = [x.name for x in sort_machine_images(images)]
    assert names == [
        "GardenLinux",
        "Flatcar",
        "SuSE",
        "gardenlinux",
        "ubuntu",
    ]

    names = [x.name for x in sort_machine_images(images[:2])]
    assert names == ["SuSE", "ubuntu"]


def test_lookup_version_config() -> None:
    landscape = [
        make_image("Ubuntu", {"image": "no-version"}),
        make_image("Ubuntu", {"version": "1", "image": "landscape"}),
    ]
    provider = [
        make_image("Ubuntu", {"version": "1", "image": "global"}),
        make_image("Ubuntu", {"version": "2", "image": "global-2"}),
        make_image("SuSE", {"version": "3", "image": "suse"}),
    ]

    config = lookup_version_config("Ubuntu", "1", landscape, provider)
    assert config == {"version": "1", "image": "landscape"}
    config = lookup_version_config("Ubuntu", "2", landscape, provider)
    assert config == {"version": "2", "image": "global-2"}
    assert lookup_version_config("SuSE", "1", landscape, provider) is None
    assert lookup_version_config("Flatcar", "3", landscape, provider) is None


def test_enrich_machine_images() -> None:
    images = [
        make_image("GardenLinux", {"version": "1"}, {"other": "x"}),
        make_image("SuSE", {"version": "1"}),
        make_image("Ubuntu", {"version": "1", "cri": "containerd"}),
    ]
    provider = [
        make_image("GardenLinux", {"version": "1", "arch": "amd64"}),
        make_image("SuSE", {"version": "1", "arch": "amd64"}),
        make_image("Ubuntu", {"version": "1", "cri": "docker"}),
    ]
    enriched = enrich_machine_images(images, ["SuSE"], [], provider)

    assert [x.model_dump() for x in enriched] == [
        {
            "name": "GardenLinux",
            "versions": [{"version": "1", "arch": "amd64"}],
        },
        {
            "name": "Ubuntu",
            "versions": [{"version": "1", "cri": "docker"}],
        },
    ]

    # The input images are left untouched.
    assert images[0].versions == [{"version": "1"}, {"other": "x"}]
    assert images[2].versions == [{"version": "1", "cri": "containerd"}]


def test_enrich_drops_empty_images() -> None:
    images = [make_image("Ubuntu", {"version": "1"}, {"version": "2"})]
    provider = [make_image("Ubuntu", {"version": "3"})]
    assert enrich_machine_images(images, [], [], provider) == []
    assert enrich_machine_images(images, [], [], []) == []


def test_remove_duplicates_exact_types() -> None:
    images = [
        OsImage(name="Ubuntu", version={"version": "1", "gpu": True}),
        OsImage(name="Ubuntu", version={"version": "1", "gpu": 1}),
        OsImage(name="Ubuntu", version={"version": "1", "gpu": 1.0}),
        OsImage(name="Ubuntu", version={"version": "1", "gpu": 1}),
    ]
    deduped = remove_duplicates(images)
    assert [type(x.version["gpu"]) for x in deduped] == [bool, int, float]


def test_enrich_requires_string_versions() -> None:
    images = [make_image("Ubuntu", {"version": 1.1}, {"version": "1.10"})]
    provider = [
        make_image("Ubuntu", {"version": "1.1", "image": "old"}),
        make_image("Ubuntu", {"version": "1.10", "image": "new"}),
    ]
    enriched = enrich_machine_images(images, [], [], provider)
    assert [x.model_dump() for x in enriched] == [
        {"name": "Ubuntu", "versions": [{"version": "1.10", "image": "new"}]}
    ]
