"""Machine images as stored in catalogs, and their flattened form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...constants import VERSION_KEY

__all__ = [
    "MachineImage",
    "MachineImageVersion",
    "OsImage",
    "get_version",
]

type MachineImageVersion = dict[str, Any]
"""Open set of attributes for one version of a machine image.

The version identifier is stored under the ``version`` key.  All other keys
are opaque and are carried through (and overridden by provider
configuration) unchanged.
"""


def get_version(version: MachineImageVersion) -> str | None:
    """Return the version identifier of a machine image version.

    Parameters
    ----------
    version
        Attributes of the version.

    Returns
    -------
    str or None
        Version identifier, or `None` if the record does not have one or
        it is not a string.  Unquoted YAML versions such as ``1.10`` load
        as numbers and are therefore treated as missing.
    """
    value = version.get(VERSION_KEY)
    if not isinstance(value, str):
        return None
    return value


class MachineImage(BaseModel):
    """A machine image and the versions of it that are offered."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    name: Annotated[
        str,
        Field(
            title="Image name",
            description="Name of the operating system image",
            examples=["GardenLinux", "ubuntu"],
        ),
    ]

    versions: Annotated[
        list[MachineImageVersion],
        Field(
            title="Image versions",
            description=(
                "Versions of the image, each a mapping of attributes that"
                " must include the version identifier under ``version``"
            ),
            default_factory=list,
        ),
    ]


@dataclass(eq=False, slots=True)
class OsImage:
    """A single (name, version) pair taken from a catalog.

    Equality compares both fields structurally and by exact type, so two
    records are equal only if every attribute of the version matches.
    Unlike plain Python equality, ``True``, ``1`` and ``1.0`` are distinct
    attribute values.
    """

    name: str
    """Name of the image."""

    version: MachineImageVersion
    """Attributes of this version."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OsImage):
            return NotImplemented
        return self.name == other.name and _exactly_equal(
            self.version, other.version
        )


def _exactly_equal(a: Any, b: Any) -> bool:
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(
            _exactly_equal(a[k], b[k]) for k in a
        )
    if isinstance(a, list | tuple):
        return len(a) == len(b) and all(
            _exactly_equal(x, y) for x, y in zip(a, b, strict=True)
        )
    return a == b
