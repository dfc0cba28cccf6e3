from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Account:
    bytes_used: int
    containers: int
    objects: int


@dataclass(slots=True)
class Container:
    name: str
    count: int
    bytes: int


@dataclass(slots=True)
class Object:
    """An object, or a pseudo directory when listing with a delimiter.

    Pseudo directories are not real objects: ``pseudo_directory`` is set,
    ``content_type`` is ``application/directory`` and ``name`` is the
    directory prefix.
    """

    name: str
    content_type: str = ""
    bytes: int = 0
    server_last_modified: str = ""
    last_modified: datetime | None = None
    hash: str = ""
    pseudo_directory: bool = False
    subdir: str = ""


@dataclass(slots=True)
class ContainersOpts:
    """Options for listing containers. Empty values are not sent."""

    limit: int = 0
    marker: str = ""
    end_marker: str = ""
    headers: dict[str, str] | None = None

    def params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.limit > 0:
            params.append(("limit", str(self.limit)))
        if self.marker:
            params.append(("marker", self.marker))
        if self.end_marker:
            params.append(("end_marker", self.end_marker))
        return params


@dataclass(slots=True)
class ObjectsOpts(ContainersOpts):
    """Options for listing objects.

    ``prefix`` limits results to names starting with it, ``path`` returns the
    names nested in that pseudo path and ``delimiter`` groups names into
    pseudo directories.
    """

    prefix: str = ""
    path: str = ""
    delimiter: str = ""

    def params(self) -> list[tuple[str, str]]:
        params = ContainersOpts.params(self)
        if self.prefix:
            params.append(("prefix", self.prefix))
        if self.path:
            params.append(("path", self.path))
        if self.delimiter:
            params.append(("delimiter", self.delimiter))
        return params


__all__ = [
    "Account",
    "Container",
    "ContainersOpts",
    "Object",
    "ObjectsOpts",
]
