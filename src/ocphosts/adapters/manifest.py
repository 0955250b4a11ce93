"""Load desired-state manifests from JSON files."""

from __future__ import annotations

from dataclasses import fields
from functools import cache
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from ocphosts.domain.model import SPEC_TYPE_BY_KIND, HostKind
from ocphosts.domain.provisioning import DesiredResource

if TYPE_CHECKING:
    from ocphosts.domain.model import HostSpec


class ManifestError(ValueError):
    """Raised when a manifest cannot be read or does not describe valid resources."""


@cache
def _spec_adapter(kind: HostKind) -> TypeAdapter[Any]:
    return TypeAdapter(SPEC_TYPE_BY_KIND[kind])


class ManifestEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    kind: HostKind
    config: dict[str, Any]

    @model_validator(mode="after")
    def _reject_unknown_keys(self) -> ManifestEntry:
        known = {spec_field.name for spec_field in fields(SPEC_TYPE_BY_KIND[self.kind])}
        unknown = sorted(set(self.config) - known)
        if unknown:
            raise ValueError(f"unknown {self.kind} settings: {', '.join(unknown)}")
        return self

    def to_spec(self) -> HostSpec:
        return _spec_adapter(self.kind).validate_python(self.config)


class Manifest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    resources: list[ManifestEntry] = Field(default_factory=list["ManifestEntry"])

    @model_validator(mode="after")
    def _unique_names(self) -> Manifest:
        seen: set[str] = set()
        for entry in self.resources:
            if entry.name in seen:
                raise ValueError(f"resource name {entry.name!r} is declared twice")
            seen.add(entry.name)
        return self


def parse_manifest(payload: str | bytes) -> list[DesiredResource]:
    try:
        manifest = Manifest.model_validate_json(payload)
        return [
            DesiredResource(name=entry.name, kind=entry.kind, spec=entry.to_spec())
            for entry in manifest.resources
        ]
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest: {exc}") from exc


def load_manifest(path: Path | str) -> list[DesiredResource]:
    manifest_path = Path(path).expanduser()
    try:
        payload = manifest_path.read_bytes()
    except OSError as exc:
        raise ManifestError(f"Cannot read manifest {manifest_path}: {exc}") from exc
    return parse_manifest(payload)
