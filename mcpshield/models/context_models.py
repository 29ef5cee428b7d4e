"""
Scan Context Models — Read-only inputs shared by every scan module.

Built once by the worker from collaborator output, then handed to each
module as an immutable snapshot.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SourceFile(BaseModel):
    """A discovered source file. Identity is the absolute path."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute path")
    relative: str = Field(..., description="Path relative to the scan root")
    name: str

    def __hash__(self) -> int:
        return hash(self.path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path == other.path


class ToolDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    description: str | None = None


class Manifest(BaseModel):
    """The server's self-declared metadata.

    ``capabilities`` and ``tools`` are None when the field is absent,
    which the metadata audit distinguishes from an empty declaration.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Manifest path relative to the scan root")
    name: str | None = None
    version: str | None = None
    capabilities: frozenset[str] | None = None
    tools: tuple[ToolDeclaration, ...] | None = None

    @property
    def declared_capabilities(self) -> frozenset[str]:
        return self.capabilities or frozenset()

    @classmethod
    def from_data(cls, path: str, data: dict[str, Any]) -> Manifest:
        """Build a manifest from parsed JSON.

        Capabilities may be a list of identifiers or a mapping whose keys
        are identifiers.
        """
        raw_caps = data.get("capabilities")
        capabilities: frozenset[str] | None = None
        if isinstance(raw_caps, list):
            capabilities = frozenset(str(c) for c in raw_caps)
        elif isinstance(raw_caps, dict):
            capabilities = frozenset(str(c) for c in raw_caps.keys())
        elif raw_caps:
            capabilities = frozenset()

        raw_tools = data.get("tools")
        tools: tuple[ToolDeclaration, ...] | None = None
        if isinstance(raw_tools, list):
            tools = tuple(
                ToolDeclaration(
                    name=_as_text(t.get("name")),
                    description=_as_text(t.get("description")),
                )
                if isinstance(t, dict)
                else ToolDeclaration()
                for t in raw_tools
            )
        elif raw_tools:
            tools = ()

        return cls(
            path=path,
            name=_as_text(data.get("name")),
            version=_as_text(data.get("version")),
            capabilities=capabilities,
            tools=tools,
        )


class PackageMetadata(BaseModel):
    """Hygiene-relevant fields of package.json."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    version: str | None = None
    has_author: bool = False
    has_license: bool = False
    scripts: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> PackageMetadata:
        raw_scripts = data.get("scripts")
        scripts: dict[str, str] = {}
        if isinstance(raw_scripts, dict):
            scripts = {
                str(k): v for k, v in raw_scripts.items() if isinstance(v, str)
            }
        return cls(
            name=_as_text(data.get("name")),
            version=_as_text(data.get("version")),
            has_author=bool(data.get("author") or data.get("contributors")),
            has_license=bool(data.get("license")),
            scripts=scripts,
        )


class ScanContext(BaseModel):
    """Immutable snapshot every module reads from."""

    model_config = ConfigDict(frozen=True)

    target_path: str
    files: tuple[SourceFile, ...] = ()
    manifest: Manifest | None = None
    package: PackageMetadata | None = None


def _as_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
