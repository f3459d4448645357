"""Core API types, selectors and constants for instances, bundles and artifacts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

GROUP = "timoni.sh"
VERSION = "v1alpha1"
API_VERSION = f"{GROUP}/{VERSION}"

INSTANCE_KIND = "Instance"
INSTANCE_STORAGE_TYPE = "timoni.sh/instance"
FIELD_MANAGER = "timoni"

ENABLED_VALUE = "enabled"
DISABLED_VALUE = "disabled"

# Annotation deciding whether a resource is garbage collected.
PRUNE_ACTION = f"action.{GROUP}/prune"
# Annotation deciding whether a resource is recreated on immutable changes.
FORCE_ACTION = f"action.{GROUP}/force"
# Annotation deciding whether a resource is applied only when absent.
IF_NOT_PRESENT_ACTION = f"action.{GROUP}/one-off"

ARTIFACT_PREFIX = "oci://"
USER_AGENT = "timoni/v1"
CONFIG_MEDIA_TYPE = "application/vnd.timoni.config.v1+json"
CONTENT_MEDIA_TYPE = "application/vnd.timoni.content.v1.tar+gzip"
CONTENT_TYPE_ANNOTATION = "sh.timoni.content.type"
ANY_CONTENT_TYPE = ""
TIMONI_MOD_CONTENT_TYPE = "module"
TIMONI_MOD_VENDOR_CONTENT_TYPE = "module/vendor"
CUE_MOD_GEN_CONTENT_TYPE = "cue.mod/gen"
CUE_MOD_PKG_CONTENT_TYPE = "cue.mod/pkg"
SOURCE_ANNOTATION = "org.opencontainers.image.source"
REVISION_ANNOTATION = "org.opencontainers.image.revision"
VERSION_ANNOTATION = "org.opencontainers.image.version"
CREATED_ANNOTATION = "org.opencontainers.image.created"

BUNDLE_NAME_LABEL_KEY = "bundle.timoni.sh/name"

LATEST_VERSION = "latest"

IGNORE_FILE = "timoni.ignore"
DEFAULT_IGNORE_PATTERNS = """# VCS
.git/
.gitignore
.gitmodules
.gitattributes

# Go
vendor/
go.mod
go.sum

# CUE
*_tool.cue
debug_values.cue
"""

BUNDLE_SCHEMA = """
import "strings"

#Bundle: {
	apiVersion: string & =~"^v1alpha1$"
	name:       string & =~"^(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?$" & strings.MaxRunes(63) & strings.MinRunes(1)
	instances: [string & =~"^(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?$" & strings.MaxRunes(63) & strings.MinRunes(1)]: {
		module: close({
			url:     string & =~"^oci://.*$"
			version: *"latest" | string
			digest?: string
		})
		namespace: string & =~"^(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?$" & strings.MaxRunes(63) & strings.MinRunes(1)
		values: {...}
	}
}

bundle: #Bundle
"""

INSTANCE_SCHEMA = """
#Timoni: {
	apiVersion: string & =~"^v1alpha1$"
	instance: {...}
	apply: [string]: [...]
	kubeMinorVersion?: int
}

timoni: #Timoni
"""


class Selector(str, Enum):
    """CUE paths known to the engine."""

    BUNDLE_API_VERSION = "bundle.apiVersion"
    BUNDLE_NAME = "bundle.name"
    BUNDLE_INSTANCES = "bundle.instances"
    BUNDLE_MODULE_URL = "module.url"
    BUNDLE_MODULE_VERSION = "module.version"
    BUNDLE_MODULE_DIGEST = "module.digest"
    BUNDLE_NAMESPACE = "namespace"
    BUNDLE_VALUES = "values"
    API_VERSION = "timoni.apiVersion"
    INSTANCE = "timoni.instance"
    CONFIG_VALUES = "timoni.instance.config"
    APPLY = "timoni.apply"
    VALUES = "values"

    def __str__(self) -> str:
        return self.value

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)


@dataclass
class ArtifactReference:
    """Location of an artifact in a container registry."""

    repository: str = ""
    tag: str = ""
    digest: str = ""


@dataclass
class ResourceRef:
    """Reference to a Kubernetes object: id is '<namespace>_<name>_<group>_<kind>'."""

    id: str = ""
    version: str = ""


@dataclass
class ResourceInventory:
    """Kubernetes object references managed by an instance."""

    entries: list[ResourceRef] = field(default_factory=list)


@dataclass
class ModuleReference:
    """Location of a module's artifact in a registry."""

    name: str = ""
    repository: str = ""
    version: str = ""
    digest: str = ""


@dataclass
class ImageReference:
    """Location of a container image in a registry."""

    repository: str = ""
    tag: str = ""
    digest: str = ""
    reference: str = ""


def _module_to_dict(module: ModuleReference) -> dict[str, str]:
    return {
        "name": module.name,
        "repository": module.repository,
        "version": module.version,
        "digest": module.digest,
    }


def _module_from_dict(data: Mapping[str, Any]) -> ModuleReference:
    return ModuleReference(
        name=str(data.get("name", "")),
        repository=str(data.get("repository", "")),
        version=str(data.get("version", "")),
        digest=str(data.get("digest", "")),
    )


def _inventory_to_dict(inventory: ResourceInventory) -> dict[str, Any]:
    return {"entries": [{"id": e.id, "v": e.version} for e in inventory.entries]}


def _inventory_from_dict(data: Mapping[str, Any]) -> ResourceInventory:
    entries = data.get("entries") or []
    return ResourceInventory(
        entries=[
            ResourceRef(id=str(e.get("id", "")), version=str(e.get("v", "")))
            for e in entries
        ]
    )


@dataclass
class Instance:
    """An installed module: its reference, values, inventory and images."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    api_version: str = ""
    kind: str = ""
    module: ModuleReference = field(default_factory=ModuleReference)
    values: str = ""
    last_transition_time: str = ""
    inventory: ResourceInventory | None = None
    images: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form, leaving out empty optional fields."""
        result: dict[str, Any] = {}
        if self.api_version:
            result["apiVersion"] = self.api_version
        if self.kind:
            result["kind"] = self.kind

        metadata: dict[str, Any] = {}
        if self.name:
            metadata["name"] = self.name
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if self.annotations:
            metadata["annotations"] = dict(self.annotations)
        result["metadata"] = metadata

        result["module"] = _module_to_dict(self.module)
        result["values"] = self.values
        if self.last_transition_time:
            result["lastTransitionTime"] = self.last_transition_time
        if self.inventory is not None:
            result["inventory"] = _inventory_to_dict(self.inventory)
        if self.images:
            result["images"] = list(self.images)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Instance:
        """Build an instance from its JSON-decoded form."""
        if not isinstance(data, Mapping):
            raise TypeError(f"instance data must be a mapping, not {type(data).__name__}")
        metadata = data.get("metadata") or {}
        inventory = data.get("inventory")
        return cls(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace", "")),
            labels=dict(metadata.get("labels") or {}),
            annotations=dict(metadata.get("annotations") or {}),
            api_version=str(data.get("apiVersion", "")),
            kind=str(data.get("kind", "")),
            module=_module_from_dict(data.get("module") or {}),
            values=str(data.get("values", "")),
            last_transition_time=str(data.get("lastTransitionTime", "")),
            inventory=_inventory_from_dict(inventory) if inventory is not None else None,
            images=list(data.get("images") or []),
        )