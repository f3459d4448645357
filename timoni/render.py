"""Printing built Kubernetes objects as YAML streams or JSON lists."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import yaml

Object = Mapping[str, Any]


class OutputFormatError(ValueError):
    """Raised when an unsupported output format is requested."""


# Kinds applied first, in this order; others follow.
_KIND_ORDER = (
    "CustomResourceDefinition",
    "Namespace",
    "ClusterClass",
    "RuntimeClass",
    "PriorityClass",
    "StorageClass",
    "VolumeSnapshotClass",
    "IngressClass",
    "GatewayClass",
    "ResourceQuota",
    "ServiceAccount",
    "Role",
    "ClusterRole",
    "RoleBinding",
    "ClusterRoleBinding",
    "ConfigMap",
    "Secret",
    "Service",
    "LimitRange",
    "Deployment",
    "StatefulSet",
    "CronJob",
    "PodDisruptionBudget",
    "MutatingWebhookConfiguration",
    "ValidatingWebhookConfiguration",
)
_KIND_RANK = {kind: rank for rank, kind in enumerate(_KIND_ORDER)}


def _sort_key(obj: Object) -> tuple[int, str, str]:
    metadata = obj.get("metadata") or {}
    return (
        _KIND_RANK.get(obj.get("kind", ""), len(_KIND_ORDER)),
        metadata.get("namespace", "") or "",
        metadata.get("name", "") or "",
    )


def sort_objects(objects: Iterable[Object]) -> list[Object]:
    """Return the objects in apply order: by kind rank, then namespace, then name."""
    return sorted(objects, key=_sort_key)


def _dump_yaml(obj: Object) -> str:
    return yaml.safe_dump(
        _plain(obj), sort_keys=True, default_flow_style=False, allow_unicode=True
    )


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def render_yaml(objects: Iterable[Object]) -> str:
    """Return a YAML stream with each object followed by a '---' separator."""
    return "".join(_dump_yaml(obj) + "---\n" for obj in objects)


def _escape_html(text: str) -> str:
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def render_json_list(objects: Iterable[Object]) -> str:
    """Return the objects wrapped in an indented JSON 'List'."""
    items = [_plain(obj) for obj in objects]
    document: dict[str, Any] = {"apiVersion": "v1", "kind": "List"}
    if items:
        document["items"] = items
    return _escape_html(json.dumps(document, indent=4, ensure_ascii=False))


def render_objects(objects: Iterable[Object], output: str) -> str:
    """Render objects in the named format, 'yaml' or 'json'."""
    if output == "yaml":
        return render_yaml(objects)
    if output == "json":
        return render_json_list(objects)
    raise OutputFormatError(f"unknown --output={output}, can be yaml or json")


def _render_instance(objects: Iterable[Object]) -> str:
    return "---\n".join(_dump_yaml(obj) for obj in sort_objects(objects))


def render_bundle(
    instances: Mapping[str, Sequence[Object]] | Iterable[tuple[str, Sequence[Object]]],
) -> str:
    """Render the objects of each bundle instance under an instance header.

    ``instances`` maps instance names to their objects, or is a sequence of
    (name, objects) pairs; the order is kept.
    """
    pairs = list(instances.items() if isinstance(instances, Mapping) else instances)
    parts = [
        f"---\n# Instance: {name}\n---\n" + _render_instance(objects)
        for name, objects in pairs
    ]
    return "\n".join(parts)