"""Bundle instances: ownership checks, module version resolution and stdin capture."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import IO, Any

from timoni.api import BUNDLE_NAME_LABEL_KEY, LATEST_VERSION, Instance, ModuleReference
from timoni.ownership import OwnershipConflictError

InstanceLookup = Callable[[str, str], "Instance | None"]


@dataclass
class BundleInstance:
    """An instance declared in a bundle."""

    bundle: str = ""
    name: str = ""
    namespace: str = ""
    module: ModuleReference = field(default_factory=ModuleReference)
    values: Any = field(default_factory=dict)


class DigestMismatchError(Exception):
    """Raised when a fetched module's digest differs from the one the bundle pins."""


def bundle_instances_ownership_conflicts(
    instances: Iterable[BundleInstance], lookup: InstanceLookup
) -> None:
    """Raise OwnershipConflictError if any instance is owned elsewhere.

    ``lookup(name, namespace)`` returns the stored instance, or None when it
    does not exist. An existing instance conflicts when it belongs to no
    bundle or to a bundle other than the one declaring it.
    """
    conflicts: list[str] = []
    for instance in instances:
        try:
            existing = lookup(instance.name, instance.namespace)
        except LookupError:
            existing = None
        if existing is None:
            continue
        owner = existing.labels.get(BUNDLE_NAME_LABEL_KEY, "")
        if not owner:
            conflicts.append(f'instance "{instance.name}" exists and is managed by no bundle')
        elif owner != instance.bundle:
            conflicts.append(
                f'instance "{instance.name}" exists and is managed by another bundle "{owner}"'
            )
    if conflicts:
        raise OwnershipConflictError(
            "instance ownership conflicts encountered. "
            'Apply with "--overwrite-ownership" to gain instance ownership. '
            f"Conflicts: {'; '.join(conflicts)}"
        )


def resolve_module_version(module: ModuleReference) -> str:
    """Return the version to fetch: a pinned digest takes the place of 'latest'."""
    if module.version == LATEST_VERSION and module.digest:
        return "@" + module.digest
    return module.version


def verify_module_digest(instance: BundleInstance, fetched: ModuleReference) -> ModuleReference:
    """Check the fetched module against the pinned digest and record it on the instance.

    Raises DigestMismatchError when the instance pins a digest that differs
    from the fetched one.
    """
    pinned = instance.module.digest
    if pinned and fetched.digest != pinned:
        raise DigestMismatchError(
            f"the upstream digest {fetched.digest} of version {instance.module.version} "
            f"doesn't match the specified digest {pinned}"
        )
    instance.module = fetched
    return fetched


def save_reader_to_file(reader: IO[Any]) -> str:
    """Copy a readable stream into a new temporary .cue file and return its path."""
    try:
        fd, path = tempfile.mkstemp(suffix=".cue")
    except OSError as exc:
        raise OSError("unable to create temp dir for stdin") from exc

    try:
        with os.fdopen(fd, "wb") as out:
            while True:
                chunk = reader.read(65536)
                if not chunk:
                    break
                if isinstance(chunk, str):
                    chunk = chunk.encode("utf-8")
                out.write(chunk)
    except OSError as exc:
        raise OSError(f"error writing stdin to file: {exc}") from exc
    return path