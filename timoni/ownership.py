"""Ownership checks between standalone instances and bundles."""

from __future__ import annotations

from timoni.api import BUNDLE_NAME_LABEL_KEY, Instance


class OwnershipConflictError(Exception):
    """Raised when an instance is managed by a bundle and may not be taken over."""


def instance_ownership_conflicts(instance: Instance) -> None:
    """Raise OwnershipConflictError if the instance is owned by a bundle."""
    owner = instance.labels.get(BUNDLE_NAME_LABEL_KEY, "")
    if owner:
        raise OwnershipConflictError(
            "instance ownership conflict encountered. "
            'Apply with "--overwrite-ownership" to gain instance ownership. '
            f'Conflict: instance "{instance.name}" exists and is managed by bundle "{owner}"'
        )