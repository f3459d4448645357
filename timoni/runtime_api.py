"""Runtime API: attributes and in-cluster value queries."""

from __future__ import annotations

from dataclasses import dataclass, field

from timoni.api import FIELD_MANAGER

# Name of the runtime CUE attributes.
RUNTIME_KIND = "runtime"
# Delimiter used inside runtime CUE attributes and queries.
RUNTIME_DELIMITER = ":"

RUNTIME_API_VERSION_SELECTOR = "runtime.apiVersion"
RUNTIME_NAME_SELECTOR = "runtime.name"
RUNTIME_VALUES_SELECTOR = "runtime.values"

RUNTIME_SCHEMA = """
import "strings"

#RuntimeValue: {
	query: string
	for: {[string & =~"^(([A-Za-z0-9][-A-Za-z0-9_]*)?[A-Za-z0-9])?$" & strings.MaxRunes(63) & strings.MinRunes(1)]: string}
	optional: *false | bool
}

#Runtime: {
	apiVersion: string & =~"^v1alpha1$"
	name:       string & =~"^(([A-Za-z0-9][-A-Za-z0-9_]*)?[A-Za-z0-9])?$" & strings.MaxRunes(63) & strings.MinRunes(1)
	values: [...#RuntimeValue]
}
"""

_QUERY_SCHEME = "k8s"


def is_runtime_attribute(key: str, body: str) -> bool:
    """Return True if the CUE attribute has the form @timoni(runtime:TYPE:NAME)."""
    if key != FIELD_MANAGER:
        return False
    parts = body.split(RUNTIME_DELIMITER)
    return len(parts) == 3 and parts[0] == RUNTIME_KIND


@dataclass(frozen=True)
class RuntimeAttribute:
    """A runtime variable's name and type."""

    name: str
    type: str

    @classmethod
    def parse(cls, key: str, body: str) -> RuntimeAttribute:
        """Build an attribute from a CUE attribute key and body.

        Raises ValueError when the attribute is not of the runtime form.
        """
        if not is_runtime_attribute(key, body):
            raise ValueError(
                "invalid format, must be "
                f"@timoni({RUNTIME_KIND}{RUNTIME_DELIMITER}[TYPE]{RUNTIME_DELIMITER}[NAME])"
            )
        _, type_, name = body.split(RUNTIME_DELIMITER)
        return cls(name=name, type=type_)


@dataclass
class RuntimeResourceRef:
    """An in-cluster resource together with CUE expressions selecting its fields."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    expressions: dict[str, str] = field(default_factory=dict)
    optional: bool = False


@dataclass
class RuntimeValue:
    """Query for in-cluster values.

    The query has the form 'k8s:<apiVersion>:<kind>:<namespace>:<name>'
    (the namespace may be left out); for_ maps variable names to CUE expressions.
    """

    query: str = ""
    for_: dict[str, str] = field(default_factory=dict)
    optional: bool = False

    def to_resource_ref(self) -> RuntimeResourceRef:
        """Parse the query into a resource reference.

        Raises ValueError when the query is malformed.
        """
        parts = self.query.split(RUNTIME_DELIMITER)
        if parts[0] != _QUERY_SCHEME:
            raise ValueError(
                f"failed to parse '{self.query}': query must start with {_QUERY_SCHEME}"
            )
        if len(parts) < 4:
            raise ValueError(f"failed to parse '{self.query}': invalid number of parts")

        ref = RuntimeResourceRef(
            api_version=parts[1],
            kind=parts[2],
            expressions=dict(self.for_),
            optional=self.optional,
        )
        if len(parts) == 5:
            ref.namespace = parts[3]
            ref.name = parts[4]
        else:
            ref.name = parts[3]
        return ref