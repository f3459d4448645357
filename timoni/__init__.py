"""Instance data model, runtime queries, values conversion, rendering and helpers for Timoni modules and bundles."""

__version__ = "0.1.0"

__all__ = [
    "api",
    "runtime_api",
    "ownership",
    "bundles",
    "docgen",
    "values",
    "render",
    "completion",
]