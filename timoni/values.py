"""Reading user-supplied values files and turning them into CUE source."""

from __future__ import annotations

import datetime as _dt
import json
import math
import os
import re
import sys
from collections.abc import Iterable, Mapping
from typing import IO, Any

import yaml


class ValuesFormatError(ValueError):
    """Raised when a values file has an unknown format or cannot be converted."""


_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# Labels that would read as keywords or predeclared names are quoted.
_RESERVED = frozenset(
    {
        "package",
        "import",
        "for",
        "in",
        "if",
        "let",
        "true",
        "false",
        "null",
        "bool",
        "int",
        "float",
        "string",
        "bytes",
        "number",
        "len",
        "close",
        "and",
        "or",
        "div",
        "mod",
        "quo",
        "rem",
    }
)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _label(key: Any) -> str:
    text = key if isinstance(key, str) else _scalar_key(key)
    if _IDENTIFIER.match(text) and text not in _RESERVED:
        return text
    return _quote(text)


def _scalar_key(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _fields(mapping: Mapping[Any, Any], depth: int) -> list[str]:
    indent = "\t" * depth
    return [f"{indent}{_label(k)}: {_expr(v, depth)}" for k, v in mapping.items()]


def _expr(value: Any, depth: int) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"cannot represent {value!r} in CUE")
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (_dt.date, _dt.datetime, _dt.time)):
        return _quote(value.isoformat())
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        body = "\n".join(_fields(value, depth + 1))
        return "{\n" + body + "\n" + "\t" * depth + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        return "[" + ", ".join(_expr(item, depth) for item in value) + "]"
    raise TypeError(f"cannot represent value of type {type(value).__name__} in CUE")


def encode_cue(value: Any) -> str:
    """Return CUE source for a decoded JSON or YAML value.

    A mapping becomes top-level fields; any other value becomes a single
    expression.
    """
    if isinstance(value, Mapping):
        lines = _fields(value, 0)
        return "\n".join(lines) + "\n" if lines else ""
    return _expr(value, 0) + "\n"


def _extension(path: str) -> str:
    name = os.path.basename(path)
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _read_stream(stream: IO[Any]) -> bytes:
    data = stream.read()
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def convert_to_cue(paths: Iterable[str], stdin: IO[Any] | None = None) -> list[bytes]:
    """Read each values file and return its content as CUE source, in order.

    The path '-' reads CUE from ``stdin``. Files ending in .cue are passed
    through; .json, .yaml and .yml files are converted.
    """
    results: list[bytes] = []
    for path in paths:
        try:
            if path == "-":
                ext = ".cue"
                source = stdin if stdin is not None else sys.stdin.buffer
                data = _read_stream(source)
            else:
                ext = _extension(path)
                with open(path, "rb") as handle:
                    data = handle.read()
        except OSError as exc:
            raise OSError(f"could not read values file at {path}: {exc}") from exc

        if ext == ".cue":
            results.append(data)
            continue

        try:
            if ext == ".json":
                decoded = json.loads(data.decode("utf-8"))
            elif ext in (".yaml", ".yml"):
                decoded = yaml.safe_load(data.decode("utf-8"))
                if decoded is None:
                    decoded = {}
            else:
                raise ValuesFormatError(f"unknown values file format for {path}")
            results.append(encode_cue(decoded).encode("utf-8"))
        except ValuesFormatError:
            raise
        except (ValueError, TypeError, yaml.YAMLError) as exc:
            raise ValuesFormatError(
                f"could not serialise value from file at {path} to cue: {exc}"
            ) from exc
    return results