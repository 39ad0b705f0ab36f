"""Load OpenAPI documents from a URL, a local file, or stdin.

This is the only module of apitree that performs I/O on the input side. It
turns a *source* string into a plain ``dict`` and checks that the document is
an OpenAPI 3.x description; everything downstream is a pure function of that
dict.

* :func:`load_spec` -- read and decode a document (JSON or YAML).
* :func:`validate_openapi_version` -- reject Swagger 2.x and documents
  without an ``openapi`` field.

Example::

    raw = load_spec("rc-platform.yml")
    validate_openapi_version(raw)
    result = parse(raw)
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Union

import httpx
import yaml

from apitree.exceptions import SpecParseError

logger = logging.getLogger(__name__)

_URL_TIMEOUT = 60.0
_YAML_SUFFIXES = (".yaml", ".yml")


def load_spec(source: Union[str, Path]) -> dict[str, Any]:
    """Load an OpenAPI document from *source*.

    Args:
        source: ``"-"`` for stdin, an ``http(s)://`` URL, or a file path.

    Returns:
        The decoded document.

    Raises:
        SpecParseError: If the source cannot be read or decoded, or does
            not hold a mapping.
    """
    source = str(source)
    if source == "-":
        content, hint = _read_stdin(), ""
    elif source.startswith(("http://", "https://")):
        content, hint = _fetch(source)
    else:
        content, hint = _read_file(Path(source))

    if not content.strip():
        raise SpecParseError(f"Spec is empty: {source}")
    logger.debug("loaded %d bytes from %s", len(content), source)
    return _decode(content, hint)


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc


def _fetch(url: str) -> tuple[str, str]:
    """GET *url*; the content type decides the decoding hint."""
    try:
        response = httpx.get(url, timeout=_URL_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    else:
        hint = ""
    return response.text, hint


def _read_file(path: Path) -> tuple[str, str]:
    """Read *path*; the suffix decides the decoding hint."""
    if not path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    if suffix == ".json":
        return content, "json"
    if suffix in _YAML_SUFFIXES:
        return content, "yaml"
    return content, ""


def _decode(content: str, hint: str = "") -> dict[str, Any]:
    """Decode *content* as JSON or YAML.

    JSON is tried first unless the hint says YAML; a document hinted as JSON
    is never retried as YAML.

    Raises:
        SpecParseError: If decoding fails or the top level is not a mapping.
    """
    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            logger.debug("not JSON, trying YAML: %s", exc)

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        raise SpecParseError(f"Failed to parse spec as JSON or YAML: {exc}") from exc


def _require_mapping(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        kind = type(document).__name__ if document is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return document


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Return the document's ``openapi`` version string.

    Raises:
        SpecParseError: For Swagger 2.x documents, a missing ``openapi``
            field, or a major version other than 3.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.x documents can be parsed."
        )

    version = spec.get("openapi")
    if version is None:
        raise SpecParseError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(f"Unsupported OpenAPI version: {version_str}")
    return version_str
