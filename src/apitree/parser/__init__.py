"""OpenAPI document parser -- load a document and build the generator inputs.

Typical usage::

    from apitree.parser import load_spec, parse, validate_openapi_version

    raw = load_spec("rc-platform.yml")
    validate_openapi_version(raw)
    result = parse(raw)
    print(len(result.models), len(result.paths))

Sub-modules:

* :mod:`~apitree.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~apitree.parser.schemas` -- the flat :class:`~apitree.models.Model`
  list.

The path tree itself is built by :mod:`apitree.paths`.
"""

from __future__ import annotations

from typing import Any, Optional

from apitree.models import ParserConfig, ParseResult
from apitree.parser.loader import load_spec, validate_openapi_version
from apitree.parser.schemas import extract_models
from apitree.paths import parse_paths

__all__ = ["load_spec", "validate_openapi_version", "extract_models", "parse"]


def parse(document: dict[str, Any], config: Optional[ParserConfig] = None) -> ParseResult:
    """Build the models and the path tree of *document*.

    The document is never modified. Either both collections are produced or
    the error that blocked them is raised.

    Raises:
        MissingResponseError: If an operation lacks an expected response.
    """
    paths = parse_paths(document, config)
    return ParseResult(models=extract_models(document), paths=paths)
