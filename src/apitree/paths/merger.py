"""Fold every endpoint of a document into a deduplicated list of path nodes.

**Algorithm summary**

Endpoints are visited in ascending order of template length, so a collection
endpoint (``/restapi/v1.0/account/{accountId}/extension``) is always seen
before its item sibling (``.../extension/{extensionId}``). Both normalise to
the same segment sequence; when the item endpoint arrives, the collection's
node is replaced by a single parameterized node carrying:

* the collection's operations, with ``get`` re-labelled ``list`` and
  ``delete`` re-labelled ``deleteAll`` when the item endpoint defines the
  same verb, so the generator can tell "get all" from "get one";
* the item endpoint's own operations, untouched.

Operations are immutable, so re-labelling builds replacement records instead
of editing the collection's originals.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from apitree.models import Operation, ParserConfig, PathNode
from apitree.paths.normalizer import NormalizedPath, normalize
from apitree.paths.operations import extract_operation

logger = logging.getLogger(__name__)

RECLASSIFIED_ROLES: dict[str, str] = {
    "get": "list",
    "delete": "deleteAll",
}
"""HTTP method -> role given to the collection's operation on merge."""


def merge_endpoints(
    paths: dict[str, Any], config: Optional[ParserConfig] = None
) -> list[PathNode]:
    """Merge the document's ``paths`` mapping into real path nodes.

    Args:
        paths: The OpenAPI ``paths`` object (template -> *Path Item Object*).
            It is read, never modified.
        config: Prefix rules, default-value tables and supported methods.
            Defaults to :class:`~apitree.models.ParserConfig`.

    Returns:
        Nodes with at least one operation, in insertion order (a replaced
        node moves to the end). No two nodes share a segment sequence.

    Raises:
        MissingResponseError: If any operation lacks an expected response.
    """
    config = config or ParserConfig()
    # Keyed by segment sequence; dict order is the insertion order.
    result: dict[tuple[str, ...], PathNode] = {}

    for template in sorted(paths, key=len):
        path_item = paths[template]
        if not isinstance(path_item, dict):
            continue
        logger.debug("processing endpoint %s", template)

        normalized = normalize(template, config.prefix_rules)
        existing = result.get(normalized.segments)

        if normalized.parameterized:
            operations = _transfer_operations(existing, path_item)
            node = PathNode(
                paths=normalized.segments,
                parameter=normalized.parameter,
                default_parameter=default_parameter(normalized, config),
                endpoint=normalized.endpoint,
            )
            # The superseded node goes now; the replacement is inserted
            # below, before the next endpoint is looked at.
            result.pop(normalized.segments, None)
        elif existing is not None:
            operations = list(existing.operations)
            node = existing
        else:
            operations = []
            node = PathNode(paths=normalized.segments, endpoint=normalized.endpoint)

        appending = existing is not None and not normalized.parameterized
        taken = {op.role for op in operations}
        for method in config.methods:
            operation = extract_operation(
                normalized.endpoint, method, path_item.get(method), config.methods
            )
            if operation is None:
                continue
            if appending and operation.role in taken:
                logger.warning(
                    "dropping %s %s: %s already has a %r operation",
                    method.upper(), template, "/".join(node.paths), operation.role,
                )
                continue
            operations.append(operation)
            taken.add(operation.role)

        if operations:
            result[normalized.segments] = node.model_copy(
                update={"operations": tuple(operations)}
            )

    return list(result.values())


def default_parameter(normalized: NormalizedPath, config: ParserConfig) -> Optional[str]:
    """Infer the implicit value of a trailing path parameter.

    The value is looked up by the segment that precedes the parameter. When
    the parameter was produced by a prefix rule (``/scim/v2`` ->
    ``/scim/{version}``), the version table is used, so the literal the rule
    replaced becomes the default again.

    Example::

        >>> cfg = ParserConfig()
        >>> default_parameter(normalize("/restapi/v1.0/account/{accountId}", cfg.prefix_rules), cfg)
        '~'
        >>> default_parameter(normalize("/scim/v2", cfg.prefix_rules), cfg)
        'v2'
    """
    if not normalized.parameterized or not normalized.segments:
        return None
    preceding = normalized.segments[-1]
    if normalized.rewritten_parameter:
        return config.version_defaults.get(preceding)
    return config.parameter_defaults.get(preceding)


def _transfer_operations(
    existing: Optional[PathNode], path_item: dict[str, Any]
) -> list[Operation]:
    """Carry *existing*'s operations over to the node replacing it.

    For each verb in :data:`RECLASSIFIED_ROLES` that *path_item* defines, the
    transferred operation still holding that verb as its role is replaced by
    a copy carrying the collection role.
    """
    if existing is None:
        return []

    pending = {
        method: role for method, role in RECLASSIFIED_ROLES.items() if method in path_item
    }
    transferred: list[Operation] = []
    for operation in existing.operations:
        role = pending.pop(operation.role, None)
        if role is not None:
            operation = operation.model_copy(update={"role": role})
        transferred.append(operation)
    return transferred
