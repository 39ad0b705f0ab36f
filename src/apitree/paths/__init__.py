"""Path tree construction -- turn endpoint templates into generator-ready nodes.

The pipeline has three passes, run in this order by :func:`parse_paths`:

1. :func:`~apitree.paths.merger.merge_endpoints` -- one node per resource,
   collection and item endpoints folded together.
2. :func:`~apitree.paths.bridge.synthesize_bridges` -- operation-less
   ancestors for every missing prefix.
3. :func:`sort_nodes` -- shallow-to-deep order.

Typical usage::

    from apitree.paths import parse_paths

    for node in parse_paths(document):
        print("/".join(node.paths), node.parameter, node.default_parameter)

Sub-modules:

* :mod:`~apitree.paths.normalizer` -- prefix rewriting and segment splitting.
* :mod:`~apitree.paths.operations` -- per-method operation records.
* :mod:`~apitree.paths.merger` -- the merge pass.
* :mod:`~apitree.paths.bridge` -- the bridge pass.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from apitree.models import ParserConfig, PathNode
from apitree.paths.bridge import synthesize_bridges
from apitree.paths.merger import merge_endpoints

__all__ = ["parse_paths", "sort_nodes", "merge_endpoints", "synthesize_bridges"]


def parse_paths(
    document: dict[str, Any], config: Optional[ParserConfig] = None
) -> list[PathNode]:
    """Build the sorted path tree of an OpenAPI document.

    Args:
        document: The OpenAPI document. A deep copy is processed, so the
            caller's object is never modified.
        config: Naming conventions; defaults to
            :class:`~apitree.models.ParserConfig`.

    Returns:
        Real and bridge nodes, sorted by :func:`sort_nodes`.

    Raises:
        MissingResponseError: If an operation lacks an expected response.
            No partial result is returned.
    """
    config = config or ParserConfig()
    doc = copy.deepcopy(document)
    nodes = merge_endpoints(doc.get("paths") or {}, config)
    bridges = synthesize_bridges(nodes, config)
    return sort_nodes([*nodes, *bridges])


def sort_nodes(nodes: list[PathNode]) -> list[PathNode]:
    """Sort *nodes* by the length of their ``/``-joined segments.

    The sort is stable, so nodes of equal length keep their relative order.
    """
    return sorted(nodes, key=lambda node: len("/".join(node.paths)))
