"""Synthesize the structural (bridge) nodes of the path tree.

After merging, the tree only holds nodes that carry operations. A generated
client still needs every ancestor: ``restapi.account(accountId).extension()``
has to pass through ``restapi`` even when no real endpoint lives there. For
every proper prefix of every real node that is not a node itself, a bridge
node with no operations is created.

A bridge node is parameterized when, in the template of the real node that
produced it, the prefix's last segment is directly followed by a parameter
token (``/scim/{version}/...`` makes ``scim`` take ``version``). Its default
comes from :attr:`~apitree.models.ParserConfig.version_defaults`.

Bridges must be built from the *finished* set of real nodes: whether a prefix
is followed by a parameter is only known once every endpoint is merged.
"""

from __future__ import annotations

import logging
from typing import Optional

from apitree.models import ParserConfig, PathNode
from apitree.paths.normalizer import parameter_after

logger = logging.getLogger(__name__)


def synthesize_bridges(
    nodes: list[PathNode], config: Optional[ParserConfig] = None
) -> list[PathNode]:
    """Return the bridge nodes missing from *nodes*.

    Args:
        nodes: The real nodes produced by
            :func:`~apitree.paths.merger.merge_endpoints`.
        config: Supplies ``version_defaults``.

    Returns:
        New operation-less nodes, one per missing prefix, in discovery order.
        *nodes* itself is not modified.
    """
    config = config or ParserConfig()
    known = {node.paths for node in nodes}
    bridges: list[PathNode] = []

    for node in nodes:
        for depth in range(1, len(node.paths)):
            prefix = node.paths[:depth]
            if prefix in known:
                continue
            known.add(prefix)

            # First real node wins when siblings disagree on the name.
            parameter = parameter_after(node.endpoint or "", prefix)
            default: Optional[str] = None
            if parameter is not None:
                default = config.version_defaults.get(prefix[-1])
            logger.debug(
                "bridge %s (parameter=%s, default=%s) from %s",
                "/".join(prefix), parameter, default, node.endpoint,
            )
            bridges.append(
                PathNode(paths=prefix, parameter=parameter, default_parameter=default)
            )

    return bridges
