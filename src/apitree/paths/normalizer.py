"""Template normalisation for the path tree.

Raw templates such as ``/restapi/v1.0/account/{accountId}`` are rewritten by
an ordered list of :class:`~apitree.models.PrefixRule` objects (turning
concrete version segments into placeholders) and then split into the
parameter-free segment sequence used as a node key::

    >>> normalize_template("/restapi/v1.0/account/{accountId}", DEFAULT_PREFIX_RULES)
    '/restapi/{apiVersion}/account/{accountId}'
    >>> split_segments("/restapi/{apiVersion}/account/{accountId}")
    ('restapi', 'account')

Whether a template is *parameterized* (ends in a ``{name}`` token) is kept
apart from the segment sequence; it drives all parameter inference in the
merger.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from apitree.models import PrefixRule


@dataclass(frozen=True)
class NormalizedPath:
    """A raw template together with its normalised forms."""

    raw: str
    endpoint: str
    segments: tuple[str, ...]

    @property
    def parameterized(self) -> bool:
        return is_parameterized(self.endpoint)

    @property
    def parameter(self) -> Optional[str]:
        return trailing_parameter(self.endpoint)

    @property
    def rewritten_parameter(self) -> bool:
        """``True`` when the trailing token was introduced by a prefix rule."""
        return self.parameterized and not is_parameterized(self.raw)


def normalize(template: str, rules: list[PrefixRule]) -> NormalizedPath:
    """Rewrite and split *template* in one step."""
    endpoint = normalize_template(template, rules)
    return NormalizedPath(raw=template, endpoint=endpoint, segments=split_segments(endpoint))


def normalize_template(template: str, rules: list[PrefixRule]) -> str:
    """Apply each rule's first match to *template*, in rule order."""
    for rule in rules:
        template = re.sub(rule.pattern, rule.replacement, template, count=1)
    return template


def is_path_param(segment: str) -> bool:
    """Return ``True`` if *segment* is a path parameter token (e.g. ``{id}``)."""
    return segment.startswith("{") and segment.endswith("}")


def split_segments(template: str) -> tuple[str, ...]:
    """Split *template* into its literal segments.

    ``"/restapi/{apiVersion}/account"`` -> ``("restapi", "account")``
    ``"/"``                             -> ``()``
    """
    return tuple(s for s in template.split("/") if s and not is_path_param(s))


def is_parameterized(template: str) -> bool:
    """Return ``True`` if *template* ends with a parameter token."""
    return template.endswith("}")


def trailing_parameter(template: str) -> Optional[str]:
    """Return the name of the trailing parameter token, if there is one."""
    if not is_parameterized(template):
        return None
    last = template.rsplit("/", 1)[-1]
    return last[1:-1]


def parameter_after(template: str, segments: tuple[str, ...]) -> Optional[str]:
    """Return the parameter that directly follows *segments* in *template*.

    *segments* must be a prefix of the template's literal segments. The token
    is only matched at the position where that prefix ends, so a literal
    that also appears earlier in the template cannot produce a false match.

    Example::

        >>> parameter_after("/scim/{version}/Users/{id}", ("scim",))
        'version'
        >>> parameter_after("/scim/{version}/Users/{id}", ("scim", "Users"))
        'id'
        >>> parameter_after("/restapi/{apiVersion}/dictionary/brand", ("restapi", "dictionary"))
    """
    if not segments:
        return None
    parts = [p for p in template.split("/") if p]
    seen = 0
    for index, part in enumerate(parts):
        if is_path_param(part):
            continue
        seen += 1
        if seen == len(segments):
            if index + 1 < len(parts) and is_path_param(parts[index + 1]):
                return parts[index + 1][1:-1]
            return None
    return None
