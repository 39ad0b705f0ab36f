"""Canonical Pydantic models shared across all apitree modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
or a project-local ``apitree.json``:
    :class:`PrefixRule`, :class:`ParserConfig`, :class:`OutputConfig` and
    :class:`GlobalConfig`.

**Parser output models** -- produced by the parser and handed to a downstream
code generator:
    :class:`Field`, :class:`Model`, :class:`Operation`, :class:`PathNode` and
    :class:`ParseResult`.

Output models serialise with camelCase aliases (``defaultParameter``,
``operationId``...) so that ``model_dump(by_alias=True, exclude_none=True)``
produces the JSON shape generators consume. :class:`Operation` and
:class:`PathNode` are frozen: merging never edits a record in place, it builds
a replacement with ``model_copy``.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from pydantic.alias_generators import to_camel


# --- Parser Config ---


class PrefixRule(BaseModel):
    """A single template rewrite applied before a path is split into segments.

    ``pattern`` is a regular expression; only its first match is replaced.
    Rules run in list order, so a later rule always sees the output of the
    earlier ones.

    Example::

        PrefixRule(pattern=r"/scim/v2", replacement="/scim/{version}")
    """

    pattern: str
    replacement: str


DEFAULT_PREFIX_RULES: list[PrefixRule] = [
    PrefixRule(pattern=r"/restapi/v1\.0/", replacement="/restapi/{apiVersion}/"),
    PrefixRule(pattern=r"/scim/v2", replacement="/scim/{version}"),
    PrefixRule(pattern=r"/team-messaging/v1", replacement="/team-messaging/{version}"),
    PrefixRule(pattern=r"/analytics/calls/v1", replacement="/analytics/calls/{version}"),
    PrefixRule(pattern=r"/rcvideo/v1", replacement="/rcvideo/{version}"),
    PrefixRule(pattern=r"/\.search", replacement="/dotSearch"),
]

DEFAULT_PARAMETER_DEFAULTS: dict[str, str] = {
    "account": "~",
    "extension": "~",
    "restapi": "v1.0",
}

DEFAULT_VERSION_DEFAULTS: dict[str, str] = {
    "scim": "v2",
    "rcvideo": "v1",
    "team-messaging": "v1",
    "calls": "v1",
}

DEFAULT_METHODS: list[str] = ["get", "post", "put", "delete", "patch"]


class ParserConfig(BaseModel):
    """Naming conventions the path-tree builder applies to an API.

    The defaults describe the RingCentral platform API. Other APIs can swap
    in their own tables through a config file without touching code.
    """

    prefix_rules: list[PrefixRule] = PydanticField(
        default_factory=lambda: list(DEFAULT_PREFIX_RULES),
        description="Ordered template rewrites (versioned prefix -> placeholder)",
    )
    parameter_defaults: dict[str, str] = PydanticField(
        default_factory=lambda: dict(DEFAULT_PARAMETER_DEFAULTS),
        description="Segment preceding an item parameter -> implicit value",
    )
    version_defaults: dict[str, str] = PydanticField(
        default_factory=lambda: dict(DEFAULT_VERSION_DEFAULTS),
        description="Segment preceding a structural parameter -> implicit value",
    )
    methods: list[str] = PydanticField(
        default_factory=lambda: list(DEFAULT_METHODS),
        description="HTTP methods turned into operations, in emission order",
    )


class OutputConfig(BaseModel):
    """Default output preferences stored in :class:`GlobalConfig`."""

    format: str = PydanticField(
        default="auto", description="Output format: auto, json, plain, rich"
    )
    indent: int = PydanticField(default=2, description="JSON indentation")


class GlobalConfig(BaseModel):
    """Configuration persisted at ``~/.config/apitree/config.json``.

    Loaded by :func:`~apitree.config.load_global_config`. A project-local
    ``apitree.json``, the ``APITREE_CONFIG`` variable or the ``--config`` flag
    take precedence; see :func:`~apitree.config.resolve_config`.
    """

    parser: ParserConfig = PydanticField(default_factory=ParserConfig)
    output: OutputConfig = PydanticField(default_factory=OutputConfig)


# --- Parser Output Models ---


class _OutputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Field(_OutputModel):
    """One property of a :class:`Model`.

    ``ref`` holds the bare schema name (``"Extension"``, not
    ``"#/components/schemas/Extension"``) and serialises as ``$ref``.
    ``name`` is unset on array ``items``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    name: Optional[str] = None
    type: Optional[str] = None
    ref: Optional[str] = PydanticField(default=None, alias="$ref")
    description: Optional[str] = None
    enum: Optional[list[Any]] = None
    example: Any = None
    format: Optional[str] = None
    items: Optional[Field] = None
    default: Any = None
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    required: Optional[bool] = None


class Model(_OutputModel):
    """A flat data model handed to the code generator."""

    name: str
    description: Optional[str] = None
    fields: list[Field] = PydanticField(default_factory=list)


class Operation(_OutputModel):
    """One HTTP operation reachable at a :class:`PathNode`.

    ``role`` starts equal to ``method``. When a collection endpoint is folded
    into its item sibling, the collection's ``get`` becomes ``list`` and its
    ``delete`` becomes ``deleteAll``; ``method`` never changes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    endpoint: str
    method: str
    role: str
    operation_id: str
    tags: Optional[list[str]] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    rate_limit_group: Optional[str] = None
    app_permission: Optional[str] = None
    user_permission: Optional[str] = None
    with_parameter: bool = False
    response_schema: Optional[dict[str, Any]] = None
    query_parameters: Optional[str] = None
    body_parameters: Optional[str] = None
    form_url_encoded: Optional[bool] = None
    multipart: Optional[bool] = None


class PathNode(_OutputModel):
    """One node of the path tree.

    ``paths`` is the parameter-free segment sequence and is unique across a
    parse result. Bridge nodes have no operations and no ``endpoint``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    paths: tuple[str, ...]
    parameter: Optional[str] = None
    default_parameter: Optional[str] = None
    operations: tuple[Operation, ...] = ()
    endpoint: Optional[str] = None

    @property
    def is_bridge(self) -> bool:
        """``True`` for synthesized structural nodes."""
        return self.endpoint is None

    def find_operation(self, role: str) -> Optional[Operation]:
        """Return the operation with *role*, or ``None``."""
        for operation in self.operations:
            if operation.role == role:
                return operation
        return None


class ParseResult(_OutputModel):
    """Everything the code generator needs: models plus the path tree."""

    models: list[Model] = PydanticField(default_factory=list)
    paths: list[PathNode] = PydanticField(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialise with camelCase keys, dropping unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
