"""Flatten an OpenAPI document into the list of data models a generator emits.

Three kinds of model are produced:

* one per ``components/schemas`` entry;
* ``<OperationId>Request`` for every form-url-encoded or multipart request
  body declared inline, and ``<OperationId>Parameters`` for every operation
  taking query parameters (the generated client passes these as one object);
* the synthetic :data:`ATTACHMENT` model, which replaces every binary field.

Schema properties are reshaped into :class:`~apitree.models.Field` records:
``$ref`` pointers are shortened to the schema name and binary strings
(``type: file`` or ``format: binary``) become ``$ref: Attachment``.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from apitree.models import Field, Model
from apitree.naming import capitalize_first, ref_name
from apitree.paths.operations import FORM_URL_ENCODED, MULTIPART

logger = logging.getLogger(__name__)

_HTTP_METHODS = frozenset(
    ("get", "put", "post", "delete", "options", "head", "patch", "trace")
)

ATTACHMENT = Model(
    name="Attachment",
    description="Attachment is a file to be uploaded",
    fields=[
        Field(
            name="filename",
            type="string",
            description="Filename with extension",
            example="example.png",
        ),
        Field(
            name="content",
            type="byte[]",
            description="Binary content of the file",
            required=True,
        ),
        Field(
            name="contentType",
            type="string",
            description='Content type of the file, such as "image/png"',
        ),
    ],
)


def extract_models(document: dict[str, Any]) -> list[Model]:
    """Return every model the generator needs for *document*.

    Args:
        document: The OpenAPI document. A deep copy is processed.

    Returns:
        Component models, then :data:`ATTACHMENT`, then per-operation
        request-body and query-parameter models in path order.
    """
    doc = copy.deepcopy(document)
    schemas = (doc.get("components") or {}).get("schemas") or {}

    models = [normalize_schema(name, schema) for name, schema in schemas.items()]
    models.append(ATTACHMENT.model_copy(deep=True))

    for template, path_item in (doc.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if method not in _HTTP_METHODS or not isinstance(operation, dict):
                continue
            operation_id = operation.get("operationId")
            if not operation_id:
                logger.warning("%s %s has no operationId", method.upper(), template)
                continue

            body_model = _form_body_model(operation, operation_id)
            if body_model is not None:
                models.append(body_model)
            query_model = _query_parameters_model(operation, operation_id)
            if query_model is not None:
                models.append(query_model)

    return models


def normalize_schema(name: str, schema: dict[str, Any]) -> Model:
    """Turn an object schema into a :class:`~apitree.models.Model`.

    A property is marked ``required`` from the schema's ``required`` list;
    when the schema has no such list, ``required`` stays unset.
    """
    properties = schema.get("properties") or {}
    required: Optional[list[str]] = schema.get("required")
    fields = []
    for key, prop in properties.items():
        data = dict(prop) if isinstance(prop, dict) else {}
        data["name"] = key
        data["required"] = key in required if isinstance(required, list) else None
        fields.append(Field.model_validate(normalize_field(data)))
    return Model(name=name, description=schema.get("description"), fields=fields)


def normalize_field(field: dict[str, Any]) -> dict[str, Any]:
    """Reshape one property dict in place and return it.

    Example::

        >>> normalize_field({"$ref": "#/components/schemas/Extension"})
        {'$ref': 'Extension'}
        >>> normalize_field({"type": "string", "format": "binary"})
        {'$ref': 'Attachment'}
    """
    if "$ref" in field:
        field["$ref"] = ref_name(field["$ref"])
    if field.get("type") == "file" or (
        field.get("type") == "string" and field.get("format") == "binary"
    ):
        field["$ref"] = "Attachment"
        field.pop("type", None)
        field.pop("format", None)
    if isinstance(field.get("type"), list):
        # OpenAPI 3.1 type arrays such as ["string", "null"]
        non_null = [t for t in field["type"] if t != "null"]
        field["type"] = non_null[0] if non_null else None
    if not isinstance(field.get("required", False), bool):
        # nested object schemas carry a list here
        field.pop("required")
    if isinstance(field.get("items"), dict):
        field["items"] = normalize_field(dict(field["items"]))
    return field


def _form_body_model(operation: dict[str, Any], operation_id: str) -> Optional[Model]:
    """``<OperationId>Request`` for an inline form or multipart body."""
    content = (operation.get("requestBody") or {}).get("content") or {}
    media_type = content.get(FORM_URL_ENCODED) or content.get(MULTIPART)
    if not isinstance(media_type, dict):
        return None
    schema = media_type.get("schema")
    if not isinstance(schema, dict) or "properties" not in schema:
        return None
    if not schema.get("description"):
        schema["description"] = f"Request body for operation {operation_id}"
    return normalize_schema(capitalize_first(operation_id) + "Request", schema)


def _query_parameters_model(
    operation: dict[str, Any], operation_id: str
) -> Optional[Model]:
    """``<OperationId>Parameters`` bundling every query parameter."""
    query = [
        p for p in operation.get("parameters") or []
        if isinstance(p, dict) and p.get("in") == "query"
    ]
    if not query:
        return None

    properties: dict[str, Any] = {}
    for parameter in query:
        prop = {**parameter, **(parameter.get("schema") or {})}
        prop.pop("in", None)
        prop.pop("schema", None)
        properties[parameter["name"]] = prop

    schema = {
        "description": f"Query parameters for operation {operation_id}",
        "properties": properties,
        "required": [p["name"] for p in query if p.get("required") is True],
    }
    return normalize_schema(capitalize_first(operation_id) + "Parameters", schema)
