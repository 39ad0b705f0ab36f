"""Build :class:`~apitree.models.Operation` records from OpenAPI operation objects.

One record is produced per HTTP method on an endpoint. The record carries
everything the code generator needs to emit a method: the response schema
name, the names of the generated query-parameter and request-body models, and
the RingCentral vendor extensions (``x-throttling-group``,
``x-app-permission``, ``x-user-permission``).

Model names follow the convention used by
:func:`~apitree.parser.schemas.extract_models`:

* query parameters -> ``<operationId>Parameters``
* inline request bodies -> ``<operationId>Request``
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from apitree.exceptions import MissingResponseError
from apitree.models import DEFAULT_METHODS, Operation
from apitree.naming import lower_first, ref_name
from apitree.paths.normalizer import is_parameterized

logger = logging.getLogger(__name__)

RESPONSE_PRIORITY: tuple[str, ...] = (
    "200", "201", "202", "204", "205", "302", "501", "default",
)
"""Status codes probed, in order, for the response schema."""

FORM_URL_ENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


def extract_operation(
    endpoint: str,
    method: str,
    definition: Optional[dict[str, Any]],
    methods: Optional[list[str]] = None,
) -> Optional[Operation]:
    """Build the :class:`~apitree.models.Operation` for one method of *endpoint*.

    Args:
        endpoint: The normalised endpoint template
            (see :func:`~apitree.paths.normalizer.normalize_template`).
        method: Lower-case HTTP method name.
        definition: The OpenAPI *Operation Object*, or ``None`` when the
            endpoint does not define *method*.
        methods: Methods that produce operations. Defaults to
            ``get, post, put, delete, patch``.

    Returns:
        The operation, or ``None`` when *method* is not supported, not
        defined, or the operation is deprecated.

    Raises:
        MissingResponseError: If the operation has none of the status codes
            in :data:`RESPONSE_PRIORITY`.
    """
    if method not in (methods or DEFAULT_METHODS):
        return None
    if not isinstance(definition, dict) or definition.get("deprecated") is True:
        return None

    logger.debug("processing HTTP %s %s", method, endpoint)

    operation_id = definition.get("operationId", "")
    form_url_encoded, multipart, body_parameters = _extract_body(
        definition.get("requestBody"), operation_id
    )

    return Operation(
        endpoint=endpoint,
        method=method,
        role=method,
        operation_id=operation_id,
        tags=definition.get("tags"),
        description=definition.get("description"),
        summary=definition.get("summary"),
        rate_limit_group=definition.get("x-throttling-group"),
        app_permission=definition.get("x-app-permission"),
        user_permission=definition.get("x-user-permission"),
        with_parameter=is_parameterized(endpoint),
        response_schema=_extract_response_schema(
            definition.get("responses") or {}, endpoint, method
        ),
        query_parameters=_query_parameters_model(definition, operation_id),
        body_parameters=body_parameters,
        form_url_encoded=form_url_encoded,
        multipart=multipart,
    )


def _find_response(responses: dict[Any, Any]) -> Optional[dict[str, Any]]:
    """Return the first response in :data:`RESPONSE_PRIORITY` order.

    YAML documents may key responses by integer (``200:``) rather than by
    string, so both spellings are probed. An empty response object (``{}``)
    still counts as declared.
    """
    for code in RESPONSE_PRIORITY:
        response = responses.get(code)
        if response is None and code.isdigit():
            response = responses.get(int(code))
        if response is not None:
            return response
    return None


def _extract_response_schema(
    responses: dict[Any, Any], endpoint: str, method: str
) -> Optional[dict[str, Any]]:
    """Return the schema of the chosen response, with ``$ref`` shortened."""
    response = _find_response(responses)
    if response is None:
        raise MissingResponseError(endpoint, method)

    content = response.get("content") if isinstance(response, dict) else None
    if not content:
        return None
    media_type = next(iter(content.values())) or {}
    schema = media_type.get("schema")
    if not isinstance(schema, dict):
        return None
    schema = copy.deepcopy(schema)
    if "$ref" in schema:
        schema["$ref"] = ref_name(schema["$ref"])
    return schema


def _query_parameters_model(
    definition: dict[str, Any], operation_id: str
) -> Optional[str]:
    parameters = definition.get("parameters") or []
    if any(isinstance(p, dict) and p.get("in") == "query" for p in parameters):
        return f"{operation_id}Parameters"
    return None


def _extract_body(
    request_body: Optional[dict[str, Any]], operation_id: str
) -> tuple[Optional[bool], Optional[bool], Optional[str]]:
    """Work out the body model name and its encoding flags.

    Returns:
        ``(form_url_encoded, multipart, body_parameters)``; unset values are
        ``None`` so they drop out of the serialised output.
    """
    if not request_body:
        return None, None, None

    content = request_body.get("content") or {}
    inline_name = f"{operation_id}Request"

    if FORM_URL_ENCODED in content or MULTIPART in content:
        if FORM_URL_ENCODED in content:
            form_url_encoded, multipart = True, None
            media_type = content[FORM_URL_ENCODED]
        else:
            form_url_encoded, multipart = None, True
            media_type = content[MULTIPART]
        ref = _schema_ref(media_type)
        return form_url_encoded, multipart, ref_name(ref) if ref else inline_name

    if not content:
        return None, None, inline_name
    # JSON (or any other) body: generated clients use the lower-camel name.
    ref = _schema_ref(next(iter(content.values())))
    return None, None, lower_first(ref_name(ref)) if ref else inline_name


def _schema_ref(media_type: Any) -> Optional[str]:
    if not isinstance(media_type, dict):
        return None
    schema = media_type.get("schema")
    if isinstance(schema, dict):
        return schema.get("$ref")
    return None
