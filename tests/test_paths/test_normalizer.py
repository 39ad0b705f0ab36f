"""Tests for apitree.paths.normalizer -- prefix rules and segment splitting."""

from __future__ import annotations

import pytest

from apitree.models import DEFAULT_PREFIX_RULES, PrefixRule
from apitree.paths.normalizer import (
    is_parameterized,
    is_path_param,
    normalize,
    normalize_template,
    parameter_after,
    split_segments,
    trailing_parameter,
)


class TestNormalizeTemplate:
    """Default RingCentral prefix rules."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/restapi/v1.0/account/{accountId}", "/restapi/{apiVersion}/account/{accountId}"),
            ("/scim/v2/Users", "/scim/{version}/Users"),
            ("/scim/v2", "/scim/{version}"),
            ("/team-messaging/v1/chats", "/team-messaging/{version}/chats"),
            ("/analytics/calls/v1/accounts/{accountId}", "/analytics/calls/{version}/accounts/{accountId}"),
            ("/rcvideo/v1/bridges", "/rcvideo/{version}/bridges"),
            (
                "/restapi/v1.0/account/{accountId}/directory/entries/.search",
                "/restapi/{apiVersion}/account/{accountId}/directory/entries/dotSearch",
            ),
        ],
    )
    def test_default_rules(self, raw: str, expected: str) -> None:
        assert normalize_template(raw, DEFAULT_PREFIX_RULES) == expected

    def test_restapi_rule_needs_trailing_segment(self) -> None:
        assert normalize_template("/restapi/v1.0", DEFAULT_PREFIX_RULES) == "/restapi/v1.0"

    def test_unmatched_template_unchanged(self) -> None:
        assert normalize_template("/restapi/oauth/token", DEFAULT_PREFIX_RULES) == "/restapi/oauth/token"

    def test_only_first_match_replaced(self) -> None:
        rules = [PrefixRule(pattern=r"/v1", replacement="/{version}")]
        assert normalize_template("/a/v1/b/v1", rules) == "/a/{version}/b/v1"

    def test_rules_apply_in_order(self) -> None:
        """A later rule sees the output of an earlier one."""
        rules = [
            PrefixRule(pattern=r"/api/v2", replacement="/api/{version}"),
            PrefixRule(pattern=r"/api/\{version\}/admin", replacement="/admin"),
        ]
        assert normalize_template("/api/v2/admin/users", rules) == "/admin/users"

    def test_no_rules(self) -> None:
        assert normalize_template("/scim/v2", []) == "/scim/v2"


class TestSplitSegments:

    def test_drops_parameters(self) -> None:
        assert split_segments("/restapi/{apiVersion}/account/{accountId}") == ("restapi", "account")

    def test_root(self) -> None:
        assert split_segments("/") == ()

    def test_double_slash(self) -> None:
        assert split_segments("/a//b/") == ("a", "b")

    def test_is_path_param(self) -> None:
        assert is_path_param("{id}")
        assert not is_path_param("id")
        assert not is_path_param("{id")


class TestParameterized:

    def test_trailing_token(self) -> None:
        assert is_parameterized("/scim/{version}/Users/{id}")
        assert trailing_parameter("/scim/{version}/Users/{id}") == "id"

    def test_inner_token_only(self) -> None:
        assert not is_parameterized("/scim/{version}/Users")
        assert trailing_parameter("/scim/{version}/Users") is None

    def test_normalize_bundles_everything(self) -> None:
        normalized = normalize("/scim/v2", DEFAULT_PREFIX_RULES)
        assert normalized.raw == "/scim/v2"
        assert normalized.endpoint == "/scim/{version}"
        assert normalized.segments == ("scim",)
        assert normalized.parameterized
        assert normalized.parameter == "version"
        assert normalized.rewritten_parameter

    def test_declared_parameter_is_not_rewritten(self) -> None:
        normalized = normalize("/scim/v2/Users/{id}", DEFAULT_PREFIX_RULES)
        assert normalized.parameter == "id"
        assert not normalized.rewritten_parameter


class TestParameterAfter:

    TEMPLATE = "/restapi/{apiVersion}/account/{accountId}/paging-only-groups/{pagingOnlyGroupId}/users"

    def test_first_segment(self) -> None:
        assert parameter_after(self.TEMPLATE, ("restapi",)) == "apiVersion"

    def test_inner_segment(self) -> None:
        prefix = ("restapi", "account", "paging-only-groups")
        assert parameter_after(self.TEMPLATE, prefix) == "pagingOnlyGroupId"

    def test_not_followed_by_parameter(self) -> None:
        assert parameter_after("/restapi/{apiVersion}/dictionary/brand/{brandId}", ("restapi", "dictionary")) is None

    def test_last_segment(self) -> None:
        assert parameter_after("/restapi/oauth/token", ("restapi", "oauth", "token")) is None

    def test_matches_by_position(self) -> None:
        """A repeated literal only matches where the prefix ends."""
        template = "/a/b/{x}/a/c"
        assert parameter_after(template, ("a",)) is None
        assert parameter_after(template, ("a", "b")) == "x"

    def test_empty_prefix(self) -> None:
        assert parameter_after(self.TEMPLATE, ()) is None
