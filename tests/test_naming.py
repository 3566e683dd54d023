"""
Unit tests for the IdentityBuilder naming convention.
"""

import dataclasses

import pytest

from web_stacks.common.naming import IdentityBuilder


class TestIdentityBuilder:
    """Test id derivation from app, environment and unique identifier."""

    def test_build_joins_identity_and_suffix(self):
        """Test that build() appends the suffix to the base id."""
        assert IdentityBuilder("modus", "nprd").build("vpc") == "modus-nprd-vpc"
        assert IdentityBuilder("modus", "nprd").build("api-targetGroup") == "modus-nprd-api-targetGroup"

    @pytest.mark.parametrize("app_name, environment, unique_identifier, expected", [
        ("modus", "nprd", None, "modus-nprd"),
        ("modus", "nprd", "", "modus-nprd"),
        ("modus", "nprd", "blue", "modus-nprd-blue"),
        ("modus", "", "blue", "modus-blue"),
        ("", "nprd", None, "nprd"),
    ])
    def test_empty_parts_are_skipped(self, app_name, environment, unique_identifier, expected):
        """Test that empty identity parts never produce empty tokens."""
        builder = IdentityBuilder(app_name, environment, unique_identifier)
        assert builder.name() == expected
        assert "--" not in builder.build("vpc")

    def test_unique_identifier_is_part_of_every_id(self):
        builder = IdentityBuilder("modus", "nprd", "blue")
        assert builder.build("cluster") == "modus-nprd-blue-cluster"

    def test_name_is_idempotent(self):
        """Test that repeated calls return the same name."""
        builder = IdentityBuilder("modus", "nprd")
        assert builder.name() == builder.name() == "modus-nprd"

    def test_distinct_suffixes_give_distinct_ids(self):
        builder = IdentityBuilder("modus", "nprd")
        suffixes = ["vpc", "cluster", "loadBalancer", "api-service", "nginx-service"]
        ids = [builder.build(suffix) for suffix in suffixes]
        assert len(set(ids)) == len(suffixes)

    def test_equal_inputs_give_equal_outputs(self):
        """Test that two builders with the same identity agree on every id."""
        first = IdentityBuilder("modus", "nprd", "blue")
        second = IdentityBuilder("modus", "nprd", "blue")
        assert first == second
        assert first.build("db") == second.build("db")

    def test_builder_is_immutable(self):
        builder = IdentityBuilder("modus", "nprd")
        with pytest.raises(dataclasses.FrozenInstanceError):
            builder.app_name = "other"
