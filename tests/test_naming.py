"""Tests for distant column name normalization.

Verifies the default camelCase normalizer and the collision policies of
normalize_distant_columns().
"""

import logging

import pytest

from remote_table_sync.schema.models import DistantColumn, NormalizedColumn
from remote_table_sync.schema.naming import (
    CollisionPolicy,
    NormalizationCollisionError,
    normalize_distant_columns,
    to_foreign_column_name,
)


def _col(name: str, data_type: str = "text") -> DistantColumn:
    return DistantColumn(column_name=name, data_type=data_type)


class TestToForeignColumnName:
    """Verify the default snake_case -> camelCase normalizer."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("id", "id"),
            ("first_name", "firstName"),
            ("created_at_utc", "createdAtUtc"),
            ("userID", "userId"),
            ("HTTPServer", "httpServer"),
            ("Order Total", "orderTotal"),
            ("address_2", "address2"),
            ("already_camelCase", "alreadyCamelCase"),
            ("__private__", "private"),
            ("ID", "id"),
            ("prénom", "prenom"),
            ("Émile_Zola", "emileZola"),
            ("façade_name", "facadeName"),
            ("Straße", "strasse"),
            ("Ærø_by", "aeroBy"),
            ("名前", "名前"),
            ("顧客_名前", "顧客名前"),
            ("имя_клиента", "имяКлиента"),
        ],
    )
    def test_conversion(self, raw: str, expected: str) -> None:
        """Raw distant names convert to the local camelCase convention."""
        assert to_foreign_column_name(raw) == expected

    def test_camel_case_is_stable(self) -> None:
        """An already normalized name is returned unchanged."""
        assert to_foreign_column_name("firstName") == "firstName"

    @pytest.mark.parametrize("raw", ["__", "-", " ", "$#!"])
    def test_punctuation_only(self, raw: str) -> None:
        """A name made only of punctuation normalizes to an empty string."""
        assert to_foreign_column_name(raw) == ""


class TestNormalizeDistantColumns:
    """Verify normalize_distant_columns() keeps types and order."""

    def test_keeps_type_and_order(self) -> None:
        """Each column keeps its data type; input order is preserved."""
        result = normalize_distant_columns(
            [_col("last_name", "varchar"), _col("id", "uuid")]
        )

        assert result == [
            NormalizedColumn(name="lastName", type="varchar"),
            NormalizedColumn(name="id", type="uuid"),
        ]

    def test_custom_normalizer(self) -> None:
        """A caller-provided normalizer replaces the default."""
        result = normalize_distant_columns([_col("first_name")], normalize=str.upper)

        assert result[0].name == "FIRST_NAME"

    def test_identity_normalizer(self) -> None:
        """The identity normalizer leaves raw names untouched."""
        result = normalize_distant_columns([_col("first_name")], normalize=lambda n: n)

        assert result[0].name == "first_name"

    def test_repeated_raw_name_is_not_a_collision(self) -> None:
        """The same raw name twice is kept once, even under REJECT."""
        result = normalize_distant_columns([_col("id"), _col("id")])

        assert [c.name for c in result] == ["id"]


class TestCollisionPolicies:
    """Verify handling of distinct raw names sharing a normalized name."""

    COLUMNS = [_col("first_name", "text"), _col("id", "uuid"), _col("firstName", "varchar")]

    def test_reject_raises(self) -> None:
        """REJECT (default) raises NormalizationCollisionError."""
        with pytest.raises(NormalizationCollisionError) as exc_info:
            normalize_distant_columns(self.COLUMNS)

        assert exc_info.value.normalized_name == "firstName"
        assert exc_info.value.raw_names == ["first_name", "firstName"]

    def test_collision_error_is_value_error(self) -> None:
        """NormalizationCollisionError is a ValueError subclass."""
        assert issubclass(NormalizationCollisionError, ValueError)

    def test_keep_first(self, caplog: pytest.LogCaptureFixture) -> None:
        """KEEP_FIRST keeps the first column and logs a warning."""
        with caplog.at_level(logging.WARNING):
            result = normalize_distant_columns(
                self.COLUMNS, on_collision=CollisionPolicy.KEEP_FIRST
            )

        assert result == [
            NormalizedColumn(name="firstName", type="text"),
            NormalizedColumn(name="id", type="uuid"),
        ]
        assert "both normalize to 'firstName'" in caplog.text

    def test_keep_last(self) -> None:
        """KEEP_LAST keeps the last column at the first one's position."""
        result = normalize_distant_columns(
            self.COLUMNS, on_collision=CollisionPolicy.KEEP_LAST
        )

        assert result == [
            NormalizedColumn(name="firstName", type="varchar"),
            NormalizedColumn(name="id", type="uuid"),
        ]

    def test_policy_values(self) -> None:
        """Policy values match the sync.toml spelling."""
        assert CollisionPolicy("reject") is CollisionPolicy.REJECT
        assert CollisionPolicy("keep_first") is CollisionPolicy.KEEP_FIRST
        assert CollisionPolicy("keep_last") is CollisionPolicy.KEEP_LAST
