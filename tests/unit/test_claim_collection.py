"""Unit tests for claims/collection.py (ordered, immutable claim sets)."""

import pytest

from tokenguard.claims import Claim, ClaimCollection
from tests.helpers.token_factory import NOW


@pytest.fixture()
def collection():
    return ClaimCollection.make(
        [Claim("sub", "user-1"), Claim("iat", NOW), Claim("exp", NOW + 3600)]
    )


class TestLookup:
    def test_mapping_access(self, collection):
        assert collection["sub"].value == "user-1"
        assert len(collection) == 3
        assert list(collection) == ["sub", "iat", "exp"]

    def test_get_by_name(self, collection):
        assert collection.get_by_name("iat") == Claim("iat", NOW)
        assert collection.get_by_name("jti") is None

    def test_has_and_has_all(self, collection):
        assert collection.has("exp")
        assert not collection.has("nbf")
        assert collection.has_all(["sub", "exp"])
        assert not collection.has_all(["sub", "nbf"])

    def test_first_missing_follows_argument_order(self, collection):
        assert collection.first_missing(["sub", "nbf", "jti"]) == "nbf"
        assert collection.first_missing(["jti", "nbf"]) == "jti"
        assert collection.first_missing(["sub"]) is None


class TestConstruction:
    def test_later_duplicate_wins_but_keeps_position(self):
        collection = ClaimCollection(
            [Claim("sub", "a"), Claim("iat", NOW), Claim("sub", "b")]
        )
        assert list(collection) == ["sub", "iat"]
        assert collection["sub"].value == "b"

    def test_empty(self):
        assert len(ClaimCollection()) == 0


class TestImmutability:
    """Operations return new collections and leave the original untouched."""

    def test_merge_overrides_same_names(self, collection):
        merged = collection.merge([Claim("sub", "user-2"), Claim("jti", "abc")])

        assert merged["sub"].value == "user-2"
        assert list(merged) == ["sub", "iat", "exp", "jti"]
        assert collection["sub"].value == "user-1"
        assert "jti" not in collection

    def test_with_claim(self, collection):
        extended = collection.with_claim(Claim("role", "admin"))
        assert extended.has("role")
        assert not collection.has("role")

    def test_without(self, collection):
        reduced = collection.without("iat", "exp")
        assert list(reduced) == ["sub"]
        assert len(collection) == 3

    def test_no_item_assignment(self, collection):
        with pytest.raises(TypeError):
            collection["sub"] = Claim("sub", "x")  # type: ignore[index]


class TestSerialisation:
    def test_to_payload_dict(self, collection):
        assert collection.to_payload_dict() == {
            "sub": "user-1",
            "iat": NOW,
            "exp": NOW + 3600,
        }

    def test_non_serializable_claims_are_omitted(self, collection):
        hidden = collection.with_claim(Claim("internal", 1, serializable=False))
        assert hidden.has("internal")
        assert "internal" not in hidden.to_payload_dict()

    def test_claims_list_preserves_order(self, collection):
        assert [c.name for c in collection.claims()] == ["sub", "iat", "exp"]
