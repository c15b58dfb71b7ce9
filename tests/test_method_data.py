# ABOUTME: Tests for version-dependent lodash method metadata
# ABOUTME: Validates alias resolution, chainability and chain breakers for lodash 3 and 4

import pytest

from analysis.method_data import LodashMethodData


@pytest.fixture
def metadata() -> LodashMethodData:
    return LodashMethodData()


class TestAliases:
    """Test alias lookups"""

    def test_method_is_alias_of_itself(self, metadata: LodashMethodData) -> None:
        assert metadata.is_alias_of_method(4, "get", "get")

    @pytest.mark.parametrize("version,alias,canonical", [
        (4, "first", "head"),
        (4, "each", "forEach"),
        (4, "toJSON", "value"),
        (3, "head", "first"),
        (3, "collect", "map"),
        (3, "run", "value"),
    ])
    def test_known_aliases(self, metadata: LodashMethodData, version: int, alias: str, canonical: str) -> None:
        assert metadata.is_alias_of_method(version, canonical, alias)
        assert metadata.canonical_name(alias, version) == canonical

    def test_alias_sets_differ_between_versions(self, metadata: LodashMethodData) -> None:
        assert not metadata.is_alias_of_method(4, "map", "collect")
        assert metadata.is_alias_of_method(3, "map", "collect")

    def test_missing_suspect(self, metadata: LodashMethodData) -> None:
        assert not metadata.is_alias_of_method(4, "chain", None)

    def test_unknown_version(self, metadata: LodashMethodData) -> None:
        assert metadata.versions == frozenset({3, 4})
        with pytest.raises(ValueError):
            metadata.is_chainable("map", 5)


class TestChainability:
    """Test implicit chain membership"""

    @pytest.mark.parametrize("method", ["map", "filter", "chain", "flatMap"])
    def test_chainable(self, metadata: LodashMethodData, method: str) -> None:
        assert metadata.is_chainable(method, 4)

    @pytest.mark.parametrize("method", ["head", "first", "reduce", "get", "value"])
    def test_not_chainable(self, metadata: LodashMethodData, method: str) -> None:
        assert not metadata.is_chainable(method, 4)

    def test_version_specific(self, metadata: LodashMethodData) -> None:
        assert metadata.is_chainable("pluck", 3)
        assert not metadata.is_chainable("pluck", 4)
        assert metadata.is_chainable("flatMap", 4)
        assert not metadata.is_chainable("flatMap", 3)


class TestChainBreakers:
    """Test value extraction methods"""

    @pytest.mark.parametrize("name", ["value", "toJSON", "valueOf"])
    def test_breakers_in_both_versions(self, metadata: LodashMethodData, name: str) -> None:
        assert metadata.is_chain_breaker(name, 3)
        assert metadata.is_chain_breaker(name, 4)

    def test_run_only_in_v3(self, metadata: LodashMethodData) -> None:
        assert metadata.is_chain_breaker("run", 3)
        assert not metadata.is_chain_breaker("run", 4)

    def test_non_breakers(self, metadata: LodashMethodData) -> None:
        assert not metadata.is_chain_breaker("map", 4)
        assert not metadata.is_chain_breaker(None, 4)

    def test_injected_tables(self) -> None:
        custom = LodashMethodData(
            aliases={9: {}},
            chainable={9: frozenset({"tap"})},
            chain_breakers={9: frozenset({"done"})},
        )
        assert custom.is_chainable("tap", 9)
        assert custom.is_chain_breaker("done", 9)
        assert not custom.is_chain_breaker("value", 9)
