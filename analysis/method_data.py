# ABOUTME: Version-dependent lodash method metadata (aliases, chainability, chain breakers)
# ABOUTME: Read-only lookup injected into the classifiers instead of global state

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Optional

# alias -> canonical method, per major version
ALIASES: Dict[int, Dict[str, str]] = {
    3: {
        "all": "every",
        "any": "some",
        "backflow": "flowRight",
        "collect": "map",
        "compose": "flowRight",
        "contains": "includes",
        "detect": "find",
        "each": "forEach",
        "eachRight": "forEachRight",
        "eq": "isEqual",
        "extend": "assign",
        "foldl": "reduce",
        "foldr": "reduceRight",
        "head": "first",
        "include": "includes",
        "inject": "reduce",
        "iteratee": "callback",
        "methods": "functions",
        "object": "zipObject",
        "run": "value",
        "select": "filter",
        "tail": "rest",
        "toJSON": "value",
        "unique": "uniq",
        "valueOf": "value",
    },
    4: {
        "each": "forEach",
        "eachRight": "forEachRight",
        "entries": "toPairs",
        "entriesIn": "toPairsIn",
        "extend": "assignIn",
        "extendWith": "assignInWith",
        "first": "head",
        "toJSON": "value",
        "valueOf": "value",
    },
}

# Wrapper methods that keep an implicit chain (`_(x)`) wrapped
CHAINABLE: Dict[int, FrozenSet[str]] = {
    3: frozenset({
        "after", "ary", "assign", "at", "before", "bind", "bindAll", "bindKey",
        "callback", "chain", "chunk", "commit", "compact", "concat", "constant",
        "countBy", "create", "curry", "curryRight", "debounce", "defaults",
        "defaultsDeep", "defer", "delay", "difference", "drop", "dropRight",
        "dropRightWhile", "dropWhile", "fill", "filter", "flatten", "flattenDeep",
        "flow", "flowRight", "forEach", "forEachRight", "forIn", "forInRight",
        "forOwn", "forOwnRight", "functions", "groupBy", "indexBy", "initial",
        "intersection", "invert", "invoke", "keys", "keysIn", "map", "mapKeys",
        "mapValues", "matches", "matchesProperty", "memoize", "merge", "method",
        "methodOf", "mixin", "modArgs", "negate", "omit", "once", "pairs",
        "partial", "partialRight", "partition", "pick", "plant", "pluck",
        "property", "propertyOf", "pull", "pullAt", "push", "range", "rearg",
        "reject", "remove", "rest", "restParam", "reverse", "set", "shuffle",
        "slice", "sort", "sortBy", "sortByAll", "sortByOrder", "splice",
        "spread", "take", "takeRight", "takeRightWhile", "takeWhile", "tap",
        "throttle", "thru", "times", "toArray", "toPlainObject", "transform",
        "union", "uniq", "unshift", "unzip", "unzipWith", "values", "valuesIn",
        "where", "without", "wrap", "xor", "zip", "zipObject", "zipWith",
    }),
    4: frozenset({
        "after", "ary", "assign", "assignIn", "assignInWith", "assignWith", "at",
        "before", "bind", "bindAll", "bindKey", "castArray", "chain", "chunk",
        "commit", "compact", "concat", "conforms", "constant", "countBy",
        "create", "curry", "curryRight", "debounce", "defaults", "defaultsDeep",
        "defer", "delay", "difference", "differenceBy", "differenceWith", "drop",
        "dropRight", "dropRightWhile", "dropWhile", "fill", "filter", "flatMap",
        "flatMapDeep", "flatMapDepth", "flatten", "flattenDeep", "flattenDepth",
        "flip", "flow", "flowRight", "fromPairs", "functions", "functionsIn",
        "groupBy", "initial", "intersection", "intersectionBy",
        "intersectionWith", "invert", "invertBy", "invokeMap", "iteratee",
        "keyBy", "keys", "keysIn", "map", "mapKeys", "mapValues", "matches",
        "matchesProperty", "memoize", "merge", "mergeWith", "method", "methodOf",
        "mixin", "negate", "nthArg", "omit", "omitBy", "once", "orderBy", "over",
        "overArgs", "overEvery", "overSome", "partial", "partialRight",
        "partition", "pick", "pickBy", "plant", "property", "propertyOf", "pull",
        "pullAll", "pullAllBy", "pullAllWith", "pullAt", "push", "range",
        "rangeRight", "rearg", "reject", "remove", "rest", "reverse",
        "sampleSize", "set", "setWith", "shuffle", "slice", "sort", "sortBy",
        "splice", "spread", "tail", "take", "takeRight", "takeRightWhile",
        "takeWhile", "tap", "throttle", "thru", "toArray", "toPairs",
        "toPairsIn", "toPath", "toPlainObject", "transform", "unary", "union",
        "unionBy", "unionWith", "uniq", "uniqBy", "uniqWith", "unset", "unshift",
        "unzip", "unzipWith", "update", "updateWith", "values", "valuesIn",
        "without", "wrap", "xor", "xorBy", "xorWith", "zip", "zipObject",
        "zipObjectDeep", "zipWith",
    }),
}

# Calls that extract the wrapped value and end a chain
CHAIN_BREAKER_METHODS: Dict[int, FrozenSet[str]] = {
    3: frozenset({"value", "run", "toJSON", "valueOf"}),
    4: frozenset({"value", "toJSON", "valueOf"}),
}


class MethodMetadata(ABC):
    """Read-only, version-keyed answers about library method names."""

    @abstractmethod
    def is_alias(self, name: str, canonical: str, version: int) -> bool:
        """Whether name is a registered alias of canonical"""
        pass

    @abstractmethod
    def is_chainable(self, method: str, version: int) -> bool:
        """Whether method keeps an implicit chain wrapped"""
        pass

    @abstractmethod
    def chain_breakers(self, version: int) -> FrozenSet[str]:
        """Names (aliases included) that extract the value from a chain"""
        pass

    @abstractmethod
    def canonical_name(self, name: str, version: int) -> str:
        pass

    def is_alias_of_method(self, version: int, method: str, suspect: Optional[str]) -> bool:
        """Whether suspect is method itself or one of its aliases"""
        if suspect is None:
            return False
        return suspect == method or self.is_alias(suspect, method, version)

    def is_chain_breaker(self, name: Optional[str], version: int) -> bool:
        return name is not None and name in self.chain_breakers(version)


class LodashMethodData(MethodMetadata):
    """
    Static lodash 3 and 4 method tables.
    """

    def __init__(
        self,
        aliases: Optional[Dict[int, Dict[str, str]]] = None,
        chainable: Optional[Dict[int, FrozenSet[str]]] = None,
        chain_breakers: Optional[Dict[int, FrozenSet[str]]] = None,
    ) -> None:
        self._aliases = aliases if aliases is not None else ALIASES
        self._chainable = chainable if chainable is not None else CHAINABLE
        self._chain_breakers = (
            chain_breakers if chain_breakers is not None else CHAIN_BREAKER_METHODS
        )

    @property
    def versions(self) -> FrozenSet[int]:
        return frozenset(self._aliases)

    def _table(self, table: Dict[int, object], version: int):
        if version not in table:
            raise ValueError(f"No method data for lodash version {version}")
        return table[version]

    def canonical_name(self, name: str, version: int) -> str:
        return self._table(self._aliases, version).get(name, name)

    def is_alias(self, name: str, canonical: str, version: int) -> bool:
        return self._table(self._aliases, version).get(name) == canonical

    def is_chainable(self, method: str, version: int) -> bool:
        return self.canonical_name(method, version) in self._table(self._chainable, version)

    def chain_breakers(self, version: int) -> FrozenSet[str]:
        return self._table(self._chain_breakers, version)
