# ABOUTME: Per-file knowledge of which identifiers refer to lodash
# ABOUTME: Tracks pragma and imports, recognises lodash calls, chain starts and wrapped values

import logging
import re
from typing import Dict, Optional, Set, Tuple

import tree_sitter as ts

from analysis.ast_util import (
    get_callee,
    get_caller,
    get_identifier_name,
    get_method_name,
    is_call_expression,
    is_method_call,
    node_text,
    string_value,
    unwrap_parenthesized,
)
from analysis.grammar import JavaScriptGrammar
from analysis.method_data import MethodMetadata
from analysis.queries.javascript import ALL_IMPORTS
from models import CallType, LodashSettings

logger = logging.getLogger(__name__)

LODASH_MODULES = {"lodash", "lodash-es"}
_METHOD_MODULE = re.compile(r"^(?:lodash|lodash-es)/([A-Za-z_$][\w$]*)$")


class LodashContext:
    """
    Identifiers bound to lodash in one source file.

    The pragma is always treated as the library; imports found in the file add
    whole-library names (`import _ from 'lodash'`) and single-method names
    (`import map from 'lodash/map'`).
    """

    def __init__(self, settings: LodashSettings, metadata: MethodMetadata) -> None:
        self.pragma = settings.pragma
        self.version = settings.version
        self.metadata = metadata
        self.general_imports: Set[str] = set()
        self.method_imports: Dict[str, str] = {}

    @property
    def library_names(self) -> Set[str]:
        names = set(self.general_imports)
        if self.pragma:
            names.add(self.pragma)
        return names

    # Import tracking

    def collect_imports(self, root: ts.Node, grammar: Optional[JavaScriptGrammar] = None) -> None:
        """Register lodash imports and requires found anywhere under root"""
        grammar = grammar or JavaScriptGrammar.shared()
        cursor = ts.QueryCursor(grammar.query(ALL_IMPORTS))

        for pattern_index, captures_dict in cursor.matches(root):
            if "import.clause" in captures_dict:
                clause = captures_dict["import.clause"][0]
                source = captures_dict["import.source"][0]
                self._register_import(clause, string_value(source))
            elif "require.target" in captures_dict:
                function = captures_dict["require.function"][0]
                if node_text(function) != "require":
                    continue
                target = captures_dict["require.target"][0]
                source = captures_dict["require.source"][0]
                self._register_require(target, string_value(source))

        if self.general_imports or self.method_imports:
            logger.debug(
                f"lodash imports: library={sorted(self.general_imports)} "
                f"methods={self.method_imports}"
            )

    def _module_method(self, module: str) -> Optional[str]:
        match = _METHOD_MODULE.match(module)
        if not match or match.group(1) == "fp":
            return None
        return match.group(1)

    def _register_import(self, clause: ts.Node, module: str) -> None:
        method = self._module_method(module)
        if module not in LODASH_MODULES and method is None:
            return

        for child in clause.named_children:
            if child.type == "identifier":
                # Default import
                if method:
                    self.method_imports[node_text(child)] = method
                else:
                    self.general_imports.add(node_text(child))
            elif child.type == "namespace_import" and method is None:
                for name in child.named_children:
                    if name.type == "identifier":
                        self.general_imports.add(node_text(name))
            elif child.type == "named_imports" and method is None:
                for specifier in child.named_children:
                    if specifier.type != "import_specifier":
                        continue
                    imported = specifier.child_by_field_name("name")
                    alias = specifier.child_by_field_name("alias") or imported
                    if imported is None or alias is None:
                        continue
                    imported_name = (
                        string_value(imported) if imported.type == "string" else node_text(imported)
                    )
                    if imported_name == "default":
                        self.general_imports.add(node_text(alias))
                    else:
                        self.method_imports[node_text(alias)] = imported_name

    def _register_require(self, target: ts.Node, module: str) -> None:
        method = self._module_method(module)
        if module not in LODASH_MODULES and method is None:
            return

        if target.type == "identifier":
            if method:
                self.method_imports[node_text(target)] = method
            else:
                self.general_imports.add(node_text(target))
        elif target.type == "object_pattern" and method is None:
            for prop in target.named_children:
                if prop.type == "shorthand_property_identifier_pattern":
                    self.method_imports[node_text(prop)] = node_text(prop)
                elif prop.type == "pair_pattern":
                    key = prop.child_by_field_name("key")
                    value = prop.child_by_field_name("value")
                    if key is not None and value is not None and value.type == "identifier":
                        self.method_imports[node_text(value)] = node_text(key)

    # Call recognition

    def is_lodash_identifier(self, node: Optional[ts.Node]) -> bool:
        name = get_identifier_name(node)
        return name is not None and name in self.library_names

    def is_lodash_call(self, node: Optional[ts.Node]) -> bool:
        """A direct library call: _.method(...)"""
        if not is_method_call(node):
            return False
        return self.is_lodash_identifier(get_caller(node)) and get_method_name(node) is not None

    def get_imported_method(self, node: Optional[ts.Node]) -> Optional[str]:
        """Method name behind a call to a single-method import: map(...)"""
        if not is_call_expression(node):
            return None
        name = get_identifier_name(get_callee(node))
        if name is None:
            return None
        return self.method_imports.get(name)

    def get_lodash_method(self, node: Optional[ts.Node]) -> Optional[str]:
        """Method invoked by a library call or single-method import call"""
        if self.is_lodash_call(node):
            return get_method_name(node)
        return self.get_imported_method(node)

    def is_explicit_chain_start(self, node: Optional[ts.Node]) -> bool:
        """_.chain(x)"""
        return self.metadata.is_alias_of_method(
            self.version, "chain", self.get_lodash_method(node)
        )

    def is_chain_start(self, node: Optional[ts.Node]) -> bool:
        """_(x) or _.chain(x)"""
        if not is_call_expression(node):
            return False
        if self.is_lodash_identifier(get_callee(node)):
            return True
        return self.is_explicit_chain_start(node)

    def is_lodash_wrapper(self, node: Optional[ts.Node]) -> bool:
        """Whether node evaluates to a lodash wrapper that further steps can chain on"""
        steps = []
        current = unwrap_parenthesized(node)
        while not self.is_chain_start(current):
            if not is_method_call(current):
                return False
            steps.append(get_method_name(current))
            current = unwrap_parenthesized(get_caller(current))

        explicit = self.is_explicit_chain_start(current)
        for method in steps:
            if method is None or self.metadata.is_chain_breaker(method, self.version):
                return False
            if not explicit and not self.metadata.is_chainable(method, self.version):
                return False
        return True

    def classify_call(self, node: ts.Node) -> Optional[Tuple[str, CallType]]:
        """Library method invoked by node and the shape of the invocation"""
        if self.is_lodash_call(node):
            return get_method_name(node), CallType.METHOD
        if is_method_call(node) and self.is_lodash_wrapper(get_caller(node)):
            method = get_method_name(node)
            if method is not None:
                return method, CallType.CHAINED
        imported = self.get_imported_method(node)
        if imported is not None:
            return imported, CallType.SINGLE
        return None
