# ABOUTME: Call-site dispatch from visited call expressions to the classifiers
# ABOUTME: Resolves the invoked lodash method and extracts chain roots and path arguments

import logging
from typing import Optional, Sequence, Tuple

import tree_sitter as ts

from analysis.ast_util import get_argument
from analysis.chaining import ChainClassifier
from analysis.lodash_context import LodashContext
from analysis.path_style import PathStyleClassifier
from analysis.reporting import DiagnosticSink
from models import CallType, LintConfig, RuleName

logger = logging.getLogger(__name__)

# (methods, index of the path argument in a direct call)
OBJECT_PATH_METHODS: Tuple[Tuple[Sequence[str], int], ...] = (
    (("get", "has", "hasIn", "set", "unset", "invoke", "result", "setWith", "update", "updateWith"), 1),
    (("property", "matchesProperty"), 0),
)


class CallSiteDispatcher:
    """
    Routes each call expression to the enabled classifiers and forwards
    violations to the sink.
    """

    def __init__(self, config: LintConfig, lodash: LodashContext, sink: DiagnosticSink) -> None:
        self.lodash = lodash
        self.sink = sink
        self.chain_classifier: Optional[ChainClassifier] = None
        self.path_classifier: Optional[PathStyleClassifier] = None

        if config.is_enabled(RuleName.CHAINING):
            self.chain_classifier = ChainClassifier(lodash, lodash.metadata, config.chaining)
        if config.is_enabled(RuleName.PATH_STYLE):
            self.path_classifier = PathStyleClassifier(config.path_style)

    def get_path_index(self, method: str) -> int:
        """Path argument index for a direct call to method, or -1"""
        version = self.lodash.version
        for methods, index in OBJECT_PATH_METHODS:
            if any(
                self.lodash.metadata.is_alias_of_method(version, candidate, method)
                for candidate in methods
            ):
                return index
        return -1

    def get_property_path_node(
        self, node: ts.Node, method: str, call_type: CallType
    ) -> Optional[ts.Node]:
        index = self.get_path_index(method)
        if index < 0:
            return None
        # Chained calls receive the wrapped value implicitly
        if call_type == CallType.CHAINED:
            index -= 1
        return get_argument(node, index)

    def visit_call_expression(self, node: ts.Node) -> None:
        if self.chain_classifier is not None:
            verdict = self.chain_classifier.classify(node)
            if verdict.is_violation:
                self.sink.report(RuleName.CHAINING, verdict)

        if self.path_classifier is not None:
            call = self.lodash.classify_call(node)
            if call is None:
                return
            method, call_type = call
            path_node = self.get_property_path_node(node, method, call_type)
            if path_node is None:
                return
            verdict = self.path_classifier.classify_and_maybe_rewrite(path_node)
            if verdict.is_violation:
                logger.debug(f"{method} ({call_type.value}) path violates {verdict.kind.value}")
                self.sink.report(RuleName.PATH_STYLE, verdict)
