# ABOUTME: Chain-depth classifier deciding between lodash chaining and composition
# ABOUTME: Walks nested first arguments of library calls and checks single-call chains

import logging
from typing import Callable, Dict, Optional

import tree_sitter as ts

from analysis.ast_util import (
    get_argument,
    get_method_call_on,
    get_method_name,
    is_object_of_method_call,
)
from analysis.lodash_context import LodashContext
from analysis.method_data import MethodMetadata
from analysis.verdict import Verdict
from models import ChainingOptions, ChainMode, MessageKind

logger = logging.getLogger(__name__)


class ChainClassifier:
    """
    Classifies a call as deep composition that should be a chain, as a chain
    that should be composition, or as acceptable, according to the chain mode.

    always:   nesting of `depth` library calls -> "always"; a chain holding a
              single call -> "single"
    implicit: like always, but nested calls must be implicitly chainable
    never:    every chain start -> "never"
    """

    def __init__(
        self, lodash: LodashContext, metadata: MethodMetadata, options: ChainingOptions
    ) -> None:
        self.lodash = lodash
        self.metadata = metadata
        self.version = lodash.version
        self.mode = options.mode
        self.depth = options.depth

        self._handlers: Dict[ChainMode, Callable[[ts.Node], Verdict]] = {
            ChainMode.ALWAYS: self._check_always,
            ChainMode.NEVER: self._check_never,
            ChainMode.IMPLICIT: self._check_implicit,
        }

    def classify(self, node: ts.Node) -> Verdict:
        return self._handlers[self.mode](node)

    def _is_counted_call(self, node: Optional[ts.Node], include_unchainable: bool) -> bool:
        method = self.lodash.get_lodash_method(node)
        if method is None:
            return False
        return include_unchainable or self.metadata.is_chainable(method, self.version)

    def _is_nested_n_levels_inner(
        self, node: Optional[ts.Node], remaining: int, include_unchainable: bool
    ) -> bool:
        if remaining == 0:
            return True
        if self._is_counted_call(node, include_unchainable):
            return self._is_nested_n_levels_inner(
                get_argument(node, 0), remaining - 1, include_unchainable
            )
        return False

    def is_nested_n_levels(self, node: ts.Node, n: int, include_unchainable: bool) -> bool:
        """
        Whether node opens n library calls nested through their first argument.

        Without include_unchainable the outermost call may be any library call
        (it ends the would-be chain) while every inner one must be chainable.
        """
        if include_unchainable:
            return self._is_nested_n_levels_inner(node, n, True)
        if self.lodash.get_lodash_method(node) is None:
            return False
        return self._is_nested_n_levels_inner(get_argument(node, 0), n - 1, False)

    def _is_before_chain_breaker(self, call: ts.Node) -> bool:
        successor = get_method_call_on(call)
        return successor is not None and self.metadata.is_chain_breaker(
            get_method_name(successor), self.version
        )

    def _check_single_call_chain(self, node: ts.Node) -> Verdict:
        if not self.lodash.is_chain_start(node):
            return Verdict.compliant()

        first_call = get_method_call_on(node)
        if first_call is None:
            return Verdict.compliant()

        if not is_object_of_method_call(first_call) or self._is_before_chain_breaker(first_call):
            logger.debug(f"Single call chain at byte {first_call.start_byte}")
            return Verdict.violation(first_call, MessageKind.SINGLE)
        return Verdict.compliant()

    def _check_nested(self, node: ts.Node, include_unchainable: bool) -> Verdict:
        if self.is_nested_n_levels(node, self.depth, include_unchainable):
            logger.debug(f"Composition nested {self.depth} levels at byte {node.start_byte}")
            return Verdict.violation(node, MessageKind.ALWAYS)
        return self._check_single_call_chain(node)

    def _check_always(self, node: ts.Node) -> Verdict:
        return self._check_nested(node, include_unchainable=True)

    def _check_implicit(self, node: ts.Node) -> Verdict:
        return self._check_nested(node, include_unchainable=False)

    def _check_never(self, node: ts.Node) -> Verdict:
        if self.lodash.is_chain_start(node):
            return Verdict.violation(node, MessageKind.NEVER)
        return Verdict.compliant()
