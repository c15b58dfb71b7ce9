# ABOUTME: Lint driver: parses JavaScript, visits call expressions in source order
# ABOUTME: Runs the chaining and path-style rules and optionally applies their fixes

import logging
from pathlib import Path
from typing import List, Optional, Union

from analysis.ast_util import iter_nodes
from analysis.dispatch import CallSiteDispatcher
from analysis.fixer import FixResult, apply_fixes
from analysis.grammar import JavaScriptGrammar
from analysis.lodash_context import LodashContext
from analysis.method_data import LodashMethodData, MethodMetadata
from analysis.reporting import DiagnosticCollector
from models import Diagnostic, LintConfig

logger = logging.getLogger(__name__)

MAX_FIX_PASSES = 10


class Linter:
    """
    Lints JavaScript sources for lodash chaining and path-style issues.

    Configuration and metadata are fixed for the lifetime of the linter; every
    call to lint_source is an independent pass.
    """

    def __init__(
        self,
        config: Optional[LintConfig] = None,
        metadata: Optional[MethodMetadata] = None,
        grammar: Optional[JavaScriptGrammar] = None,
    ) -> None:
        self.config = config or LintConfig()
        self.metadata = metadata or LodashMethodData()
        self.grammar = grammar or JavaScriptGrammar.shared()

    def lint_source(self, source: str, file_path: Optional[str] = None) -> List[Diagnostic]:
        """Lint one source text and return its diagnostics in source order"""
        tree = self.grammar.parse(source)

        lodash = LodashContext(self.config.settings, self.metadata)
        lodash.collect_imports(tree.root_node, self.grammar)

        sink = DiagnosticCollector(file_path)
        dispatcher = CallSiteDispatcher(self.config, lodash, sink)

        for node in iter_nodes(tree.root_node):
            if node.type == "call_expression":
                dispatcher.visit_call_expression(node)

        return sink.sorted()

    def lint_file(self, path: Union[str, Path]) -> List[Diagnostic]:
        file_path = Path(path)
        with open(file_path, "r", encoding="utf-8") as f:
            source = f.read()
        return self.lint_source(source, str(file_path))

    def fix_source(self, source: str, file_path: Optional[str] = None) -> FixResult:
        """
        Apply fixes until the source is stable.

        Overlapping fixes are deferred to the next pass, so nested rewrites
        settle within a few passes.
        """
        result = FixResult(output=source)
        for _ in range(MAX_FIX_PASSES):
            diagnostics = self.lint_source(result.output, file_path)
            fixed = apply_fixes(result.output, diagnostics)
            if not fixed.changed:
                break
            result = FixResult(
                output=fixed.output,
                applied=result.applied + fixed.applied,
                skipped=fixed.skipped,
            )
        return result
