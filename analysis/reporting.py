# ABOUTME: Diagnostic sink receiving classifier verdicts
# ABOUTME: Turns verdicts into Diagnostic models carrying optional fixes

from abc import ABC, abstractmethod
from typing import List, Optional

from analysis.verdict import Verdict
from models import Diagnostic, Fix, RuleName


class DiagnosticSink(ABC):
    """Receives (node, message kind, replacement) triples from the rules."""

    @abstractmethod
    def report(self, rule: RuleName, verdict: Verdict) -> None:
        pass


class DiagnosticCollector(DiagnosticSink):
    """Collects diagnostics for one source file"""

    def __init__(self, file_path: Optional[str] = None) -> None:
        self.file_path = file_path
        self.diagnostics: List[Diagnostic] = []

    def report(self, rule: RuleName, verdict: Verdict) -> None:
        if not verdict.is_violation or verdict.node is None:
            return

        node = verdict.node
        fix = None
        if verdict.is_fixable:
            fix = Fix(
                start_byte=node.start_byte,
                end_byte=node.end_byte,
                text=verdict.replacement,
            )

        self.diagnostics.append(
            Diagnostic(
                rule=rule,
                message_id=verdict.kind,
                line=node.start_point[0] + 1,
                column=node.start_point[1],
                end_line=node.end_point[0] + 1,
                end_column=node.end_point[1],
                start_byte=node.start_byte,
                end_byte=node.end_byte,
                fix=fix,
                file_path=self.file_path,
            )
        )

    def sorted(self) -> List[Diagnostic]:
        return sorted(self.diagnostics, key=lambda d: (d.start_byte, d.end_byte))
