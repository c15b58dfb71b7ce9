# ABOUTME: Outcome of classifying one call site or path argument
# ABOUTME: Carries the offending node, its message kind and an optional safe replacement

from dataclasses import dataclass
from typing import Optional

import tree_sitter as ts

from models import MessageKind


@dataclass(frozen=True)
class Verdict:
    """Outcome of classifying one call site"""

    node: Optional[ts.Node] = None
    kind: Optional[MessageKind] = None
    replacement: Optional[str] = None  # Source text for node's span, when a fix is safe

    @classmethod
    def compliant(cls) -> "Verdict":
        return cls()

    @classmethod
    def violation(
        cls, node: ts.Node, kind: MessageKind, replacement: Optional[str] = None
    ) -> "Verdict":
        return cls(node=node, kind=kind, replacement=replacement)

    @property
    def is_violation(self) -> bool:
        return self.kind is not None

    @property
    def is_fixable(self) -> bool:
        return self.replacement is not None
