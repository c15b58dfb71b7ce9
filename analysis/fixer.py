# ABOUTME: Applies diagnostic fixes to source text
# ABOUTME: Replaces byte spans in order, skipping fixes that overlap an earlier one

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from models import Diagnostic, Fix

logger = logging.getLogger(__name__)


@dataclass
class FixResult:
    """Source after applying fixes"""

    output: str
    applied: List[Fix] = field(default_factory=list)
    skipped: List[Fix] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def apply_fixes(source: str, diagnostics: Sequence[Diagnostic]) -> FixResult:
    """Apply every non-overlapping fix carried by diagnostics"""
    data = source.encode("utf-8")
    fixes = sorted(
        (d.fix for d in diagnostics if d.fix is not None),
        key=lambda f: (f.start_byte, f.end_byte),
    )

    pieces: List[bytes] = []
    applied: List[Fix] = []
    skipped: List[Fix] = []
    cursor = 0

    for fix in fixes:
        if fix.start_byte < cursor or fix.end_byte > len(data):
            skipped.append(fix)
            continue
        pieces.append(data[cursor:fix.start_byte])
        pieces.append(fix.text.encode("utf-8"))
        cursor = fix.end_byte
        applied.append(fix)

    pieces.append(data[cursor:])

    if skipped:
        logger.debug(f"Skipped {len(skipped)} overlapping fixes")

    return FixResult(
        output=b"".join(pieces).decode("utf-8"),
        applied=applied,
        skipped=skipped,
    )
