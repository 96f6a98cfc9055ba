"""Activation and save policies evaluated against a buffer's defects.

Policies only describe what the host should do: apply edits, show a report,
refuse a save or warn. Executing the decision stays with the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple

from blank_engine.cleanup.models import Edit, apply_edits
from blank_engine.classify.models import Match
from blank_engine.runtime import telemetry
from blank_engine.style.models import ActionKind, DefectKind

if TYPE_CHECKING:
    from .session import BlankEngine


@dataclass(frozen=True, slots=True)
class DefectReport:
    """Per-kind match counts over a whole buffer."""

    counts: Dict[DefectKind, int] = field(default_factory=dict)
    length: int = 0

    @classmethod
    def from_matches(
        cls, kinds: Iterable[DefectKind], matches: Iterable[Match], length: int
    ) -> "DefectReport":
        counts = {kind: 0 for kind in kinds}
        for match in matches:
            counts[match.kind] = counts.get(match.kind, 0) + 1
        return cls(counts=counts, length=length)

    @property
    def bogus(self) -> bool:
        return any(self.counts.values())

    def count(self, kind: DefectKind) -> int:
        return self.counts.get(kind, 0)

    def summary(self) -> str:
        found = [f"{kind.value}={n}" for kind, n in self.counts.items() if n]
        return ", ".join(found) if found else "clean"


@dataclass(frozen=True, slots=True)
class PolicyDecision:
    cleanup: bool = False
    edits: Tuple[Edit, ...] = ()
    report: Optional[DefectReport] = None
    abort: bool = False
    warnings: Tuple[str, ...] = ()


def _planned_cleanup(
    engine: "BlankEngine", warnings: List[str]
) -> Tuple[bool, Tuple[Edit, ...]]:
    if engine.source.is_modifiable():
        return True, tuple(engine.clean())
    if ActionKind.WARN_ON_READONLY in engine.actions:
        warnings.append(f"Can't clean blanks in read-only buffer '{engine.buffer_id}'")
    return False, ()


def evaluate_activation(engine: "BlankEngine") -> PolicyDecision:
    warnings: List[str] = []
    cleanup = False
    edits: Tuple[Edit, ...] = ()
    report: Optional[DefectReport] = None

    if ActionKind.CLEANUP_ON_ACTIVATE in engine.actions:
        cleanup, edits = _planned_cleanup(engine, warnings)
    if ActionKind.REPORT_ON_BOGUS_ON_ACTIVATE in engine.actions:
        candidate = engine.report()
        if candidate.bogus:
            report = candidate

    decision = PolicyDecision(
        cleanup=cleanup, edits=edits, report=report, warnings=tuple(warnings)
    )
    telemetry.record_event(
        "policy.activation",
        level="debug",
        data={"buffer": engine.buffer_id, "edits": len(edits), "bogus": bool(report)},
        logger_name="blank_engine.policy",
    )
    return decision


def evaluate_save(engine: "BlankEngine") -> PolicyDecision:
    """Decide what happens before the host writes the buffer.

    ``abort-save-on-bogus`` looks at the text as it would be after the
    planned cleanup, so a save that cleans everything is never refused.
    """

    warnings: List[str] = []
    cleanup = False
    edits: Tuple[Edit, ...] = ()
    report: Optional[DefectReport] = None
    abort = False

    if ActionKind.CLEANUP_ON_SAVE in engine.actions:
        cleanup, edits = _planned_cleanup(engine, warnings)
    if ActionKind.ABORT_SAVE_ON_BOGUS in engine.actions:
        text = engine.source.pull_text()
        report = engine.report(apply_edits(text, edits) if edits else text)
        abort = report.bogus

    decision = PolicyDecision(
        cleanup=cleanup,
        edits=edits,
        report=report,
        abort=abort,
        warnings=tuple(warnings),
    )
    telemetry.record_event(
        "policy.save",
        level="debug",
        data={"buffer": engine.buffer_id, "edits": len(edits), "abort": abort},
        logger_name="blank_engine.policy",
    )
    return decision


__all__ = ["DefectReport", "PolicyDecision", "evaluate_activation", "evaluate_save"]
