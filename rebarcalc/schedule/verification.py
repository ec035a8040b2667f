"""
Schedule Verification
Quality checks on calculated bars: re-derivation of component results,
breakdown equivalence for canonical shapes, and low-confidence flags.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Any

from ..shapes.breakdown import BREAKDOWN_TOLERANCE_MM, verify_breakdown
from ..structural.members import Member, BarDescription
from ..structural.deductions import CutLengthRule, round_up_to_multiple
from .engine import (
    CalculatedBar,
    ShapeBar,
    MemberBars,
    Schedule,
    calculate_component_bar,
    shape_bar_breakdown,
)

logger = logging.getLogger(__name__)

LENGTH_TOLERANCE_MM = 0.1
WEIGHT_TOLERANCE_KG = 0.001


class Severity(Enum):
    """Issue severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class QCCode(Enum):
    """Standardized QC codes."""
    GENERIC_PATTERN = "V001"
    ZERO_LENGTH = "V002"
    RESULT_MISMATCH = "V003"
    CUT_LENGTH_MISMATCH = "V004"
    WEIGHT_MISMATCH = "V005"
    BREAKDOWN_MISMATCH = "V006"
    NEGATIVE_CUT_LENGTH = "V007"


@dataclass
class QCIssue:
    """A single QC issue."""
    code: QCCode
    severity: Severity
    message: str
    bar_id: Optional[str] = None
    member_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code.value,
            'severity': self.severity.value,
            'message': self.message,
            'bar_id': self.bar_id,
            'member_id': self.member_id,
            'details': self.details,
            'suggestion': self.suggestion,
        }


def check_result_consistency(result: CalculatedBar) -> List[QCIssue]:
    """
    Internal arithmetic checks on one result.

    cut = total - deduction (or the rounded additive rule), and
    weight = length x unit weight.
    """
    issues = []

    if result.segments is not None:
        if result.cut_rule == CutLengthRule.ROUND_UP_ADDITIVE:
            expected = round_up_to_multiple(result.total_measurement + result.deduction_amount)
        else:
            expected = result.total_measurement - result.deduction_amount
        if abs(expected - result.cut_length) > LENGTH_TOLERANCE_MM:
            issues.append(QCIssue(
                code=QCCode.CUT_LENGTH_MISMATCH,
                severity=Severity.ERROR,
                message=f"Cut length {result.cut_length:.1f} does not match {expected:.1f}",
                bar_id=result.id,
                member_id=result.member_id,
                details={'expected': expected, 'actual': result.cut_length},
            ))

    expected_weight = result.total_length_m * result.unit_weight
    if abs(expected_weight - result.total_weight) > WEIGHT_TOLERANCE_KG:
        issues.append(QCIssue(
            code=QCCode.WEIGHT_MISMATCH,
            severity=Severity.ERROR,
            message=f"Weight {result.total_weight:.3f} kg does not match length x unit weight",
            bar_id=result.id,
            member_id=result.member_id,
            details={'expected': expected_weight, 'actual': result.total_weight},
        ))

    if result.cut_length < 0:
        issues.append(QCIssue(
            code=QCCode.NEGATIVE_CUT_LENGTH,
            severity=Severity.ERROR,
            message=f"Negative cut length {result.cut_length:.1f} mm",
            bar_id=result.id,
            member_id=result.member_id,
            suggestion="Check segment lengths and bend count",
        ))
    elif result.cut_length == 0 or result.total_length_m == 0:
        issues.append(QCIssue(
            code=QCCode.ZERO_LENGTH,
            severity=Severity.WARNING,
            message="Bar has zero length",
            bar_id=result.id,
            member_id=result.member_id,
            suggestion="Check member spans and bar spacing",
        ))

    return issues


def verify_component_result(member: Member, bar: BarDescription, result: CalculatedBar,
                            config) -> List[QCIssue]:
    """
    Re-derive a component result from its inputs and report discrepancies.

    Args:
        member: Owning member
        bar: Bar description
        result: Result to verify
        config: Applied project configuration

    Returns:
        List of QCIssue (empty when the result checks out)
    """
    issues = check_result_consistency(result)
    fresh = calculate_component_bar(member, bar, config)

    if (abs(fresh.cut_length - result.cut_length) > LENGTH_TOLERANCE_MM
            or fresh.total_bars != result.total_bars):
        issues.append(QCIssue(
            code=QCCode.RESULT_MISMATCH,
            severity=Severity.ERROR,
            message="Result differs from a fresh calculation of the same inputs",
            bar_id=bar.id,
            member_id=member.id,
            details={
                'expected_cut_length': fresh.cut_length,
                'actual_cut_length': result.cut_length,
                'expected_total_bars': fresh.total_bars,
                'actual_total_bars': result.total_bars,
            },
            suggestion="Recalculate the schedule",
        ))

    if fresh.low_confidence:
        issues.append(QCIssue(
            code=QCCode.GENERIC_PATTERN,
            severity=Severity.WARNING,
            message=f"Bar type '{bar.bar_type}' not recognised, generic measurement used",
            bar_id=bar.id,
            member_id=member.id,
            suggestion="Use a standard bar type label or enter segments manually",
        ))

    return issues


def verify_shape_result(bar: ShapeBar, result: CalculatedBar, config) -> List[QCIssue]:
    """Check a canonical-shape result against its step breakdown."""
    issues = check_result_consistency(result)
    breakdown = shape_bar_breakdown(bar, config)

    if (not verify_breakdown(breakdown)
            or abs(breakdown.step_total - result.cut_length) > BREAKDOWN_TOLERANCE_MM):
        issues.append(QCIssue(
            code=QCCode.BREAKDOWN_MISMATCH,
            severity=Severity.ERROR,
            message=f"Breakdown sums to {breakdown.step_total:.1f}, result is {result.cut_length:.1f}",
            bar_id=bar.id,
            details={'step_total': breakdown.step_total, 'cut_length': result.cut_length},
        ))

    return issues


def verify_schedule(schedule: Schedule, config, shape_bars: Optional[List[ShapeBar]] = None,
                    members: Optional[List[MemberBars]] = None) -> List[QCIssue]:
    """
    Run the QC checks over every bar of a computed schedule.

    Args:
        schedule: Schedule built from the same inputs
        config: Applied project configuration
        shape_bars: Canonical-shape bars
        members: Members with their component bars

    Returns:
        All QCIssues, in schedule order
    """
    issues = []

    for bar in shape_bars or []:
        result = schedule.find(bar.id)
        if result is not None:
            issues.extend(verify_shape_result(bar, result, config))

    for entry in members or []:
        for bar in entry.bars:
            result = schedule.find(bar.id)
            if result is not None:
                issues.extend(verify_component_result(entry.member, bar, result, config))

    counts = summarize_issues(issues)
    if counts['error']:
        logger.warning(f"QC: {counts['error']} errors, {counts['warning']} warnings")
    return issues


def summarize_issues(issues: List[QCIssue]) -> Dict[str, int]:
    counts = {s.value: 0 for s in Severity}
    for issue in issues:
        counts[issue.severity.value] += 1
    return counts
