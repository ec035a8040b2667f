"""
Bar Bending Schedule

Modules:
- engine: per-bar calculation and schedule assembly
- verification: quality checks on calculated bars
"""

from .engine import (
    ShapeBar,
    CalculatedBar,
    MemberBars,
    Schedule,
    calculate_shape_bar,
    shape_bar_breakdown,
    calculate_component_bar,
    build_schedule,
)

from .verification import (
    Severity,
    QCCode,
    QCIssue,
    check_result_consistency,
    verify_component_result,
    verify_shape_result,
    verify_schedule,
    summarize_issues,
)
