"""
Component Bar Calculation
For RCC beams, columns, slabs and footings

Modules:
- members: member and bar description records
- classifier: bar-type label normalization and pattern matching
- anchorage: development and lap length tables
- measurements: measurement segments from member geometry
- deductions: bend counts, deductions and cut lengths
- bar_count: member and bar counts from spacing
"""

from .members import (
    EdgeValues,
    Segments,
    Member,
    BarDescription,
)

from .classifier import (
    PatternCategory,
    BarLayer,
    BarClassification,
    normalize_label,
    classify_bar_type,
)

from .anchorage import (
    development_length,
    lap_length,
)

from .measurements import (
    resolve_axis,
    resolve_measurements,
)

from .deductions import (
    CutLengthResult,
    infer_bend_count,
    deduction_amount,
    calculate_cut_length,
)

from .bar_count import (
    BarCountResult,
    count_span,
    resolve_bar_count,
)
