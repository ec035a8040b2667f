"""
Steel Weights and Aggregation
"""

from .weights import (
    UNIT_WEIGHT_DIVISOR,
    unit_weight,
    total_length_m,
    bar_weight,
)

from .aggregator import (
    GroupSummary,
    GrandTotal,
    ScheduleSummary,
    group_bars,
    grand_total,
    summarize,
    filter_by_member_type,
    partition_by_member_type,
)
