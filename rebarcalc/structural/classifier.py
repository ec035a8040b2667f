"""
Bar-Type Classifier
Normalizes free-form bar-type labels and maps them to a small closed set of
computation patterns.

Labels are cleaned in a fixed order:
1. malformed direction markers collapsed: "( X - X )" -> "(X-X)"
2. known misspellings and word-order variants corrected
3. matched against per-member-type pattern predicates, first match wins

Labels that match nothing fall through to GENERIC. This is not an error:
unknown custom labels keep the schedule usable and are flagged later.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Optional, Callable, Dict, Any

from ..models.types import MemberType, Direction

logger = logging.getLogger(__name__)


class PatternCategory(str, Enum):
    """Canonical computation patterns."""
    # Slab
    FULL_SPAN = "full_span"
    DISTRIBUTION = "distribution"
    COMBINED = "combined_top_bottom"
    U_SHAPE = "u_shape"
    EXTRA_TOP = "extra_top"
    EXTRA_BOTTOM = "extra_bottom"
    CHAIR = "chair"
    # Beam
    BEAM_TOP = "beam_top"
    BEAM_BOTTOM = "beam_bottom"
    BEAM_SIDE_FACE = "beam_side_face"
    BEAM_STIRRUP = "beam_stirrup"
    BEAM_EXTRA = "beam_extra"
    # Column
    COLUMN_MAIN = "column_main"
    COLUMN_TIE = "column_tie"
    # Footing
    FOOTING_MAIN = "footing_main"
    FOOTING_DISTRIBUTION = "footing_distribution"
    FOOTING_DOWEL = "footing_dowel"
    # Fallback
    GENERIC = "generic"


class BarLayer(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    BOTH = "both"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BarClassification:
    """Result of classifying one label."""
    label: str
    normalized: str
    pattern: PatternCategory
    layer: BarLayer
    direction_marker: Optional[Direction] = None

    @property
    def is_generic(self) -> bool:
        return self.pattern == PatternCategory.GENERIC

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'normalized': self.normalized,
            'pattern': self.pattern.value,
            'layer': self.layer.value,
            'direction_marker': self.direction_marker.value if self.direction_marker else None,
        }


# Known misspellings / word-order variants -> canonical phrasing
LABEL_CORRECTIONS: List[Tuple[str, str]] = [
    (r'\bTop Bar Main\b', 'Top Main Bar'),
    (r'\bBottom Bar Main\b', 'Bottom Main Bar'),
    (r'\bMainBar\b', 'Main Bar'),
    (r'\bDistBar\b', 'Dist Bar'),
    (r'\bStirrup\b', 'Stirrups'),
    (r'\bDowel Bar\b', 'Dowel Bars'),
    (r'\bDistribution\b', 'Dist'),
]

_X_MARKER = re.compile(r'\(\s*X\s*-\s*X\s*\)', re.IGNORECASE)
_Y_MARKER = re.compile(r'\(\s*Y\s*-\s*Y\s*\)', re.IGNORECASE)


def normalize_label(label: str) -> str:
    """
    Apply the direction-marker and spelling fixes to a label.

    Args:
        label: Raw bar-type label

    Returns:
        Normalized label (case preserved apart from the fixes)
    """
    text = _X_MARKER.sub('(X-X)', label or '')
    text = _Y_MARKER.sub('(Y-Y)', text)
    text = re.sub(r'\s+', ' ', text).strip()
    for pattern, replacement in LABEL_CORRECTIONS:
        text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)
    return text


def direction_marker(normalized: str) -> Optional[Direction]:
    """Direction pair found in a normalized label, if any."""
    lowered = normalized.lower()
    if '(x-x)' in lowered:
        return Direction.X
    if '(y-y)' in lowered:
        return Direction.Y
    return None


def bar_layer(normalized: str) -> BarLayer:
    lowered = normalized.lower()
    has_top = 'top' in lowered
    has_bottom = 'bottom' in lowered
    if has_top and has_bottom:
        return BarLayer.BOTH
    if has_top:
        return BarLayer.TOP
    if has_bottom:
        return BarLayer.BOTTOM
    return BarLayer.UNKNOWN


def _is_combined(text: str) -> bool:
    return ('bottom & top' in text or 'top & bottom' in text
            or 'bottom and top' in text or 'top and bottom' in text)


def _is_extra(text: str, layer: str) -> bool:
    return 'extra' in text and layer in text


# Predicates take the lower-cased normalized label
SLAB_RULES: List[Tuple[PatternCategory, Callable[[str], bool]]] = [
    (PatternCategory.FULL_SPAN, lambda t: 'full span' in t),
    (PatternCategory.DISTRIBUTION, lambda t: 'dist' in t),
    (PatternCategory.COMBINED, _is_combined),
    (PatternCategory.EXTRA_TOP, lambda t: _is_extra(t, 'top')),
    (PatternCategory.EXTRA_BOTTOM, lambda t: _is_extra(t, 'bottom')),
    (PatternCategory.CHAIR, lambda t: 'chair' in t),
    (PatternCategory.U_SHAPE, lambda t: 'top' in t or 'bottom' in t),
]

BEAM_RULES: List[Tuple[PatternCategory, Callable[[str], bool]]] = [
    (PatternCategory.BEAM_STIRRUP, lambda t: 'stirrups' in t or 'ring' in t),
    (PatternCategory.BEAM_SIDE_FACE, lambda t: 'side face' in t),
    (PatternCategory.BEAM_EXTRA, lambda t: 'extra' in t),
    (PatternCategory.BEAM_TOP, lambda t: 'top' in t),
    (PatternCategory.BEAM_BOTTOM, lambda t: 'bottom' in t),
]

COLUMN_RULES: List[Tuple[PatternCategory, Callable[[str], bool]]] = [
    (PatternCategory.COLUMN_TIE, lambda t: 'tie' in t),
    (PatternCategory.COLUMN_MAIN, lambda t: 'main' in t or 'vertical' in t),
]

FOOTING_RULES: List[Tuple[PatternCategory, Callable[[str], bool]]] = [
    (PatternCategory.FOOTING_MAIN, lambda t: '(l)' in t or ('main' in t and 'dist' not in t)),
    (PatternCategory.FOOTING_DISTRIBUTION, lambda t: '(b)' in t or 'dist' in t),
    (PatternCategory.FOOTING_DOWEL, lambda t: 'dowel' in t),
]

RULES_BY_MEMBER = {
    MemberType.SLAB: SLAB_RULES,
    MemberType.BEAM: BEAM_RULES,
    MemberType.COLUMN: COLUMN_RULES,
    MemberType.FOOTING: FOOTING_RULES,
}


def classify_bar_type(label: str, member_type: MemberType) -> BarClassification:
    """
    Classify a bar-type label for a member type.

    Args:
        label: Free-form bar-type label
        member_type: Owning member type

    Returns:
        BarClassification (GENERIC when nothing matches)
    """
    normalized = normalize_label(label)
    text = normalized.lower()

    pattern = PatternCategory.GENERIC
    for category, predicate in RULES_BY_MEMBER[MemberType(member_type)]:
        if predicate(text):
            pattern = category
            break

    if pattern == PatternCategory.GENERIC:
        logger.warning(f"Unrecognised bar type '{label}' for {MemberType(member_type).value}, "
                       f"using generic measurement")

    return BarClassification(
        label=label,
        normalized=normalized,
        pattern=pattern,
        layer=bar_layer(normalized),
        direction_marker=direction_marker(normalized),
    )
