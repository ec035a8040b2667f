"""
RebarCalc - Bar Bending Schedule Engine
Cut lengths, bar counts and steel weights for RCC members.
"""

__version__ = "1.0.0"
__author__ = "RebarCalc"

from pathlib import Path

# Package paths
PACKAGE_DIR = Path(__file__).parent
RULES_DIR = PACKAGE_DIR / "rules"
