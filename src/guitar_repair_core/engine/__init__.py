"""
Guitar Repair Engine Module
Case grouping, similar-case search and rule-based estimation
"""

from .case_grouping import group_cases
from .case_search import search_similar_cases
from .rule_estimator import Condition, Specs, calculate_estimate

__all__ = [
    "Condition",
    "Specs",
    "calculate_estimate",
    "group_cases",
    "search_similar_cases",
]
