"""
Guitar Repair Core Package
Repair case records, historical case search and rule-based estimation
"""

__version__ = "0.1.0"
__author__ = "Repair Desk Development Team"

from . import engine
from . import infra

__all__ = ["engine", "infra"]
