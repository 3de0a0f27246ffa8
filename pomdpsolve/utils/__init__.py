"""
Utility modules for the POMDP solver.
"""

from .logging_utils import setup_logger, get_logger
from .validation import validate_belief, validate_vector_set

__all__ = [
    "setup_logger",
    "get_logger",
    "validate_belief",
    "validate_vector_set",
]
