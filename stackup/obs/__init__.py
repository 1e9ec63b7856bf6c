"""
Observability helpers for stackup deployments.

Provides classification of build failures from captured output.
"""

from .classify import FailureClassifier, FailureRule, classify_build_output, build_error_from_output

__all__ = [
    "FailureClassifier",
    "FailureRule",
    "classify_build_output",
    "build_error_from_output",
]
