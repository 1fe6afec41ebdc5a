"""Exceptions raised by the TRmorph stemming stage"""


class TRMorphError(Exception):
    """Base class for stemming stage errors"""


class UnknownAggregationError(TRMorphError, ValueError):
    """Aggregation policy is neither 'max' nor 'min'"""

    def __init__(self, policy):
        self.policy = policy
        super().__init__(f"Unknown aggregation strategy: {policy!r}. Valid options: max, min")


class AnalyzerConfigError(TRMorphError):
    """Analyzer command is missing or cannot be resolved"""
