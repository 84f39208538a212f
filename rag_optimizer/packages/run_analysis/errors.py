"""
Errors raised by the run analysis core.
"""


class RunAnalysisError(Exception):
    """Base error for run analysis failures."""


class EmptyInputError(RunAnalysisError, ValueError):
    """Raised when an operation that needs at least one element receives none."""


class InvalidParameterError(RunAnalysisError, ValueError):
    """Raised when grouping by a parameter the run schema does not define."""

    def __init__(self, parameter: str, known: list):
        self.parameter = parameter
        self.known = known
        super().__init__(f"Unknown run parameter: '{parameter}'. Known parameters: {known}")
