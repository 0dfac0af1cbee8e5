class AnalysisError(Exception):
    """Raised when document analysis fails."""


class AnalysisValidationError(AnalysisError):
    """Raised when the analysis response does not have the expected shape."""


class AnalysisNetworkError(AnalysisError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
