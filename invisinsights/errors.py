class InvisInsightsError(Exception):
    # Base class for domain errors (intended, meaningful failures).
    pass


class SchemaValidationError(InvisInsightsError):
    # Raised when a survey config or question schema fails required-field or type rules.
    def __init__(self, message: str, problems=None):
        super().__init__(message)
        self.problems = list(problems or [])


class MappingError(InvisInsightsError):
    # Raised when auto-discovery cannot find usable pages in a survey definition.
    pass


class EncodingError(InvisInsightsError):
    # Raised when a validated schema lacks a concrete identifier at synthesis time.
    pass


class ConnectError(InvisInsightsError):
    # Raised when a survey cannot be associated with a project (unknown survey, no collectors).
    pass


class AnalysisError(InvisInsightsError):
    # Raised when the reasoning service returns output that cannot be used.
    pass


class UpstreamError(InvisInsightsError):
    # Raised for failed calls to the survey platform.
    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
