"""
Interview engine errors. The API maps each class to one status code (see worldforge.api.interview).
Malformed names and unknown topics inside a reply are answered with a re-prompt instead of raising.
"""


class InterviewError(Exception):
    """Base class for interview engine errors."""


class InterviewNotFoundError(InterviewError):
    """No interview exists for the user (or the id does not match)."""


class InterviewStateError(InterviewError):
    """Operation not allowed in the interview's current phase."""


class UnknownTopicError(InterviewError):
    def __init__(self, topic_name: str):
        super().__init__(f"Unknown topic: {topic_name}")
        self.topic_name = topic_name


class InvalidAnswerError(InterviewError):
    """Answer rejected before it was stored; str(exc) is the user-facing message."""


class InvalidWorldNameError(InvalidAnswerError):
    """World name failed the format check."""


class WorldNameTakenError(InterviewError):
    def __init__(self, message: str, suggestions: list[str] | None = None):
        super().__init__(message)
        self.suggestions = suggestions or []


class UpstreamError(InterviewError):
    """Text generation failed. Nothing was persisted for the turn."""


class ExtractionError(UpstreamError):
    """Extraction response could not be parsed into a configuration."""


class ConfigurationInvalidError(InterviewError):
    """Extracted configuration failed required-field or enumeration checks."""

    def __init__(self, issues):
        self.issues = list(issues)
        summary = "; ".join(f"{i.field}: {i.message}" for i in self.issues)
        super().__init__(f"World configuration is invalid: {summary}")
