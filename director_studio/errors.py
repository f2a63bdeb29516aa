"""Exception hierarchy for the analysis-and-direction pipeline."""


class DirectorError(Exception):
    """Base class for every pipeline error."""


class TransportError(DirectorError):
    """An external model could not be reached, timed out, or answered with an error status."""


class ValidationError(DirectorError):
    """A payload or caller input does not match the expected structure or ranges."""


class NotFoundError(DirectorError):
    """A referenced scene or job id is unknown."""


class RefinementLimitError(ValidationError):
    """A scene has used up its refinement attempts."""


class AnalysisError(DirectorError):
    """The Eye could not produce a RawAnalysis.

    ``reason`` is ``"transport"`` or ``"validation"``; the original error is
    chained as ``__cause__``.
    """

    def __init__(self, message: str, reason: str = "validation"):
        super().__init__(message)
        self.reason = reason
