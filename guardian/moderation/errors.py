"""
Moderation error taxonomy

Every error here is recoverable at the submission boundary: the pipeline
reports it as a user notification and returns to idle.
"""


class ModerationError(Exception):
    """Base class for all moderation pipeline errors"""

    title = "Moderation Error"


class InvalidInputError(ModerationError):
    """Submitted URL is empty or whitespace-only"""

    title = "Invalid URL"


class PipelineBusyError(ModerationError):
    """A submission arrived while another one is still running"""

    title = "Analysis In Progress"


class ClassificationError(ModerationError):
    """Base for classifier failures that abort the in-flight submission"""

    title = "Analysis Failed"


class ClassificationTimeoutError(ClassificationError):
    """Classifier did not answer before its deadline"""

    title = "Analysis Timed Out"


class ClassificationFailedError(ClassificationError):
    """Classifier raised or produced an inconsistent verdict"""


class ClassificationCancelledError(ClassificationFailedError):
    """Classification was cancelled through its cancellation token"""

    title = "Analysis Cancelled"


class StageFailedError(ModerationError):
    """A pipeline stage raised and aborted the sequence"""

    title = "Analysis Failed"

    def __init__(self, stage_index: int, stage_name: str, cause: Exception):
        super().__init__(f"Stage {stage_index + 1} ({stage_name}) failed: {cause}")
        self.stage_index = stage_index
        self.stage_name = stage_name
        self.cause = cause
