from .name_submission import NameSubmission, SubmitOutcome

__all__ = [
    "NameSubmission",
    "SubmitOutcome",
]
