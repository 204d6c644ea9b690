"""
Error taxonomy shared by the validation layer, repositories and API.

Not-found is deliberately absent: lookups return None and update/delete
operations return False for unknown ids.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union


@dataclass(frozen=True)
class Issue:
    """A single validation problem addressed to one input field."""
    path: Tuple[Union[str, int], ...]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": list(self.path), "message": self.message}


class JobBoardError(Exception):
    """Base class for errors raised by the core"""
    pass


class ValidationFailure(JobBoardError):
    """Raised when a payload fails shape or constraint checks"""

    def __init__(self, issues: List[Issue]):
        self.issues = list(issues)
        summary = "; ".join(
            f"{'.'.join(str(p) for p in issue.path) or '<root>'}: {issue.message}"
            for issue in self.issues
        )
        super().__init__(f"Validation failed: {summary}")


class Conflict(JobBoardError):
    """Raised when a uniqueness constraint is violated"""
    pass


class StorageFailure(JobBoardError):
    """Raised for any other persistence error; carries detail for logging"""

    def __init__(self, message: str, detail: str = ""):
        self.detail = detail
        super().__init__(message)
