"""Environment requirement models"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class RequirementStatus(Enum):
    """Outcome of a single requirement check"""
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


class RequirementCheck(Enum):
    """Checked items, in evaluation order"""
    TOOL = "tool"
    IDENTITY = "identity"
    WORKING_PATH = "working_path"
    PRODUCTION_PATH = "production_path"
    CREDENTIAL = "credential"
    REPOSITORY = "repository"


@dataclass(frozen=True)
class RequirementResult:
    """Result of one requirement check

    ``detail`` carries a machine-readable value for repairable results,
    such as the executable path found by discovery.
    """

    check: RequirementCheck
    name: str
    status: RequirementStatus
    message: str
    detail: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == RequirementStatus.PASS

    @property
    def failed(self) -> bool:
        return self.status == RequirementStatus.FAIL

    def __str__(self) -> str:
        icon = {
            RequirementStatus.PASS: "✓",
            RequirementStatus.FAIL: "✗",
            RequirementStatus.WARNING: "⚠",
        }[self.status]
        return f"{icon} {self.name}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "check": self.check.value,
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
        }


def all_passed(results: Iterable[RequirementResult]) -> bool:
    """True when every check passed outright"""
    return all(r.passed for r in results)


def failures(results: Iterable[RequirementResult]) -> List[RequirementResult]:
    """Failed checks only"""
    return [r for r in results if r.failed]


def find_result(results: Iterable[RequirementResult],
                check: RequirementCheck) -> Optional[RequirementResult]:
    """Result for a specific check, if it was evaluated"""
    for result in results:
        if result.check == check:
            return result
    return None
