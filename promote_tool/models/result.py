"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .change import ChangeSet
from .requirement import RequirementResult


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    NOTHING_TO_PROMOTE = "nothing_to_promote"
    CANCELLED = "cancelled"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"


class PromotionPhase(Enum):
    """Promotion phases, in execution order"""
    VALIDATE = "validate"
    REPAIR = "repair"
    CONFIGURE_IDENTITY = "configure_identity"
    SYNC_WORKING_BRANCH = "sync_working_branch"
    COMPUTE_DIFF = "compute_diff"
    AWAIT_CONFIRMATION = "await_confirmation"
    MERGE_TO_PRODUCTION = "merge_to_production"
    RESYNC_LOCAL_PRODUCTION = "resync_local_production"
    EMIT_REPORT = "emit_report"
    DONE = "done"

    @property
    def index(self) -> int:
        return list(PromotionPhase).index(self)


class ConfirmationDecision(Enum):
    """Caller decision at the confirmation point"""
    APPROVE = "approve"
    CANCEL = "cancel"


@dataclass
class ErrorDetail:
    """Detailed error information"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class Result:
    """Base result class"""

    status: OperationStatus
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        """Check if operation failed"""
        return self.status == OperationStatus.FAILED

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def add_error(self, code: str, message: str, **context) -> None:
        """Add an error"""
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def add_warning(self, message: str) -> None:
        """Add a warning"""
        self.warnings.append(message)

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        """Mark operation as complete"""
        self.end_time = datetime.now()
        if status:
            self.status = status


@dataclass
class PromotionOutcome(Result):
    """Terminal result of one promotion run

    Failed outcomes carry the phase that failed and the error kind, plus the
    diff text computed so far so that the run can be resumed.
    """

    phase: PromotionPhase = PromotionPhase.VALIDATE
    error_kind: Optional[Any] = None
    report_id: Optional[str] = None
    change_set: Optional[ChangeSet] = None
    diff_text: Optional[str] = None
    merge_request_url: Optional[str] = None
    requirements: List[RequirementResult] = field(default_factory=list)
    completed_phases: List[PromotionPhase] = field(default_factory=list)

    @property
    def is_neutral(self) -> bool:
        """Outcomes that are neither success nor failure"""
        return self.status in (OperationStatus.NOTHING_TO_PROMOTE, OperationStatus.CANCELLED)

    @property
    def is_resumable(self) -> bool:
        return self.is_failed and self.phase.index > PromotionPhase.CONFIGURE_IDENTITY.index

    def mark_phase(self, phase: PromotionPhase) -> None:
        """Record that a phase completed"""
        self.completed_phases.append(phase)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "status": self.status.value,
            "phase": self.phase.value,
            "message": self.message,
            "completed_phases": [p.value for p in self.completed_phases],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "duration": self.duration
        }

        if self.error_kind is not None:
            data["error_kind"] = self.error_kind.value
        if self.report_id:
            data["report_id"] = self.report_id
        if self.merge_request_url:
            data["merge_request_url"] = self.merge_request_url
        if self.change_set is not None:
            data["changes"] = self.change_set.counts()
        if self.requirements:
            data["requirements"] = [r.to_dict() for r in self.requirements]

        return data


@dataclass
class SyncResult:
    """Counters produced by one directory synchronization"""

    copied: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    created_dirs: List[str] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not (self.copied or self.deleted or self.created_dirs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "copied": len(self.copied),
            "deleted": len(self.deleted),
            "created_dirs": len(self.created_dirs),
        }


@dataclass
class SetupResult(Result):
    """Result of repository setup"""

    steps: List[str] = field(default_factory=list)

    def step(self, description: str) -> None:
        self.steps.append(description)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "steps": self.steps,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "duration": self.duration
        }


@dataclass
class MirrorResult(Result):
    """Result of copying the working tree onto the production tree"""

    sync: SyncResult = field(default_factory=SyncResult)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "sync": self.sync.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
            "duration": self.duration
        }
