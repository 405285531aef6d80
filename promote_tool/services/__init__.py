"""Service layer for promote-tool"""

from .config_service import ConfigService
from .promotion_service import PromotionOrchestrator
from .setup_service import SetupService
from .status_service import StatusService, TreeStatus

__all__ = [
    "ConfigService",
    "PromotionOrchestrator",
    "SetupService",
    "StatusService",
    "TreeStatus",
]
