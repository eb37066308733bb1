"""pygarage - Slot-based garage inventory and vehicle placement engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygarage")
except PackageNotFoundError:
    __version__ = "0+local"
from pygarage.config import GarageConfig
from pygarage.engine import (
    FeatureSyncPlan,
    SlotState,
    TargetClass,
    classify_target,
    plan_clear,
    plan_delete,
    plan_feature_sync,
    plan_insert,
    plan_move,
    plan_remarks,
    plan_replace,
    plan_swap,
)
from pygarage.exceptions import (
    BothEmptyNoopError,
    GarageConfigError,
    GarageDeleteError,
    GarageError,
    GarageNotFoundError,
    GarageSaveError,
    GarageValidationError,
    PersistenceError,
    RecordFormatError,
    SelfSwapNoopError,
    SlotIndexInvalidError,
    SlotOccupiedConflictError,
    SourceEmptyError,
    TargetEmptyError,
    TransferError,
    WorkflowBusyError,
    WorkflowError,
    WorkflowStateError,
)
from pygarage.manager import BulkDeleteResult, FeatureSyncResult, GarageManager
from pygarage.models import EMPTY_SLOT, Brand, CatalogItem, Garage, GarageDraft, SlotSnapshot
from pygarage.store import InventoryStore
from pygarage.workflow import (
    CatalogSource,
    Resolution,
    SlotSource,
    TransferIntent,
    TransferKind,
    TransferOutcome,
    TransferWorkflow,
    WorkflowState,
)

__all__ = [
    "__version__",
    "BothEmptyNoopError",
    "Brand",
    "BulkDeleteResult",
    "CatalogItem",
    "CatalogSource",
    "EMPTY_SLOT",
    "FeatureSyncPlan",
    "FeatureSyncResult",
    "Garage",
    "GarageConfig",
    "GarageConfigError",
    "GarageDeleteError",
    "GarageDraft",
    "GarageError",
    "GarageManager",
    "GarageNotFoundError",
    "GarageSaveError",
    "GarageValidationError",
    "InventoryStore",
    "PersistenceError",
    "RecordFormatError",
    "Resolution",
    "SelfSwapNoopError",
    "SlotIndexInvalidError",
    "SlotOccupiedConflictError",
    "SlotSnapshot",
    "SlotSource",
    "SlotState",
    "SourceEmptyError",
    "TargetClass",
    "TargetEmptyError",
    "TransferError",
    "TransferIntent",
    "TransferKind",
    "TransferOutcome",
    "TransferWorkflow",
    "WorkflowBusyError",
    "WorkflowError",
    "WorkflowState",
    "classify_target",
    "plan_clear",
    "plan_delete",
    "plan_feature_sync",
    "plan_insert",
    "plan_move",
    "plan_remarks",
    "plan_replace",
    "plan_swap",
]
