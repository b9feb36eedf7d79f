# Work order wizard
from .draft import OrderDraft, STEP_NAMES
from .wizard import WorkOrderWizard, StepResult, PendingDraftChoice

__all__ = [
    "OrderDraft", "STEP_NAMES",
    "WorkOrderWizard", "StepResult", "PendingDraftChoice",
]
