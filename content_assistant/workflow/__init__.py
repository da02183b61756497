"""
Workflow module.

The idea → draft → publish state machine and its single-flight gate.
"""

from content_assistant.workflow.gate import OperationGate, OperationInProgress, OperationKind
from content_assistant.workflow.controller import (
    OperationResult,
    WorkflowController,
    WorkflowState,
    create_controller,
    create_trend_source,
)

__all__ = [
    "OperationGate",
    "OperationInProgress",
    "OperationKind",
    "OperationResult",
    "WorkflowController",
    "WorkflowState",
    "create_controller",
    "create_trend_source",
]
