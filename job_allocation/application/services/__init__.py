"""
Application services package.
"""

from .action_guard import ActionGuard
from .allocation_board import AllocationBoard, AvailableJobsBoard, BoardView
from .allocation_coordinator import AllocationCoordinator
from .capacity_model import CapacityModel
from .completion_form import CompletionForm, CompletionStage
from .job_state_machine import JobStateMachine, TransitionPlan

__all__ = [
    "ActionGuard",
    "AllocationBoard",
    "AllocationCoordinator",
    "AvailableJobsBoard",
    "BoardView",
    "CapacityModel",
    "CompletionForm",
    "CompletionStage",
    "JobStateMachine",
    "TransitionPlan",
]
