"""
Planning Algorithms

This module provides the role-based planning algorithm for card processing orders.

Components:
- priority: delay code ranks and labels
- workload: per-employee workload tracking
- time_slots: start time placement within working hours
- stage_scheduler: greedy least-loaded assignment for one stage
- planner: runs every stage and reports the outcome
"""

from gradingbot.algorithms.models import (
    Stage,
    WorkItem,
    EmployeeProfile,
    ScheduleEntry,
    PLANNING_STAGE_ORDER
)

from gradingbot.algorithms.priority import (
    get_priority_rank,
    get_delay_label,
    normalize_delay_code,
    is_valid_delay_code,
    priority_sort_key
)

from gradingbot.algorithms.workload import WorkloadState, build_workloads
from gradingbot.algorithms.time_slots import TimeSlotPlanner, WorkdayConfig

from gradingbot.algorithms.stage_scheduler import (
    StageAssignmentEngine,
    StageResult,
    PerCardDuration,
    FixedDuration,
    PlanningError,
    StageConfigurationError
)

from gradingbot.algorithms.planner import PlanningOrchestrator, PlanningReport

__all__ = [
    # Models
    'Stage',
    'WorkItem',
    'EmployeeProfile',
    'ScheduleEntry',
    'PLANNING_STAGE_ORDER',
    # Priority
    'get_priority_rank',
    'get_delay_label',
    'normalize_delay_code',
    'is_valid_delay_code',
    'priority_sort_key',
    # Workload and time slots
    'WorkloadState',
    'build_workloads',
    'TimeSlotPlanner',
    'WorkdayConfig',
    # Engine
    'StageAssignmentEngine',
    'StageResult',
    'PerCardDuration',
    'FixedDuration',
    'PlanningError',
    'StageConfigurationError',
    # Orchestrator
    'PlanningOrchestrator',
    'PlanningReport',
]
