# Jobs Package - Scheduled background tasks
from .showroom_followup import ShowroomFollowupScheduler, collect_overdue, start_scheduler, stop_scheduler

__all__ = ["ShowroomFollowupScheduler", "collect_overdue", "start_scheduler", "stop_scheduler"]
