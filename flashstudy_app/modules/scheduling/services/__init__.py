from .scheduler_service import SchedulerService
from .settings_service import SchedulerSettingsService

__all__ = ["SchedulerService", "SchedulerSettingsService"]
