"""Per-feature services that fetch rows, mutate rows and expose view state."""

from .calendar import CalendarService
from .categories import CategoryService
from .chat import ChatService
from .invites import InviteService
from .notifications import NotificationFeed
from .partners import PartnerService
from .progress import ProgressService
from .settings import SettingsService
from .tasks import TaskService
from .teams import TeamService
from .workspaces import WorkspaceService

__all__ = [
    "CalendarService",
    "CategoryService",
    "ChatService",
    "InviteService",
    "NotificationFeed",
    "PartnerService",
    "ProgressService",
    "SettingsService",
    "TaskService",
    "TeamService",
    "WorkspaceService",
]
