from .auth import User, USER_STATUS_ACTIVE, USER_STATUS_INACTIVE
from .agreements import Agreement, Agent
from .activity import ActivityLogEntry
from .settings import SystemSettings, SETTINGS_ROW_ID

__all__ = [
    'User', 'USER_STATUS_ACTIVE', 'USER_STATUS_INACTIVE',
    'Agreement', 'Agent',
    'ActivityLogEntry',
    'SystemSettings', 'SETTINGS_ROW_ID',
]
