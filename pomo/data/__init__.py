from .database import Database
from .goals import GoalStore
from .models import GoalConfig, SessionRecord
from .repository import Repository

__all__ = ["Database", "GoalStore", "GoalConfig", "SessionRecord", "Repository"]
