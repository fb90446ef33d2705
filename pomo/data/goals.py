"""
Goal Store — persists the single GoalConfig document as JSON.

A missing file is the same as "no goals set". Every save rewrites the whole
document; there is no history.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import goals_path
from ..errors import StorageError
from .models import GoalConfig

logger = logging.getLogger(__name__)


class GoalStore:
    """Reads and writes goals.json in the data directory."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or goals_path()

    def load(self) -> GoalConfig:
        if not self.path.exists():
            return GoalConfig(enabled=False)
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return GoalConfig.from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise StorageError(f"Could not load goal config from {self.path}: {e}") from e

    def save(self, config: GoalConfig) -> GoalConfig:
        now = datetime.now().astimezone()
        config.updated_at = now
        if config.created_at is None:
            config.created_at = now
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2)
        except OSError as e:
            raise StorageError(f"Could not save goal config to {self.path}: {e}") from e
        logger.info("Goal config saved (daily=%d, weekly=%d, enabled=%s)",
                    config.daily_goal, config.weekly_goal, config.enabled)
        return config

    def clear(self) -> GoalConfig:
        return self.save(GoalConfig(enabled=False))
