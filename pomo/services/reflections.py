"""
Reflection Catalog — built-in prompts shown at the start of each break.

Short breaks get quick check-ins; long breaks get bigger-picture questions.
The random source is injected so a caller can pin the choice.
"""

from __future__ import annotations

import random
from typing import List, Optional

SHORT_BREAK = "short"
LONG_BREAK = "long"

SHORT_BREAK_REFLECTIONS: List[str] = [
    "What did you accomplish in this session?",
    "What challenged you most?",
    "Is your current approach working?",
    "What will you focus on next?",
    "Are you working on what matters?",
    "What can you simplify?",
    "Do you need to adjust your approach?",
    "What did you learn just now?",
]

LONG_BREAK_REFLECTIONS: List[str] = [
    "What progress have you made today?",
    "Are you solving the right problem?",
    "What assumptions should you question?",
    "What would you do differently?",
    "What's the essential work remaining?",
    "How can you approach this more simply?",
    "What have you learned in this cycle?",
    "Is there a better way?",
]


class ReflectionCatalog:
    """Picks a reflection prompt for a break type."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def prompts_for(self, break_type: str) -> List[str]:
        if break_type == LONG_BREAK:
            return LONG_BREAK_REFLECTIONS
        return SHORT_BREAK_REFLECTIONS

    def pick(self, break_type: str) -> str:
        return self.rng.choice(self.prompts_for(break_type))
