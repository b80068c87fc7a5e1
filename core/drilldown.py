from __future__ import annotations

from typing import List, Optional, Sequence

from core.records import Person


def toggle_topic(current: Optional[str], clicked: str) -> Optional[str]:
    """Clicking the active topic clears it; any other topic becomes active."""
    return None if current == clicked else clicked


def drill_down(people: Sequence[Person], topic: Optional[str]) -> List[Person]:
    if not topic:
        return list(people)
    return [p for p in people if topic in p.topics]
