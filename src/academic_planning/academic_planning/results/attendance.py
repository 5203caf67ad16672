"""Attendance rate derived from presence and absence counts."""
from __future__ import annotations


def attendance_percentage(presences: int, absences: int) -> float:
    """``presences / (presences + absences) * 100``; 0 when nothing was recorded."""
    total = int(presences) + int(absences)
    if total <= 0:
        return 0.0
    return (int(presences) / total) * 100
