from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles carried in the session identity."""

    ADMIN = "ADMIN"
    COORDINATOR = "COORDINATOR"
    TEACHER = "TEACHER"


class ProgramStatus(str, Enum):
    PLANIFIE = "PLANIFIE"
    EN_COURS = "EN_COURS"
    TERMINE = "TERMINE"
    ANNULE = "ANNULE"
