"""
All data models: dataclasses for internal state, Pydantic models for the wire and pattern files.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


# --- Internal state dataclasses ---

@dataclass(frozen=True)
class Color:
    id: int
    name: str
    red: int
    green: int
    blue: int

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)


Palette = Dict[int, Color]


@dataclass(frozen=True)
class PatternPixel:
    dx: int
    dy: int
    color_id: int


@dataclass(frozen=True)
class PatternSpec:
    pattern: Tuple[PatternPixel, ...]
    origin_x: int
    origin_y: int
    priority: int = 0
    name: str = ""


@dataclass(frozen=True)
class Correction:
    """One board cell that must be repainted: absolute coordinates, desired color."""
    x: int
    y: int
    color_id: int


class PlacementOutcome(str, Enum):
    SUCCESS = "success"
    NEEDS_REFRESH = "needs_refresh"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclass
class PlacementResponse:
    """A classified /api/set response."""
    outcome: PlacementOutcome
    status_code: int
    timers: List[str] = field(default_factory=list)
    message: str = ""
    token: Optional[str] = None
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class PlacementReport:
    placed: bool
    cooldown: Optional[timedelta]
    state: PlacementOutcome
    failures: int = 0
    refreshes: int = 0


@dataclass(frozen=True)
class BatchResult:
    placed: int
    cooldown: Optional[timedelta]


@dataclass(frozen=True)
class CycleReport:
    placed: int
    cooldown: Optional[timedelta]
    next_due: datetime


# --- Pydantic wire models ---

class ColorPayload(BaseModel):
    id: int = Field(ge=0, le=255)
    name: str = ""
    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)


class BoardCellPayload(BaseModel):
    username: Optional[str] = None
    color_id: int = Field(ge=0, le=255)
    set_time: Optional[str] = None


class BoardPayload(BaseModel):
    colors: List[ColorPayload]
    type: str = ""
    board: List[List[BoardCellPayload]]


class SetPixelPayload(BaseModel):
    x: int
    y: int
    color: str


class SetPixelResponsePayload(BaseModel):
    message: Optional[str] = None
    timers: List[str] = Field(default_factory=list)


# --- Pattern files ---

class PatternPixelPayload(BaseModel):
    x: int
    y: int
    color: int = Field(ge=0, le=255)


class PatternFilePayload(BaseModel):
    pattern: List[PatternPixelPayload]
