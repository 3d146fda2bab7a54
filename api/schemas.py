from typing import List, Optional
from pydantic import BaseModel, Field

DEFAULT_MAP = [
    "#######",
    "#.G...#",
    "#...EG#",
    "#.#.#G#",
    "#..G#E#",
    "#.....#",
    "#######",
]

class StartRequest(BaseModel):
    """Battle start request schema."""
    map: List[str] = Field(default_factory=lambda: list(DEFAULT_MAP))
    elf_attack_power: Optional[int] = Field(default=None, ge=1)
    goblin_attack_power: Optional[int] = Field(default=None, ge=1)

class UnitOut(BaseModel):
    faction: str
    pos: List[int]
    hp: int
    attack_power: int

class StateResponse(BaseModel):
    """Board snapshot schema."""
    round_num: int
    rounds_completed: int
    over: bool
    map: List[str]
    units: List[UnitOut]

class OutcomeResponse(BaseModel):
    rounds: int
    hp: int
    total: int
    over: bool

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    events: list[dict]

class ElfAttackResponse(BaseModel):
    """Lowest elf attack power with no elf losses, and that battle's outcome."""
    attack_power: int
    outcome: OutcomeResponse
