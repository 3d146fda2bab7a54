import asyncio
from dataclasses import dataclass
from typing import List
from engine.engine import Engine
from engine.model import FACTIONS, Board, Event, Outcome, StalemateError
from .eventlog import EventLog

@dataclass
class BattleSnapshot:
    """Consistent view of a battle taken under the runner's lock."""
    board: Board
    round_num: int
    rounds_completed: int
    over: bool
    outcome: Outcome

class BattleRunner:
    """Drives the engine one round at a time on request and records its events.

    Nothing runs in the background: rounds advance only when a caller asks, and
    the lock keeps concurrent API requests from interleaving inside the engine.
    """

    def __init__(self, engine: Engine, verbose: bool = False):
        self.engine = engine
        self.verbose = verbose
        self.events = EventLog()
        self._lock = asyncio.Lock()

    def _play(self) -> List[Event]:
        round_num = self.engine.round_num + 1
        try:
            evts = self.engine.step()
        except StalemateError as e:
            self.events.append_round(round_num, e.events)
            print(f"[BattleRunner] Round {round_num} stalled: {e}")
            raise
        self.events.append_round(round_num, evts)
        if self.verbose:
            print(f"[BattleRunner] Round {round_num} produced {len(evts)} events")
        return evts

    async def step_rounds(self, count: int = 1) -> List[Event]:
        """Play up to count rounds, stopping early when combat ends."""
        played: List[Event] = []
        async with self._lock:
            for _ in range(count):
                if self.engine.is_over():
                    break
                played += self._play()
        return played

    async def run_to_end(self) -> Outcome:
        """Play every remaining round and return the outcome."""
        async with self._lock:
            while not self.engine.is_over():
                self._play()
            result = self.engine.outcome()
            winners = ", ".join(FACTIONS[f.letter].name for f in self.engine.board.factions())
            played = self.engine.round_num
        print(f"[BattleRunner] Combat over after {played} rounds, {winners} win: "
              f"{result.rounds} * {result.hp} = {result.total}")
        return result

    async def snapshot(self) -> BattleSnapshot:
        """Get board, round counters and outcome together (lock-protected)."""
        async with self._lock:
            return BattleSnapshot(
                board=self.engine.snapshot(),
                round_num=self.engine.round_num,
                rounds_completed=self.engine.rounds_completed,
                over=self.engine.is_over(),
                outcome=self.engine.outcome(),
            )
