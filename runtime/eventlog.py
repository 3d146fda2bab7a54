from typing import Dict, List, Tuple
from engine.model import Event

class EventLog:
    """Append-only battle event storage, indexed by round for replay."""

    def __init__(self):
        self._log: List[Event] = []
        self._rounds: Dict[int, Tuple[int, int]] = {}

    def __len__(self) -> int:
        return len(self._log)

    def append_round(self, round_num: int, evts: List[Event]) -> Tuple[int, int]:
        """Append one round's events and return its [start, end) offsets."""
        start = len(self._log)
        self._log.extend(evts)
        end = len(self._log)
        self._rounds[round_num] = (start, end)
        return start, end

    def for_round(self, round_num: int) -> List[Event]:
        """Events produced by the given round, empty if it was never played."""
        start, end = self._rounds.get(round_num, (0, 0))
        return self._log[start:end]

    def since(self, offset: int, limit: int = 1000) -> Tuple[List[Event], int]:
        """Return events starting from offset, up to limit, and the next offset."""
        offset = max(0, offset)
        chunk = self._log[offset: offset + limit]
        return chunk, offset + len(chunk)
