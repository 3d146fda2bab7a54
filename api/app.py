from fastapi import FastAPI, HTTPException, Query
from engine.engine import Engine, minimum_elf_attack
from engine.mapfile import parse_lines, render
from engine.model import BoardError, Faction, StalemateError
from runtime.runner import BattleRunner
from .schemas import ElfAttackResponse, EventsResponse, OutcomeResponse, StartRequest, StateResponse, UnitOut

app = FastAPI(title="Grid Skirmish API")
runner: BattleRunner | None = None

def _require_runner() -> BattleRunner:
    if not runner:
        raise HTTPException(400, "Battle not started")
    return runner

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Grid Skirmish API",
        "docs": "/docs",
        "version": "1.0"
    }

@app.post("/battle/start")
async def start_battle(req: StartRequest):
    """Start a new battle on the given map."""
    global runner
    attack_power = {}
    if req.elf_attack_power is not None:
        attack_power[Faction.ELF] = req.elf_attack_power
    if req.goblin_attack_power is not None:
        attack_power[Faction.GOBLIN] = req.goblin_attack_power
    try:
        eng = Engine(parse_lines(req.map, attack_power))
    except BoardError as e:
        raise HTTPException(400, str(e))
    runner = BattleRunner(eng)
    print(f"[API] Battle started: {len(eng.board.units)} units on {eng.board.width}x{eng.board.height} map")
    return {"battle_id": "local", "units": len(eng.board.units)}

@app.post("/battle/local/rounds")
async def play_rounds(count: int = Query(default=1, ge=1, le=1000)):
    """Advance the battle by up to count rounds."""
    r = _require_runner()
    try:
        evts = await r.step_rounds(count)
    except StalemateError as e:
        raise HTTPException(409, str(e))
    snap = await r.snapshot()
    return {"round_num": snap.round_num, "events": len(evts), "over": snap.over}

@app.post("/battle/local/run", response_model=OutcomeResponse)
async def run_battle():
    """Play the battle to the end."""
    r = _require_runner()
    try:
        result = await r.run_to_end()
    except StalemateError as e:
        raise HTTPException(409, str(e))
    return OutcomeResponse(rounds=result.rounds, hp=result.hp, total=result.total, over=True)

@app.get("/battle/local/state", response_model=StateResponse)
async def get_state():
    """Get current battle board snapshot."""
    r = _require_runner()
    snap = await r.snapshot()
    return StateResponse(
        round_num=snap.round_num,
        rounds_completed=snap.rounds_completed,
        over=snap.over,
        map=render(snap.board).splitlines(),
        units=[UnitOut(**u.describe()) for u in snap.board.in_reading_order()],
    )

@app.get("/battle/local/outcome", response_model=OutcomeResponse)
async def get_outcome():
    """Outcome so far; final once ``over`` is true."""
    r = _require_runner()
    snap = await r.snapshot()
    result = snap.outcome
    return OutcomeResponse(rounds=result.rounds, hp=result.hp, total=result.total, over=snap.over)

@app.post("/battle/elf-attack", response_model=ElfAttackResponse)
async def find_elf_attack(req: StartRequest):
    """Search for the lowest elf attack power at which no elf dies.

    ``elf_attack_power`` in the request, if given, is where the search starts.
    Runs to completion in the request and does not touch the current battle.
    """
    attack_power = {}
    if req.goblin_attack_power is not None:
        attack_power[Faction.GOBLIN] = req.goblin_attack_power
    try:
        board = parse_lines(req.map, attack_power)
        if req.elf_attack_power is not None:
            found, result = minimum_elf_attack(board, start=req.elf_attack_power)
        else:
            found, result = minimum_elf_attack(board)
    except BoardError as e:
        raise HTTPException(400, str(e))
    except StalemateError as e:
        raise HTTPException(409, str(e))
    print(f"[API] Elf attack search finished: {found}")
    return ElfAttackResponse(
        attack_power=found,
        outcome=OutcomeResponse(rounds=result.rounds, hp=result.hp, total=result.total, over=True),
    )

@app.get("/battle/local/events")
async def get_events(since: int = 0, limit: int = 500):
    """Get events since offset."""
    r = _require_runner()
    evts, next_offset = r.events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        events=[{"kind": e.kind, "round_num": e.round_num, "data": e.data} for e in evts]
    )
