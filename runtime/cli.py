"""Run a battle from a map file and print the outcome.

    python -m runtime.cli maps/cave.txt --elf-attack 15 --verbose
    python -m runtime.cli maps/cave.txt --find-elf-attack
"""
import argparse
import sys
from typing import List, Optional
from engine.engine import Engine, minimum_elf_attack
from engine.mapfile import load, render
from engine.model import DEFAULT_ATTACK_POWER, BoardError, Faction, StalemateError

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate elf vs goblin combat on a map")
    parser.add_argument("map", help="path to a map file")
    parser.add_argument("--elf-attack", type=int, default=None, help="attack power of every elf")
    parser.add_argument("--goblin-attack", type=int, default=None, help="attack power of every goblin")
    parser.add_argument("--verbose", action="store_true", help="print the board after each round")
    parser.add_argument("--find-elf-attack", action="store_true",
                        help="search for the lowest elf attack power at which no elf dies "
                             "(starting from --elf-attack if given)")
    return parser

def find_elf_attack(board, start: int) -> int:
    try:
        found, result = minimum_elf_attack(board, start=start)
    except (BoardError, StalemateError) as e:
        print(f"[cli] {e}", file=sys.stderr)
        return 1
    print(f"Elf attack {found}")
    print(f"Outcome: {result.rounds} * {result.hp} = {result.total}")
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    attack_power = {}
    if args.elf_attack is not None:
        attack_power[Faction.ELF] = args.elf_attack
    if args.goblin_attack is not None:
        attack_power[Faction.GOBLIN] = args.goblin_attack

    try:
        board = load(args.map, attack_power)
        engine = Engine(board)
    except (OSError, BoardError) as e:
        print(f"[cli] Cannot start battle: {e}", file=sys.stderr)
        return 2

    if args.find_elf_attack:
        start = args.elf_attack if args.elf_attack is not None else DEFAULT_ATTACK_POWER
        return find_elf_attack(board, start)

    try:
        while not engine.is_over():
            engine.step()
            if args.verbose:
                print(f"Round {engine.round_num}:")
                print(render(engine.board, annotate=True))
    except StalemateError as e:
        print(f"[cli] {e}", file=sys.stderr)
        return 1

    result = engine.outcome()
    print(render(engine.board, annotate=True))
    print(f"Outcome: {result.rounds} * {result.hp} = {result.total}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
