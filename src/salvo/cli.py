"""Local command-line driver for the engine.

Plays the part of the presentation layer on a terminal: it renders outcomes as
plain text and lets you act on the tokens they carry.

    salvo new 1 2                 # print the opening token
    salvo act 1 '<token>' [B4]    # resolve one interaction as user 1
    salvo play                    # hot-seat game for two people at one keyboard
"""

from __future__ import annotations

import argparse
import logging
import os
import random
import sys
from typing import Callable, TextIO

from . import config as _cfg
from .engine import Participant, handle_interaction, start_game
from .errors import StartError, StartFailure
from .outcomes import (
    BattleStarted,
    Delivery,
    Dropped,
    FireProblem,
    FireRejected,
    FleetShown,
    GameOver,
    GameStarted,
    Message,
    NextPlacement,
    Outcome,
    Rejected,
    RejectReason,
    Resolution,
    ShotResolved,
    ShotResult,
    StartRefused,
    TargetPrompt,
    TurnStarted,
)
from .tokens import ActionKind
from .views import grid_rows

logger = logging.getLogger(__name__)

LABELS = {
    ActionKind.PLACE: "Prepare",
    ActionKind.CONFIRM_PLACE: "Confirm",
    ActionKind.RANDOMIZE_PLACE: "Random",
    ActionKind.START_TURN: "Prepare",
    ActionKind.FIRE: "Fire",
}


def describe(outcome: Outcome) -> str:
    """One line of text for *outcome*."""
    if isinstance(outcome, GameStarted):
        return f"{outcome.player_1} & {outcome.player_2}, get ready for battle! {outcome.player_1}, you prepare first."
    if isinstance(outcome, FleetShown):
        return f"{outcome.user_id}, is this fleet okay?"
    if isinstance(outcome, NextPlacement):
        return f"{outcome.user_id}, prepare as well!"
    if isinstance(outcome, BattleStarted):
        return f"{outcome.user_id}, it's your turn!"
    if isinstance(outcome, TurnStarted):
        return f"{outcome.user_id}, choose your target."
    if isinstance(outcome, TargetPrompt):
        return "Enter target (e.g. B4)"
    if isinstance(outcome, ShotResolved):
        text = f"{outcome.shooter} fired at {outcome.coord}. "
        if outcome.ship is not None:
            text += f"It HIT and a {outcome.ship.label} was SUNK!"
        else:
            text += "It HIT!" if outcome.result is ShotResult.HIT else "It MISSED!"
        return f"{text} {outcome.next_player}, it's your turn!"
    if isinstance(outcome, GameOver):
        return (
            f"It HIT and a {outcome.ship.label} was SUNK at {outcome.coord}! "
            f"{outcome.loser} lost all their ships! {outcome.winner} wins!"
        )
    if isinstance(outcome, FireRejected):
        if outcome.reason is FireProblem.ALREADY_HIT:
            return "You already fired at that coordinate."
        return "That coordinate is invalid."
    if isinstance(outcome, Rejected):
        return "It is not your turn." if outcome.reason is RejectReason.NOT_YOUR_TURN else "You're not involved in this."
    if isinstance(outcome, StartRefused):
        if outcome.reason is StartFailure.SAME_PLAYER:
            return "You can't play against yourself."
        return f"{outcome.user_id} is a bot and can't play."
    if isinstance(outcome, Dropped):
        return f"Ignored interaction ({outcome.error})."
    return repr(outcome)


def print_boards(res: Resolution, out: TextIO) -> None:
    if res.state is None:
        return
    current, target = res.state.turns
    if isinstance(res.outcome, FleetShown):
        print("\n".join(["[Own]"] + grid_rows(current, reveal=True)), file=out)
    elif isinstance(res.outcome, (TurnStarted, FireRejected)):
        print("\n".join([f"[Enemy] {target.user_id}"] + grid_rows(target, reveal=False)), file=out)
        print("\n".join([f"[Own] {current.user_id}"] + grid_rows(current, reveal=True)), file=out)


def print_message(msg: Message, out: TextIO) -> None:
    if msg.delivery is Delivery.RETRACT:
        logger.debug("retract controls of previous message")
        return
    scope = "private" if msg.private else "public"
    print(f"[{msg.delivery.name.lower()}/{scope}] {describe(msg.outcome)}", file=out)


# ---------------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------------


def cmd_new(args: argparse.Namespace, out: TextIO) -> int:
    try:
        res = start_game(Participant(args.player_1), Participant(args.player_2), rng=args.rng)
    except StartError as exc:
        print(f"ERR {exc}", file=out)
        return 1
    for msg in res.messages:
        print_message(msg, out)
    print(res.tokens()[0], file=out)
    return 0


def cmd_act(args: argparse.Namespace, out: TextIO) -> int:
    res = handle_interaction(args.user, args.token, args.coordinate, rng=args.rng)
    for msg in res.messages:
        print_message(msg, out)
        for ctrl in msg.controls:
            print(f"  {ctrl.kind.name}: {ctrl.token}", file=out)
    if not res.messages:
        print(describe(res.outcome), file=out)
    if args.show:
        print_boards(res, out)
    return 1 if isinstance(res.outcome, Dropped) else 0


def _choose(msg: Message, actor: int, read: Callable[[str], str], out: TextIO) -> int:
    options = " ".join(f"[{i}] {LABELS[c.kind]}" for i, c in enumerate(msg.controls, 1))
    while True:
        choice = read(f"{actor}> {options}: ").strip() or "1"
        if choice.isdigit() and 1 <= int(choice) <= len(msg.controls):
            return int(choice) - 1
        print("ERR pick one of the listed options", file=out)


def cmd_play(args: argparse.Namespace, out: TextIO, read: Callable[[str], str] = input) -> int:
    """Hot-seat game: whoever's turn it is acts on the latest controls."""
    try:
        res = start_game(Participant(args.player_1), Participant(args.player_2), rng=args.rng)
    except StartError as exc:
        print(f"ERR {exc}", file=out)
        return 1
    while True:
        for msg in res.messages:
            print_message(msg, out)
        print_boards(res, out)
        if res.finished:
            return 0

        actionable = [m for m in res.messages if m.controls]
        if not actionable:
            logger.error("no controls left after %s", type(res.outcome).__name__)
            return 1
        actor = res.state.current.user_id
        msg = actionable[-1]
        try:
            if msg.delivery is Delivery.PROMPT:
                coordinate = read(f"{actor}> target: ").strip()
                res = handle_interaction(actor, msg.controls[0].token, coordinate, rng=args.rng)
            else:
                picked = msg.controls[_choose(msg, actor, read, out)]
                res = handle_interaction(actor, picked.token, rng=args.rng)
        except EOFError:
            print("", file=out)
            return 0


def main(argv: list[str] | None = None) -> int:  # pragma: no cover – CLI entry
    parser = argparse.ArgumentParser(prog="salvo", description="Salvo rules engine CLI")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity.")
    parser.add_argument("-q", "--quiet", dest="silent", action="store_true", help="Suppress log output.")
    parser.add_argument("--seed", type=int, default=None, help="Seed fleet placement.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_new = sub.add_parser("new", help="Start a game and print its opening token.")
    p_new.add_argument("player_1", type=int)
    p_new.add_argument("player_2", type=int)

    p_act = sub.add_parser("act", help="Resolve one interaction.")
    p_act.add_argument("user", type=int)
    p_act.add_argument("token")
    p_act.add_argument("coordinate", nargs="?", default=None)
    p_act.add_argument("--show", action="store_true", help="Print board views.")

    p_play = sub.add_parser("play", help="Hot-seat game on this terminal.")
    p_play.add_argument("--player-1", type=int, default=1)
    p_play.add_argument("--player-2", type=int, default=2)

    args = parser.parse_args(argv)

    if args.debug:
        os.environ["SALVO_DEBUG"] = "1"
    if args.silent:
        level = logging.ERROR
    elif args.debug or _cfg.DEBUG:
        level = logging.DEBUG
    elif args.verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    args.rng = random.Random(args.seed) if args.seed is not None else None
    handlers = {"new": cmd_new, "act": cmd_act, "play": cmd_play}
    return handlers[args.command](args, sys.stdout)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
