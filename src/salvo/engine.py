"""Turn/combat state machine and the interaction entry point.

Phases, all carried by the token alone::

    placing(P1) -> ConfirmPlace -> placing(P2) -> ConfirmPlace
      -> firing(P1) -> Fire -> firing(P2) -> Fire -> ... -> game over

Every inbound interaction is a pure function of (decoded state, actor,
payload). Before any transition the actor is checked against the decoded
roles: only the player whose turn it is may act.

Transitions return ``(new_state, outcome)``; :func:`apply` turns that into
a :class:`~salvo.outcomes.Resolution` whose messages are listed in the order
they must be delivered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .errors import (
    AuthorizationError,
    CoordinateParseError,
    CorruptStateError,
    NotInvolved,
    NotYourTurn,
    StartError,
    StartFailure,
    TokenParseError,
)
from .grid import parse_coordinate
from .outcomes import (
    BattleStarted,
    Control,
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
from .placement import new_player, reroll
from .state import GameState, PlayerState
from .tokens import Action, ActionKind, decode_token

logger = logging.getLogger(__name__)

Transition = Callable[..., tuple[GameState, Outcome]]


@dataclass(frozen=True, slots=True)
class Participant:
    """A user about to be paired into a game."""

    user_id: int
    bot: bool = False


# ---------------------------------------------------------------------------
# Game start
# ---------------------------------------------------------------------------


def new_game(player_1: int, player_2: int, rng: Any = None) -> GameState:
    """Fresh state: both fleets random, player 1 places first."""
    return GameState(new_player(player_1, rng), new_player(player_2, rng), turn=1)


def start_game(player_1: Participant, player_2: Participant, *, rng: Any = None) -> Resolution:
    """Pair two participants and return the opening message with its Place control."""
    if player_1.user_id == player_2.user_id:
        raise StartError(StartFailure.SAME_PLAYER, player_1.user_id)
    for who in (player_1, player_2):
        if who.bot:
            raise StartError(StartFailure.BOT_PLAYER, who.user_id)

    state = new_game(player_1.user_id, player_2.user_id, rng)
    outcome = GameStarted(player_1.user_id, player_2.user_id)
    logger.info("game started: %d vs %d", player_1.user_id, player_2.user_id)
    return Resolution(state, outcome, (Message(Delivery.SEND, outcome, _controls(state, ActionKind.PLACE)),))


def open_game(player_1: Participant, player_2: Participant, *, rng: Any = None) -> Resolution:
    """Like :func:`start_game` but reports a refusal as an outcome."""
    try:
        return start_game(player_1, player_2, rng=rng)
    except StartError as exc:
        logger.debug("start refused: %s", exc)
        outcome = StartRefused(exc.reason, exc.user_id)
        return Resolution(None, outcome, (Message(Delivery.SEND, outcome),))


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------


def authorize(state: GameState, actor: int) -> PlayerState:
    """Return the current player if *actor* is them, else raise.

    Every action kind requires the current player, so the opponent always
    gets :class:`NotYourTurn` and anybody else :class:`NotInvolved`.
    """
    current, target = state.turns
    if actor == current.user_id:
        return current
    if actor == target.user_id:
        raise NotYourTurn(actor)
    raise NotInvolved(actor)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def place(state: GameState, coordinate: str | None = None, rng: Any = None) -> tuple[GameState, Outcome]:
    return state, FleetShown(state.current.user_id)


def randomize_place(state: GameState, coordinate: str | None = None, rng: Any = None) -> tuple[GameState, Outcome]:
    state = state.with_current(reroll(state.current, rng))
    return state, FleetShown(state.current.user_id, rerolled=True)


def confirm_place(state: GameState, coordinate: str | None = None, rng: Any = None) -> tuple[GameState, Outcome]:
    first_player = state.turn == 1
    state = state.swap_turn()
    if first_player:
        return state, NextPlacement(state.current.user_id)
    # Second confirmation hands the turn back: player 1 fires first.
    logger.info("battle started: %d fires first", state.current.user_id)
    return state, BattleStarted(state.current.user_id)


def start_turn(state: GameState, coordinate: str | None = None, rng: Any = None) -> tuple[GameState, Outcome]:
    return state, TurnStarted(state.current.user_id)


def fire(state: GameState, coordinate: str | None = None, rng: Any = None) -> tuple[GameState, Outcome]:
    """Resolve a shot by the current player at *coordinate* text.

    Without a coordinate the shooter is asked for one. A bad coordinate or a
    repeated cell leaves the state alone so the turn is not lost.
    """
    shooter, target = state.turns
    if coordinate is None:
        return state, TargetPrompt(shooter.user_id)
    try:
        coord = parse_coordinate(coordinate)
    except CoordinateParseError:
        return state, FireRejected(shooter.user_id, FireProblem.INVALID_COORDINATE, coordinate)
    if target.hits.get(coord):
        return state, FireRejected(shooter.user_id, FireProblem.ALREADY_HIT, coordinate)

    target = target.with_hit(coord)
    # Ships never overlap, so box containment picks at most one.
    ship = target.ship_at(coord)
    if ship is None:
        result = ShotResult.MISS
    elif target.is_sunk(ship):
        result = ShotResult.SUNK
    else:
        result = ShotResult.HIT
    state = state.with_target(target).swap_turn()

    if result is ShotResult.SUNK and target.all_sunk():
        logger.info("game over: %d sank the last ship of %d", shooter.user_id, target.user_id)
        return state, GameOver(coord, ship.kind, winner=shooter.user_id, loser=target.user_id)
    return state, ShotResolved(
        shooter.user_id,
        coord,
        result,
        ship.kind if result is ShotResult.SUNK else None,
        next_player=target.user_id,
    )


TRANSITIONS: dict[ActionKind, Transition] = {
    ActionKind.PLACE: place,
    ActionKind.RANDOMIZE_PLACE: randomize_place,
    ActionKind.CONFIRM_PLACE: confirm_place,
    ActionKind.START_TURN: start_turn,
    ActionKind.FIRE: fire,
}


# ---------------------------------------------------------------------------
# Outbound messages
# ---------------------------------------------------------------------------


def _controls(state: GameState, *kinds: ActionKind) -> tuple[Control, ...]:
    return tuple(Control(kind, Action(kind, state).to_token()) for kind in kinds)


def plan_messages(state: GameState, outcome: Outcome) -> tuple[Message, ...]:
    """Messages for *outcome*, in the order they must be delivered."""
    retract = Message(Delivery.RETRACT, outcome)

    if isinstance(outcome, FleetShown):
        review = _controls(state, ActionKind.CONFIRM_PLACE, ActionKind.RANDOMIZE_PLACE)
        if outcome.rerolled:
            return (Message(Delivery.UPDATE, outcome, review, private=True),)
        return retract, Message(Delivery.FOLLOW_UP, outcome, review, private=True)
    if isinstance(outcome, NextPlacement):
        return retract, Message(Delivery.FOLLOW_UP, outcome, _controls(state, ActionKind.PLACE))
    if isinstance(outcome, (BattleStarted, ShotResolved)):
        return retract, Message(Delivery.FOLLOW_UP, outcome, _controls(state, ActionKind.START_TURN))
    if isinstance(outcome, TurnStarted):
        return retract, Message(Delivery.FOLLOW_UP, outcome, _controls(state, ActionKind.FIRE), private=True)
    if isinstance(outcome, TargetPrompt):
        return (Message(Delivery.PROMPT, outcome, _controls(state, ActionKind.FIRE), private=True),)
    if isinstance(outcome, FireRejected):
        return retract, Message(Delivery.FOLLOW_UP, outcome, _controls(state, ActionKind.FIRE), private=True)
    if isinstance(outcome, GameOver):
        return retract, Message(Delivery.FOLLOW_UP, outcome)
    if isinstance(outcome, Rejected):
        return (Message(Delivery.REPLY, outcome, private=True),)
    return ()


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def apply(action: Action, actor: int, coordinate: str | None = None, *, rng: Any = None) -> Resolution:
    """Authorize *actor* and run the transition for *action*.

    Raises :class:`AuthorizationError` for the wrong actor and
    :class:`CorruptStateError` for a state no valid flow can produce.
    """
    try:
        action.state.validate()
    except CorruptStateError:
        logger.exception("refusing corrupt %s state", action.kind.name)
        raise
    authorize(action.state, actor)
    state, outcome = TRANSITIONS[action.kind](action.state, coordinate, rng)
    logger.debug("%s by %d -> %s", action.kind.name, actor, type(outcome).__name__)
    return Resolution(state, outcome, plan_messages(state, outcome))


def handle_interaction(actor: int, token: str, coordinate: str | None = None, *, rng: Any = None) -> Resolution:
    """Decode *token*, then resolve the interaction for *actor*.

    Parse failures come back as :class:`Dropped`, authorization failures as
    :class:`Rejected`; neither touches the state. Corruption propagates.
    """
    # 1) Decode; an unparseable token is silently dropped
    try:
        action = decode_token(token)
    except TokenParseError as exc:
        logger.debug("dropping interaction from %d: %s", actor, exc)
        return Resolution(None, Dropped(type(exc).__name__, str(exc)))

    # 2) Authorize and transition
    try:
        return apply(action, actor, coordinate, rng=rng)
    except AuthorizationError as exc:
        reason = RejectReason.NOT_YOUR_TURN if isinstance(exc, NotYourTurn) else RejectReason.NOT_INVOLVED
        logger.debug("rejected %s by %d: %s", action.kind.name, actor, reason.value)
        outcome = Rejected(actor, reason)
        return Resolution(action.state, outcome, plan_messages(action.state, outcome))
