"""Simple bot arena for Landlord."""

from __future__ import annotations

import argparse
from typing import Dict, Iterable, Mapping, Optional, Sequence

from engine.events import EventSink, LoggingSink, NullPacer, Pacer, SleepPacer
from engine.game import MatchSession, RoundEngine
from engine.logging_utils import get_logger, setup_logging
from engine.rules_schema import RuleSet
from engine.service import ActionKind, RoundService

from .base import BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

log = get_logger("bots.arena")

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "greedy": GreedyBot,
    "random": RandomBot,
}

PACED_ACTIONS = frozenset({ActionKind.BID, ActionKind.PASS, ActionKind.PLAY})


def play_round(service: RoundService, agents: Mapping[str, BotStrategy], pacer: Optional[Pacer] = None) -> RoundEngine:
    """Drive one round to its end, asking each seat's agent for every decision."""
    pacer = pacer or NullPacer()
    current = service.start_round()
    pacer.short()
    while not current.is_over():
        player = current.current_player
        assert player is not None
        actions = service.enabled_actions(player)
        action = agents[player.name].choose_action(service, player, actions)
        service.apply(player, action)
        if action.kind in PACED_ACTIONS:
            pacer.beat()
    service.finish_round()
    pacer.long()
    return current


def run_match(
    bots: Sequence[BotStrategy],
    *,
    n_rounds: int = 10,
    seed: int | None = None,
    sink: Optional[EventSink] = None,
    pacer: Optional[Pacer] = None,
) -> dict:
    session = MatchSession(seed=seed, rules=RuleSet(max_rounds=n_rounds), sink=sink or LoggingSink())
    service = RoundService(session)
    if len(bots) != len(session.players):
        raise ValueError(f"Need exactly {len(session.players)} bots.")
    agents = {player.name: bot for player, bot in zip(session.players, bots)}

    history = []
    while not session.is_over():
        current = play_round(service, agents, pacer)
        record = session.history[-1]
        history.append(
            {
                "phase": record.phase.name.lower(),
                "landlord": record.landlord,
                "final_bid": record.final_bid,
                "landlord_won": record.landlord_won,
                "scores": record.scores,
            }
        )
        log.debug("Round finished in phase %s", current.phase.name)
    return {"scores": list(session.final_scores()), "history": history}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a bot match.")
    parser.add_argument("--bots", nargs=3, default=["greedy", "greedy", "random"], choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=10, help="Number of completed rounds to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--pace", action="store_true", help="Pause between moves like a live table.")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    setup_logging(args.log_level.upper())
    bots = [BOT_REGISTRY[name]() for name in args.bots]
    pacer = SleepPacer() if args.pace else None
    results = run_match(bots, n_rounds=args.n, seed=args.seed, pacer=pacer)

    print(f"Scores after {args.n} rounds: {results['scores']}")
    wins = sum(1 for entry in results["history"] if entry["landlord_won"])
    played = sum(1 for entry in results["history"] if entry["landlord_won"] is not None)
    print(f"Landlord win rate: {wins}/{played}")


if __name__ == "__main__":
    main()
