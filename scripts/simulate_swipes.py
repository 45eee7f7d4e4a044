#!/usr/bin/env python3
"""
CLI tool for stress-testing MatchEngine with concurrent swipes.

Runs a random swipe workload against the in-memory engine on a thread pool,
then verifies the matching invariants and prints a report.

Usage:
    python scripts/simulate_swipes.py
    python scripts/simulate_swipes.py --users 50 --swipes 5000 --workers 32
    python scripts/simulate_swipes.py --policy allow --interest-ratio 0.7 --json

Checks:
    - Every connected edge has a connected reciprocal (no half-match)
    - Exactly one match event per connected pair
    - Number of MATCHED outcomes equals number of connected pairs

Exit code:
    0 if every invariant holds, 1 otherwise
"""

import argparse
import json
import logging
import random
import sys
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.domain.matching.matching_config import MatchingConfig, ReswipePolicy
from src.domain.matching.services.match_engine import MatchEngine
from src.domain.matching.value_objects.pair_key import PairKey
from src.domain.matching.value_objects.swipe_result import SwipeOutcome
from src.domain.shared.exceptions import DomainException
from src.infrastructure.events import InMemoryMatchEventPublisher
from src.infrastructure.locking import InProcessPairLock
from src.infrastructure.persistence.in_memory import InMemoryEdgeStore

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Drive concurrent swipes through MatchEngine and verify invariants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--users", type=int, default=20, help="Number of users (default: 20)")
    parser.add_argument(
        "--swipes", type=int, default=2000, help="Total swipes to perform (default: 2000)"
    )
    parser.add_argument(
        "--workers", type=int, default=16, help="Thread pool size (default: 16)"
    )
    parser.add_argument(
        "--interest-ratio",
        type=float,
        default=0.6,
        help="Share of swipes that are interest (default: 0.6)",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ReswipePolicy],
        default=ReswipePolicy.FORBID.value,
        help="Re-swipe policy (default: forbid)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def build_workload(users: list[str], swipes: int, interest_ratio: float, seed: int):
    """Random (from_user, to_user, is_interest) triples, never self-swipes."""
    rng = random.Random(seed)
    workload = []
    for _ in range(swipes):
        from_user, to_user = rng.sample(users, 2)
        workload.append((from_user, to_user, rng.random() < interest_ratio))
    return workload


def check_invariants(store: InMemoryEdgeStore, publisher: InMemoryMatchEventPublisher, outcomes: Counter) -> list[str]:
    violations: list[str] = []
    edges = {edge.key: edge for edge in store.all_edges()}

    connected_pairs = set()
    for (from_user, to_user), edge in edges.items():
        if not edge.is_connected():
            continue
        reciprocal = edges.get((to_user, from_user))
        if reciprocal is None or not reciprocal.is_connected():
            violations.append(f"half-match: {from_user}->{to_user} connected, reciprocal is {reciprocal}")
        connected_pairs.add(str(PairKey.of(from_user, to_user)))

    event_pairs = Counter(str(event.pair_key) for event in publisher.events)
    for pair, count in event_pairs.items():
        if count != 1:
            violations.append(f"{count} events for pair {pair}")
    if set(event_pairs) != connected_pairs:
        violations.append(
            f"events/pairs mismatch: {len(event_pairs)} event pairs, {len(connected_pairs)} connected pairs"
        )
    if outcomes[SwipeOutcome.MATCHED.value] != len(connected_pairs):
        violations.append(
            f"{outcomes[SwipeOutcome.MATCHED.value]} MATCHED outcomes for {len(connected_pairs)} connected pairs"
        )
    if publisher.duplicates_suppressed:
        violations.append(f"{publisher.duplicates_suppressed} duplicate publishes reached the publisher")

    return violations


def main() -> int:
    args = parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.users < 2:
        logger.error("--users must be at least 2")
        return 1

    users = [f"user-{i:04d}" for i in range(args.users)]
    config = MatchingConfig(reswipe_policy=ReswipePolicy(args.policy))
    store = InMemoryEdgeStore()
    publisher = InMemoryMatchEventPublisher()
    engine = MatchEngine(
        edge_store=store,
        pair_lock=InProcessPairLock(wait_timeout_seconds=config.lock_wait_timeout_seconds),
        publisher=publisher,
        config=config,
    )

    workload = build_workload(users, args.swipes, args.interest_ratio, args.seed)
    outcomes: Counter = Counter()
    errors: Counter = Counter()

    def run(swipe):
        from_user, to_user, is_interest = swipe
        try:
            if is_interest:
                return engine.record_interest(from_user, to_user).outcome.value, None
            return engine.record_disinterest(from_user, to_user).outcome.value, None
        except DomainException as e:
            return None, e.__class__.__name__

    start = time.time()
    with ThreadPoolExecutor(max_workers=args.workers) as pool:
        for outcome, error in pool.map(run, workload):
            if error:
                errors[error] += 1
            else:
                outcomes[outcome] += 1
    duration = time.time() - start

    violations = check_invariants(store, publisher, outcomes)

    report = {
        "users": args.users,
        "swipes": args.swipes,
        "workers": args.workers,
        "policy": args.policy,
        "duration_seconds": round(duration, 3),
        "swipes_per_second": round(args.swipes / duration, 1) if duration else None,
        "outcomes": dict(outcomes),
        "errors": dict(errors),
        "edges": len(store.all_edges()),
        "match_events": len(publisher.events),
        "violations": violations,
    }

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(f"Simulated {args.swipes} swipes by {args.users} users on {args.workers} threads "
              f"in {report['duration_seconds']}s (policy={args.policy})")
        for name, count in sorted(outcomes.items()):
            print(f"  {name:<16} {count}")
        for name, count in sorted(errors.items()):
            print(f"  {name:<16} {count}")
        print(f"  edges            {report['edges']}")
        print(f"  match events     {report['match_events']}")
        if violations:
            print("INVARIANT VIOLATIONS:")
            for violation in violations:
                print(f"  - {violation}")
        else:
            print("All invariants hold.")

    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
