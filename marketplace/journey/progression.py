"""
Gate progression rules.

Core rules:
  - An artwork is unlocked for a user when its gate_number <= the user's
    highest_gate_unlocked. Artworks without a gate are always unlocked.
  - Paying for an artwork from gate G opens gate G+1. The frontier never
    moves backwards.
  - Each distinct gate in a paid order yields one journey record and one insight.

Both functions are pure: the checkout flow persists what apply_purchase returns.
"""
import sys
from dataclasses import dataclass
from typing import Any, Iterable, Optional

# Frontier used for the anonymous catalog view: everything appears unlocked.
ALL_GATES_UNLOCKED = sys.maxsize


@dataclass(frozen=True)
class PurchaseOutcome:
    highest_gate_unlocked: int
    journey_gates: tuple
    insight_delta: int

    @property
    def changed(self) -> bool:
        return bool(self.journey_gates)


def is_unlocked(gate_number: Optional[int], highest_gate_unlocked: int) -> bool:
    if gate_number is None:
        return True
    return gate_number <= highest_gate_unlocked


def annotate(catalog: Iterable[Any], highest_gate_unlocked: int) -> list:
    """Pair every catalog item with its unlocked flag for the given frontier."""
    return [
        (item, is_unlocked(getattr(item, "gate_number", None), highest_gate_unlocked))
        for item in catalog
    ]


def purchased_gates(items: Iterable[Any]) -> list:
    """
    Gate numbers present in a list of purchased items.

    Accepts order snapshots (dicts) or Artwork rows; items lacking a gate
    number don't take part in progression.
    """
    gates = []
    for item in items:
        if isinstance(item, dict):
            gate = item.get("gate_number")
        else:
            gate = getattr(item, "gate_number", None)
        if gate is not None:
            gates.append(int(gate))
    return gates


def apply_purchase(current_highest: int, gates: Iterable[Optional[int]]) -> PurchaseOutcome:
    """
    New progression state after a successful payment for ``gates``.

    Completing gate G unlocks access up through G+1; an already-open gate
    neither regresses nor spuriously advances the frontier.
    """
    distinct = sorted({g for g in gates if g is not None})
    if not distinct:
        return PurchaseOutcome(current_highest, (), 0)

    new_highest = max(current_highest, max(distinct) + 1)
    return PurchaseOutcome(
        highest_gate_unlocked=new_highest,
        journey_gates=tuple(distinct),
        insight_delta=len(distinct),
    )
