import random
from types import SimpleNamespace

from marketplace.journey.progression import (
    ALL_GATES_UNLOCKED, annotate, apply_purchase, is_unlocked, purchased_gates,
)


def _catalog(*gate_numbers):
    return [SimpleNamespace(id=i, gate_number=g) for i, g in enumerate(gate_numbers, start=1)]


# ======================================================
# annotate
# ======================================================

def test_annotate_flags_items_up_to_the_frontier():
    catalog = _catalog(1, 2, 3, 4, 5)

    result = annotate(catalog, 3)

    assert [unlocked for _, unlocked in result] == [True, True, True, False, False]
    assert [item for item, _ in result] == catalog


def test_annotate_matches_gate_comparison_for_every_frontier():
    catalog = _catalog(*range(1, 15))
    for frontier in range(0, 16):
        for item, unlocked in annotate(catalog, frontier):
            assert unlocked == (item.gate_number <= frontier)


def test_annotate_anonymous_view_unlocks_everything():
    catalog = _catalog(1, 7, 14)
    assert all(unlocked for _, unlocked in annotate(catalog, ALL_GATES_UNLOCKED))


def test_ungated_items_are_always_unlocked():
    assert is_unlocked(None, 1)
    assert annotate(_catalog(None), 1)[0][1] is True


# ======================================================
# apply_purchase
# ======================================================

def test_empty_purchase_is_a_no_op():
    outcome = apply_purchase(4, [])

    assert outcome.highest_gate_unlocked == 4
    assert outcome.journey_gates == ()
    assert outcome.insight_delta == 0
    assert not outcome.changed


def test_items_without_gates_do_not_progress():
    outcome = apply_purchase(2, [None, None])
    assert outcome.highest_gate_unlocked == 2
    assert outcome.journey_gates == ()


def test_first_gate_opens_the_second():
    assert apply_purchase(1, [1]).highest_gate_unlocked == 2


def test_rebuying_an_owned_gate_keeps_the_frontier():
    outcome = apply_purchase(3, [2])

    assert outcome.highest_gate_unlocked == 3
    assert outcome.journey_gates == (2,)


def test_purchase_ahead_of_the_frontier_jumps_past_it():
    assert apply_purchase(5, [7]).highest_gate_unlocked == 8


def test_duplicate_gates_count_once():
    outcome = apply_purchase(1, [2, 1, 2, None, 1])

    assert outcome.highest_gate_unlocked == 3
    assert outcome.journey_gates == (1, 2)
    assert outcome.insight_delta == 2


def test_frontier_never_decreases():
    rng = random.Random(7)
    highest = 1
    for _ in range(200):
        gates = [rng.choice([None, *range(1, 15)]) for _ in range(rng.randint(0, 4))]
        outcome = apply_purchase(highest, gates)
        assert outcome.highest_gate_unlocked >= highest
        highest = outcome.highest_gate_unlocked


def test_journey_gates_are_always_below_the_new_frontier():
    outcome = apply_purchase(1, [3, 9, 4])
    assert all(g < outcome.highest_gate_unlocked for g in outcome.journey_gates)


# ======================================================
# purchased_gates
# ======================================================

def test_purchased_gates_reads_snapshots_and_rows():
    items = [
        {"id": 1, "gate_number": 2},
        {"id": 2, "gate_number": None},
        {"id": 3},
        SimpleNamespace(id=4, gate_number=5),
        {"id": 5, "gate_number": "3"},
    ]
    assert purchased_gates(items) == [2, 5, 3]
