"""Turn budget for the review agent, sized by in-scope file count.

Tiers of ten files map to ten turns each: 1-10 -> 10, 11-20 -> 20, ...,
41 and more -> 50.
"""

DEFAULT_TURN_BUDGET = 10
TURNS_PER_TIER = 10
MAX_TURN_BUDGET = 50


def turn_budget(file_count: int) -> int:
    """Return the turn allowance for file_count in-scope files.

    Zero files gives the default floor; the result is always a multiple
    of ten in [10, 50].
    """
    if file_count < 0:
        raise ValueError(f"file_count must be non-negative, got {file_count}")
    if file_count == 0:
        return DEFAULT_TURN_BUDGET
    tiers = -(-file_count // TURNS_PER_TIER)
    return min(MAX_TURN_BUDGET, tiers * TURNS_PER_TIER)
