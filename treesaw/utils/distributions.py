"""
Random distributions for tree-saw.

All helpers take the random.Random instance to draw from, so a whole run can
be replayed from a single seed.
"""

import math

# exp(-mean) underflows for large means, so Poisson draws are split into
# independent chunks no larger than this (the sum is still Poisson).
POISSON_CHUNK = 500.0


def poisson(rng, mean):
    """Draw a non-negative integer from a Poisson distribution."""
    if mean < 0:
        raise ValueError(f"Poisson mean must not be negative: {mean}")

    count = 0
    remaining = mean
    while remaining > 0:
        lam = min(remaining, POISSON_CHUNK)
        remaining -= lam

        # Knuth's multiplication method
        limit = math.exp(-lam)
        product = rng.random()
        while product > limit:
            count += 1
            product *= rng.random()

    return count


def uniform_choice(rng, items):
    """Pick one item with equal probability."""
    return items[rng.randrange(len(items))]


def weighted_choice(rng, items, weights):
    """Pick one item with probability proportional to its weight."""
    if len(items) != len(weights):
        raise ValueError("items and weights must have the same length")
    return rng.choices(items, weights=weights, k=1)[0]
