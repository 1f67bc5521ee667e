"""
Memoized values derived from grammar rules.

Rules themselves are never modified; everything the generator learns about
a rule is stored here, keyed by the rule's index in its grammar. Entries are
written once and read thereafter.
"""

from typing import Callable, Dict, List, TypeVar

T = TypeVar('T')


class RuleCache:
    """Side-table of per-rule expected depths, choice weights and patterns."""

    def __init__(self):
        self.expected_depths: Dict[int, float] = {}
        self.sample_weights: Dict[int, List[float]] = {}
        self.pattern_generators: Dict[int, object] = {}

    def get_or_compute(self, table: Dict[int, T], rule, compute: Callable[[], T]) -> T:
        """Return the cached entry for rule, computing it on first use."""
        try:
            return table[rule.index]
        except KeyError:
            value = compute()
            table[rule.index] = value
            return value
