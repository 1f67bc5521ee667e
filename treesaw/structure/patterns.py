"""
Random strings matching PATTERN rules.

Built on rstr's Xeger. Unbounded quantifiers such as ``*`` and ``+`` are
expanded at most ``max_repeat`` times beyond their minimum, so patterns
never produce runaway text.
"""

import re
import random

import rstr

from ..errors import GrammarError


class _BoundedXeger(rstr.Rstr):
    """Xeger whose repetitions stay within min + max_repeat."""

    def __init__(self, rng, max_repeat):
        super().__init__(rng)
        self.max_repeat = max_repeat

    def _handle_repeat(self, start_range, end_range, value):
        # rstr caps every quantifier at its own STAR_PLUS_LIMIT, so the
        # repetition is drawn here instead of in the base class.
        times = self._random.randint(start_range, min(end_range, start_range + self.max_repeat))
        return ''.join(''.join(self._handle_state(state) for state in value)
                       for _ in range(times))


class PatternGenerator:
    """Generates text matching one regular expression."""

    def __init__(self, pattern, max_repeat=5, rng=None):
        """
        Args:
            pattern: Regular expression from a PATTERN rule
            max_repeat: Free repetitions allowed for each quantifier
            rng: random.Random instance shared with the generator
        """
        try:
            self.regex = re.compile(pattern)
        except re.error as e:
            raise GrammarError(f"Invalid pattern {pattern!r}: {e}") from e

        self.pattern = pattern
        self.max_repeat = max_repeat
        self._xeger = _BoundedXeger(rng if rng is not None else random.Random(), max_repeat)

    def generate(self):
        """Return one random string matching the pattern."""
        return self._xeger.xeger(self.regex)

    def matches(self, text):
        return self.regex.fullmatch(text) is not None
