#!/usr/bin/env python3
"""
Generator for tree-saw

This module turns a grammar into random syntax trees. Generation is a
depth-first random expansion of the grammar rules. Past a configurable depth,
choices are biased towards alternatives that are expected to terminate
quickly, which keeps recursive grammars from producing unbounded trees.
"""

import math
import random
import logging
from typing import Optional, Sequence

from ..errors import ExternalSymbolsError, UnsupportedRuleError
from ..grammars.rules import Grammar, Rule, RuleType, CONTENT_TYPES, WRAPPER_TYPES
from ..utils.distributions import poisson, uniform_choice, weighted_choice
from .derived import RuleCache
from .patterns import PatternGenerator
from .tree import Node

logger = logging.getLogger(__name__)

# Depth assumed for alternatives that recurse without bound
INFINITE_DEPTH_WEIGHT = 1000


class Generator:
    """Random syntax tree generator for a grammar."""

    def __init__(self, grammar: Grammar, max_depth: int = 10, mean_repeat: float = 5,
                 max_regex_repeat: int = 5, rng: Optional[random.Random] = None,
                 seed: Optional[int] = None):
        """
        Initialize a generator.

        Args:
            grammar: Grammar to generate from
            max_depth: Depth after which choices favor shallow alternatives
            mean_repeat: Mean of the Poisson distribution for REPEAT lengths
            max_regex_repeat: Free repetitions allowed in PATTERN quantifiers
            rng: Random source for every draw (created from seed if omitted)
            seed: Seed for a newly created random source
        """
        if grammar.externals:
            raise ExternalSymbolsError(grammar.externals)

        self.grammar = grammar
        self.max_depth = max_depth
        self.mean_repeat = mean_repeat
        self.max_regex_repeat = max_regex_repeat
        self.rng = rng if rng is not None else random.Random(seed)
        self.cache = RuleCache()

    def set_seed(self, seed: int) -> None:
        """
        Set a random seed for reproducible generation.

        Args:
            seed: Random seed value
        """
        self.rng.seed(seed)

    def generate(self, rule: Optional[Rule] = None, depth: int = 1) -> Node:
        """
        Generate a syntax tree.

        Args:
            rule: Rule to expand (default: the grammar's start rule)
            depth: Depth of the rule in the tree being generated

        Returns:
            Root node of the generated tree
        """
        if rule is None:
            rule = self.grammar.start_rule

        rule_type = rule.rule_type

        if rule_type == RuleType.BLANK:
            return Node(rule_type, "")

        elif rule_type == RuleType.STRING:
            return Node(rule_type, rule.value)

        elif rule_type == RuleType.PATTERN:
            return Node(rule_type, self.pattern_generator(rule).generate())

        elif rule_type == RuleType.SYMBOL:
            target = self.grammar.lookup(rule.name)
            return Node(rule_type, [self.generate(target, depth + 1)])

        elif rule_type == RuleType.SEQ:
            return Node(rule_type, [self.generate(member, depth + 1) for member in rule.members])

        elif rule_type == RuleType.CHOICE:
            return Node(rule_type, [self.generate(self._choose(rule, depth), depth + 1)])

        elif rule_type in (RuleType.REPEAT, RuleType.REPEAT1):
            count = poisson(self.rng, self.mean_repeat)
            if count == 0 and rule_type == RuleType.REPEAT1:
                count = 1
            return Node(rule_type, [self.generate(rule.content, depth + 1) for _ in range(count)])

        elif rule_type in WRAPPER_TYPES:
            return Node(rule_type, [self.generate(rule.content, depth + 1)])

        else:
            raise UnsupportedRuleError(rule_type)

    def _choose(self, rule: Rule, depth: int) -> Rule:
        """Pick one alternative of a CHOICE rule."""
        if depth > self.max_depth:
            weights = self.sample_weights(rule)
            return weighted_choice(self.rng, rule.members, weights)
        return uniform_choice(self.rng, rule.members)

    def sample_weights(self, rule: Rule):
        """Weights for a CHOICE rule's alternatives, inverse to their expected depth."""
        def compute():
            weights = []
            for member in rule.members:
                d = self.expected_depth(member)
                weights.append(1 / (INFINITE_DEPTH_WEIGHT if math.isinf(d) else d))
            logger.debug(f"Sample weights for rule {rule.index}: {weights}")
            return weights

        return self.cache.get_or_compute(self.cache.sample_weights, rule, compute)

    def pattern_generator(self, rule: Rule) -> PatternGenerator:
        """The cached string generator for a PATTERN rule."""
        return self.cache.get_or_compute(
            self.cache.pattern_generators, rule,
            lambda: PatternGenerator(rule.value, self.max_regex_repeat, self.rng),
        )

    def expected_depth(self, rule: Rule, symbol_stack: Sequence[str] = ()) -> float:
        """
        Estimate how deep the expansion of a rule goes.

        The estimate is computed once per rule and memoized. A symbol that is
        already being resolved further up the stack is a cycle and counts as
        infinitely deep.

        Args:
            rule: Rule to estimate
            symbol_stack: Names of the symbols currently being resolved

        Returns:
            Expected depth (a positive number, or math.inf)
        """
        return self.cache.get_or_compute(
            self.cache.expected_depths, rule,
            lambda: self._compute_expected_depth(rule, symbol_stack),
        )

    def _compute_expected_depth(self, rule: Rule, symbol_stack: Sequence[str]) -> float:
        rule_type = rule.rule_type

        if rule.is_terminal:
            return 1

        if rule_type == RuleType.SYMBOL:
            if rule.name in symbol_stack:
                return math.inf
            target = self.grammar.lookup(rule.name)
            return 1 + self.expected_depth(target, (*symbol_stack, rule.name))

        if rule_type == RuleType.SEQ:
            return 1 + max(self.expected_depth(r, symbol_stack) for r in rule.members)

        if rule_type == RuleType.CHOICE:
            depths = [self.expected_depth(r, symbol_stack) for r in rule.members]
            return 1 + sum(depths) / len(depths)

        if rule_type in CONTENT_TYPES:
            return 1 + self.expected_depth(rule.content, symbol_stack)

        raise UnsupportedRuleError(rule_type)
