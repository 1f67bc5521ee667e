"""
tree-saw: tree-sitter grammars and compilers testing each other

This module ties generation and minimization together. Random programs
are generated from a grammar and checked by the configured oracles. A
program that makes an oracle fail is shrunk, one pruning cut at a time,
for as long as some oracle keeps failing on it, and is then reported.

Features:
- Depth-controlled random generation from tree-sitter grammars
- Parse oracle (tree-sitter) and compiler oracle (any command)
- Automatic minimization of failing programs
- Reproducible runs from a single seed
"""

import time
import logging

from .config import FuzzConfig
from .errors import AttemptsExhaustedError
from .oracles import build_oracles
from .report import FuzzResult, save_result
from .structure import Generator

logger = logging.getLogger(__name__)


class TreeSawFuzzer:
    """Generates programs until enough of them make an oracle fail."""

    def __init__(self, grammar, config=None, oracles=None, generator=None):
        """
        Initialize the fuzzer.

        Args:
            grammar: Grammar to generate programs from
            config: FuzzConfig (default options if omitted)
            oracles: Oracles to consult (built from config if omitted)
            generator: Generator to use (built from config if omitted)
        """
        self.config = (config if config is not None else FuzzConfig()).validate()
        self.grammar = grammar

        if generator is None:
            generator = Generator(
                grammar,
                max_depth=self.config.depth,
                mean_repeat=self.config.repeat,
                max_regex_repeat=self.config.regex_repeat,
                seed=self.config.seed,
            )
        self.generator = generator
        self.oracles = build_oracles(self.config) if oracles is None else list(oracles)

        self.stats = {
            'status': 'idle',
            'attempts': 0,
            'results': 0,
            'oracle_calls': 0,
            'pruning_steps': 0,
            'start_time': None,
            'end_time': None
        }

    @property
    def can_check_error(self):
        return bool(self.oracles)

    def get_error(self, source):
        """
        Ask the oracles about a program.

        Returns:
            str: Message of the first failing oracle, or None if all pass
        """
        self.stats['oracle_calls'] += 1
        for oracle in self.oracles:
            verdict = oracle.check(source)
            if verdict.failed:
                return verdict.message
        return None

    def describe(self, source):
        """Return the first tree dump an oracle provides for source."""
        for oracle in self.oracles:
            dump = oracle.describe(source)
            if dump is not None:
                return dump
        return None

    def minimize(self, tree, source, error):
        """
        Shrink a failing program.

        The first pruned variant that still makes some oracle fail replaces
        the current tree, and its error replaces the current error. Pruning
        then restarts from the smaller tree, until no variant fails.

        Args:
            tree: Root node of the failing program
            source: Serialized program
            error: Error reported for source

        Returns:
            tuple: (tree, source, error, steps) for the minimized program
        """
        separator = self.config.separator
        steps = 0

        while True:
            for candidate in tree.prune():
                candidate_source = candidate.to_string(separator)
                candidate_error = self.get_error(candidate_source)
                if candidate_error is not None:
                    tree, source, error = candidate, candidate_source, candidate_error
                    steps += 1
                    break
            else:
                break

        self.stats['pruning_steps'] += steps
        logger.info(f"Minimization finished after {steps} cuts: {tree.token_count()} tokens, "
                    f"{tree.size()} nodes, depth {tree.depth()}")
        return tree, source, error, steps

    def _next_attempt(self):
        max_attempts = self.config.max_attempts
        if max_attempts is not None and self.stats['attempts'] >= max_attempts:
            raise AttemptsExhaustedError(self.stats['attempts'], self.stats['results'],
                                         self.config.results)
        self.stats['attempts'] += 1

    def find_result(self):
        """
        Generate programs until one is accepted.

        Without oracles every program is accepted as is. With oracles, only
        a program that makes one of them fail is accepted, after it has been
        minimized.

        Returns:
            FuzzResult
        """
        separator = self.config.separator
        attempts = 0

        while True:
            self._next_attempt()
            attempts += 1

            tree = self.generator.generate()
            source = tree.to_string(separator)

            if not self.can_check_error:
                return FuzzResult(source, attempts=attempts)

            error = self.get_error(source)
            if error is None:
                logger.debug(f"Attempt {attempts}: no error ({len(source)} chars)")
                continue

            logger.info(f"Attempt {attempts}: oracle error, minimizing {tree.token_count()} tokens")
            original_source = source
            tree, source, error, steps = self.minimize(tree, source, error)

            return FuzzResult(
                source,
                error=error,
                tree_dump=self.describe(source),
                attempts=attempts,
                pruning_steps=steps,
                original_source=original_source,
            )

    def run(self):
        """
        Find the configured number of results.

        Yields:
            FuzzResult: Each result as soon as it is found
        """
        self.stats['status'] = 'running'
        self.stats['start_time'] = time.time()
        logger.info(f"Looking for {self.config.results} result(s)")

        try:
            while self.stats['results'] < self.config.results:
                result = self.find_result()
                self.stats['results'] += 1

                if self.config.output_dir:
                    save_result(result, self.config.output_dir, self.stats['results'])

                logger.info(f"Result {self.stats['results']}/{self.config.results} found "
                            f"after {result.attempts} attempts")
                yield result
            self.stats['status'] = 'completed'
        except Exception:
            self.stats['status'] = 'failed'
            raise
        finally:
            self.stats['end_time'] = time.time()

    def close(self):
        """Release oracle resources."""
        for oracle in self.oracles:
            oracle.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
