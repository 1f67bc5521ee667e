#!/usr/bin/env python3
"""
tree-saw CLI

Command-line interface for tree-saw. Generates programs from a
tree-sitter grammar file, checks them with the configured oracles and
prints each (minimized) result to stdout.
"""

import sys
import logging
import argparse

from . import __version__
from .config import (
    FuzzConfig,
    DEFAULT_RESULTS,
    DEFAULT_SEPARATOR,
    DEFAULT_DEPTH,
    DEFAULT_REPEAT,
    DEFAULT_REGEX_REPEAT,
)
from .errors import TreeSawError
from .fuzzer import TreeSawFuzzer
from .grammars import load_grammar_file
from .report import format_result
from .utils.logger import setup_logger

# Generated trees can be much deeper than the default recursion limit allows
RECURSION_LIMIT = 10000


def setup_argparse():
    """Set up command-line argument parsing."""
    parser = argparse.ArgumentParser(
        prog='tree-saw',
        description='tree-sitter and compilers testing each other',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print one random program
  tree-saw src/grammar.json

  # Find programs the tree-sitter parser rejects
  tree-saw src/grammar.json --grammar tree_sitter_javascript --results 5

  # Find programs a compiler rejects, reproducibly
  tree-saw src/grammar.json --compiler "node --check -" --seed 42
  """
    )

    parser.add_argument('grammar_file', metavar='grammar-json-file',
                        help='tree-sitter grammar.json to generate programs from')
    parser.add_argument('--compiler', metavar='COMMAND',
                        help='command line of compiler to pass output to')
    parser.add_argument('--grammar', metavar='MODULE',
                        help='name of tree-sitter grammar module used to parse output')
    parser.add_argument('--results', type=int, default=DEFAULT_RESULTS,
                        help='number of results to find before exiting')
    parser.add_argument('--separator', default=DEFAULT_SEPARATOR,
                        help='string used to separate grammar tokens in output')
    parser.add_argument('--depth', type=int, default=DEFAULT_DEPTH,
                        help='recursion depth after which to apply depth control heuristics')
    parser.add_argument('--repeat', type=float, default=DEFAULT_REPEAT,
                        help='mean of Poisson distribution from which REPEAT lengths are drawn')
    parser.add_argument('--regex-repeat', type=int, default=DEFAULT_REGEX_REPEAT,
                        help='maximum free length to which to expand repetitions in regular expressions')
    parser.add_argument('--seed', type=int,
                        help='seed for all random draws, for reproducible runs')
    parser.add_argument('--timeout', type=float,
                        help='seconds after which a compiler run counts as failed')
    parser.add_argument('--max-attempts', type=int,
                        help='give up after generating this many programs')
    parser.add_argument('--output-dir',
                        help='directory where each result is also saved as JSON')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='console logging level (logs go to stderr)')
    parser.add_argument('--log-dir', help='directory for a detailed log file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def main(argv=None):
    """Main entry point."""
    parser = setup_argparse()
    args = parser.parse_args(argv)

    logger = setup_logger(
        name='treesaw',
        log_dir=args.log_dir,
        console_level=getattr(logging, args.log_level),
        verbose=args.log_level == 'DEBUG',
    )

    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    try:
        config = FuzzConfig.from_args(args).validate()
        logger.debug(f"Configuration: {config!r}")

        grammar = load_grammar_file(args.grammar_file)
        with TreeSawFuzzer(grammar, config) as fuzzer:
            for result in fuzzer.run():
                sys.stdout.write(format_result(result))
                sys.stdout.flush()

        logger.info(f"Done: {fuzzer.stats['results']} result(s) from "
                    f"{fuzzer.stats['attempts']} attempts, "
                    f"{fuzzer.stats['oracle_calls']} oracle calls")
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except TreeSawError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
