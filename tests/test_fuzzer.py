"""
Tests for the generate / check / minimize loop.
"""

import json
import logging
import os

import pytest

from treesaw.config import FuzzConfig
from treesaw.errors import AttemptsExhaustedError, ConfigError, ExternalSymbolsError
from treesaw.fuzzer import TreeSawFuzzer
from treesaw.grammars import RuleType
from treesaw.oracles import CompilerOracle
from treesaw.report import format_result
from treesaw.structure import Node

from grammar_builders import choice, make_grammar, pattern, repeat, seq, string, symbol


def run(grammar, oracles, **options):
    fuzzer = TreeSawFuzzer(grammar, FuzzConfig(**options), oracles=oracles)
    return fuzzer, list(fuzzer.run())


class TestWithoutOracles:
    def test_every_program_is_a_result(self, ab_grammar):
        fuzzer, results = run(ab_grammar, [], seed=1)
        assert len(results) == 1
        tokens = results[0].source.split(" ")
        assert tokens[0] == "a"
        assert len(tokens) >= 2
        assert set(tokens[1:]) == {"b"}
        assert results[0].error is None
        assert results[0].tree_dump is None
        assert fuzzer.stats['attempts'] == 1
        assert fuzzer.stats['oracle_calls'] == 0

    def test_requested_number_of_results(self, ab_grammar):
        fuzzer, results = run(ab_grammar, [], seed=2, results=4)
        assert len(results) == 4
        assert fuzzer.stats['results'] == 4
        assert fuzzer.stats['status'] == 'completed'

    def test_separator(self, ab_grammar):
        _, results = run(ab_grammar, [], seed=3, separator="")
        assert results[0].source.startswith("ab")
        assert " " not in results[0].source


class TestWithOracles:
    def test_only_failing_programs_are_reported(self, xy_grammar, predicate_oracle):
        oracle = predicate_oracle(lambda s: "AST error" if s == "y" else None,
                                  dump=lambda s: f"(source {s})")
        fuzzer, results = run(xy_grammar, [oracle], seed=5, max_attempts=1000)
        assert len(results) == 1
        assert results[0].source == "y"
        assert results[0].error == "AST error"
        assert results[0].tree_dump == "(source y)"
        assert fuzzer.stats['attempts'] == results[0].attempts
        assert oracle.calls.count("x") == results[0].attempts - 1

    def test_minimization_stops_at_one_repetition(self, paren_grammar, predicate_oracle):
        oracle = predicate_oracle(lambda s: "nonempty" if "a" in s.split() else None)
        _, results = run(paren_grammar, [oracle], seed=6, repeat=8, results=3, max_attempts=1000)
        for result in results:
            assert result.source == "( a )"
            assert result.error == "nonempty"
            assert result.original_source.split().count("a") >= 1

    def test_accepted_cuts_shrink_the_program(self, paren_grammar, predicate_oracle):
        oracle = predicate_oracle(lambda s: "boom" if s.count("a") >= 2 else None)
        fuzzer, results = run(paren_grammar, [oracle], seed=7, repeat=10, max_attempts=1000)
        result = results[0]
        assert result.source == "( a a )"
        original = result.original_source.count("a")
        assert result.pruning_steps == original - 2
        assert fuzzer.stats['pruning_steps'] == result.pruning_steps

        token_counts = [len(call.split()) for call in oracle.calls if call.count("a") >= 2]
        assert token_counts == sorted(token_counts, reverse=True)

    def test_minimize_returns_the_cut_count(self, paren_grammar, predicate_oracle):
        oracle = predicate_oracle(lambda s: "nonempty" if "a" in s.split() else None)
        fuzzer = TreeSawFuzzer(paren_grammar, FuzzConfig(), oracles=[oracle])
        tree = Node(RuleType.SEQ, [
            Node(RuleType.STRING, "("),
            Node(RuleType.REPEAT, [Node(RuleType.STRING, "a") for _ in range(4)]),
            Node(RuleType.STRING, ")"),
        ])
        minimized, source, error, steps = fuzzer.minimize(tree, "( a a a a )", "nonempty")
        assert source == "( a )"
        assert minimized.to_string() == source
        assert error == "nonempty"
        assert steps == 3
        assert fuzzer.stats['pruning_steps'] == 3

    def test_minimization_summary_is_logged(self, paren_grammar, predicate_oracle, caplog):
        caplog.set_level(logging.DEBUG, logger="treesaw.fuzzer")
        oracle = predicate_oracle(lambda s: "nonempty" if "a" in s.split() else None)
        run(paren_grammar, [oracle], seed=6, repeat=8, max_attempts=1000)
        summaries = [r.getMessage() for r in caplog.records
                     if r.getMessage().startswith("Minimization finished")]
        assert summaries
        assert summaries[-1].endswith("3 tokens, 5 nodes, depth 3")

    def test_changed_error_replaces_the_original(self, paren_grammar, predicate_oracle):
        oracle = predicate_oracle(lambda s: f"{s.count('a')} a's" if s.count("a") else None)
        _, results = run(paren_grammar, [oracle], seed=8, repeat=6, max_attempts=1000)
        assert results[0].source == "( a )"
        assert results[0].error == "1 a's"

    def test_first_failing_oracle_wins(self, xy_grammar, predicate_oracle):
        parser = predicate_oracle(lambda s: "AST error" if s == "y" else None)
        compiler = predicate_oracle(lambda s: "Compiler error:\nbad")
        _, results = run(xy_grammar, [parser, compiler], seed=9, results=5)
        for result in results:
            expected = "AST error" if result.source == "y" else "Compiler error:\nbad"
            assert result.error == expected

    def test_nested_minimization(self, predicate_oracle):
        grammar = make_grammar({
            "program": repeat(symbol("stmt")),
            "stmt": seq(string("{"), repeat(choice(string("x"), string("bad"))), string("}")),
        })
        oracle = predicate_oracle(lambda s: "found" if "bad" in s.split() else None)
        _, results = run(grammar, [oracle], seed=10, repeat=4, max_attempts=5000)
        assert results[0].source == "{ bad }"

    def test_compiler_oracle_end_to_end(self, paren_grammar, python_command):
        oracle = CompilerOracle(python_command(
            "import sys; src = sys.stdin.read(); "
            "sys.exit(1 if src.count('a') > 0 else 0)"
        ))
        _, results = run(paren_grammar, [oracle], seed=11, max_attempts=1000)
        assert results[0].source == "( a )"
        assert results[0].error == "Compiler error:\n"

    def test_gives_up_after_max_attempts(self, xy_grammar, predicate_oracle):
        oracle = predicate_oracle(lambda s: None)
        fuzzer = TreeSawFuzzer(xy_grammar, FuzzConfig(seed=12, max_attempts=25), oracles=[oracle])
        with pytest.raises(AttemptsExhaustedError) as exc_info:
            list(fuzzer.run())
        assert exc_info.value.attempts == 25
        assert exc_info.value.found == 0
        assert fuzzer.stats['status'] == 'failed'
        assert len(oracle.calls) == 25


class TestDeterminism:
    @pytest.fixture
    def grammar(self):
        return make_grammar({
            "program": repeat(symbol("statement")),
            "statement": choice(
                seq(pattern("[a-z]{1,3}[0-9]*"), string("="), symbol("expr"), string(";")),
                seq(string("print"), symbol("expr"), string(";")),
            ),
            "expr": choice(
                pattern("[0-9]+"),
                seq(symbol("expr"), string("*"), symbol("expr")),
                seq(string("("), symbol("expr"), string(")")),
            ),
        })

    def test_same_seed_same_records(self, grammar, predicate_oracle):
        def records(seed):
            oracle = predicate_oracle(lambda s: "print" if "print" in s else None)
            _, results = run(grammar, [oracle], seed=seed, depth=4, results=3, max_attempts=1000)
            return [format_result(r) for r in results]

        assert records(21) == records(21)

    def test_same_seed_without_oracles(self, grammar):
        first = [r.source for r in run(grammar, [], seed=22, depth=4, results=5)[1]]
        second = [r.source for r in run(grammar, [], seed=22, depth=4, results=5)[1]]
        assert first == second


class TestSetup:
    def test_external_symbols_are_fatal(self, predicate_oracle):
        grammar = make_grammar({"S": string("x")}, externals=[symbol("indent")])
        with pytest.raises(ExternalSymbolsError):
            TreeSawFuzzer(grammar, FuzzConfig(), oracles=[])

    def test_invalid_config(self, xy_grammar):
        with pytest.raises(ConfigError):
            TreeSawFuzzer(xy_grammar, FuzzConfig(results=0), oracles=[])

    def test_oracles_built_from_config(self, xy_grammar):
        fuzzer = TreeSawFuzzer(xy_grammar, FuzzConfig(compiler="true"))
        assert len(fuzzer.oracles) == 1
        assert fuzzer.can_check_error

    def test_results_saved_to_output_dir(self, xy_grammar, tmp_path):
        output_dir = tmp_path / "results"
        run(xy_grammar, [], seed=13, results=2, output_dir=str(output_dir))
        files = sorted(os.listdir(output_dir))
        assert files == ["result_0001.json", "result_0002.json"]
        with open(output_dir / files[0]) as f:
            data = json.load(f)
        assert data['source'] in ("x", "y")
        assert data['error'] is None
