import sys

import pytest

from treesaw.oracles import Oracle, OracleVerdict

from grammar_builders import choice, make_grammar, repeat, repeat1, seq, string, symbol


class PredicateOracle(Oracle):
    """Fails every program for which predicate(source) returns a message."""

    name = "predicate"

    def __init__(self, predicate, dump=None):
        self.predicate = predicate
        self.dump = dump
        self.calls = []

    def check(self, source):
        self.calls.append(source)
        message = self.predicate(source)
        if message:
            return OracleVerdict.failure(message)
        return OracleVerdict.passed()

    def describe(self, source):
        if self.dump is None:
            return None
        return self.dump(source)


@pytest.fixture
def predicate_oracle():
    return PredicateOracle


@pytest.fixture
def ab_grammar():
    """The literal a followed by one or more b."""
    return make_grammar({"S": seq(string("a"), repeat1(string("b")))})


@pytest.fixture
def xy_grammar():
    """Choice between the literals x and y."""
    return make_grammar({"S": choice(string("x"), string("y"))})


@pytest.fixture
def paren_grammar():
    """A parenthesized repetition of a."""
    return make_grammar({"S": seq(string("("), repeat(string("a")), string(")"))})


@pytest.fixture
def expr_grammar():
    """A recursive expression grammar."""
    return make_grammar({
        "program": repeat1(symbol("expr")),
        "expr": choice(
            seq(string("("), symbol("expr"), string(")")),
            seq(symbol("expr"), string("+"), symbol("expr")),
            string("x"),
        ),
    })


@pytest.fixture
def python_command():
    """Build an argument list running a Python snippet."""
    def build(code):
        return [sys.executable, "-c", code]
    return build
