"""
tree-saw - tree-sitter and compilers testing each other

Grammar-based test case generation for parsers and compilers. Random
programs are generated from a tree-sitter grammar, checked by a parse
oracle and/or a compiler oracle, and programs that expose errors are
minimized before they are reported.
"""

__version__ = "1.0.0"

from .errors import (
    TreeSawError,
    ConfigError,
    GrammarError,
    ExternalSymbolsError,
    UnsupportedRuleError,
    UnknownSymbolError,
    OracleSetupError,
    AttemptsExhaustedError,
)
from .config import FuzzConfig
from .grammars import Grammar, Rule, RuleType, load_grammar, load_grammar_file
from .structure import Node, Generator
from .oracles import Oracle, OracleVerdict, CompilerOracle, build_oracles
from .report import FuzzResult, format_result, save_result
from .fuzzer import TreeSawFuzzer
