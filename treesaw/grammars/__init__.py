"""
Grammar Package for tree-saw

This package loads tree-sitter style grammar documents (JSON) into the
in-memory grammar model used by the generator.
"""

import os
import json
import logging

from ..errors import GrammarError
from .rules import (
    Grammar,
    Rule,
    RuleType,
    TERMINAL_TYPES,
    WRAPPER_TYPES,
    REPEAT_TYPES,
)

logger = logging.getLogger(__name__)

# Storage for loaded grammar files
_grammar_cache = {}


def load_grammar(data):
    """
    Build a grammar from a JSON document.

    Args:
        data: Grammar document as a JSON string or an already parsed dict

    Returns:
        Grammar: The loaded grammar
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise GrammarError(f"Invalid grammar JSON: {e}") from e

    grammar = Grammar.from_dict(data)
    logger.debug(f"Loaded grammar {grammar.name!r}: {len(grammar.definitions)} definitions, "
                 f"{len(grammar)} rules")
    return grammar


def load_grammar_file(path, use_cache=True):
    """
    Load a grammar from a JSON file.

    Args:
        path: Path to the grammar file
        use_cache: Return the previously loaded grammar for the same file

    Returns:
        Grammar: The loaded grammar
    """
    key = os.path.abspath(path)
    if use_cache and key in _grammar_cache:
        return _grammar_cache[key]

    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise GrammarError(f"Cannot read grammar file {path}: {e}") from e

    grammar = load_grammar(text)
    logger.info(f"Loaded grammar file {path}")

    if use_cache:
        _grammar_cache[key] = grammar
    return grammar


def clear_cache():
    """Forget every grammar loaded from a file."""
    _grammar_cache.clear()
