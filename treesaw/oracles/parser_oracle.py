"""
Tree-sitter parse oracle.

Parses generated programs with a tree-sitter language binding and reports
a failure whenever the syntax tree contains an error node.
"""

import importlib
import logging

from tree_sitter import Language, Parser

from ..errors import OracleSetupError
from .base import Oracle, OracleVerdict

logger = logging.getLogger(__name__)

AST_ERROR = "AST error"


def load_language(module_name):
    """
    Load a tree-sitter language from its Python binding.

    Args:
        module_name: Name of the binding module, e.g. ``tree_sitter_javascript``

    Returns:
        tree_sitter.Language
    """
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise OracleSetupError(f"Cannot import tree-sitter grammar {module_name!r}: {e}") from e

    if not hasattr(module, 'language'):
        raise OracleSetupError(f"Module {module_name!r} is not a tree-sitter grammar binding")

    return Language(module.language())


class ParserOracle(Oracle):
    """Oracle that fails programs the tree-sitter parser cannot parse cleanly."""

    name = "parser"

    def __init__(self, language):
        """
        Args:
            language: tree_sitter.Language or the name of its binding module
        """
        if isinstance(language, str):
            self.module_name = language
            language = load_language(language)
        else:
            self.module_name = None
        self.language = language
        self.parser = Parser(language)
        logger.debug(f"Parser oracle ready for {self.module_name or language!r}")

    def parse(self, source):
        return self.parser.parse(source.encode('utf-8'))

    def check(self, source):
        tree = self.parse(source)
        if tree.root_node.has_error:
            return OracleVerdict.failure(AST_ERROR)
        return OracleVerdict.passed()

    def describe(self, source):
        """Return the S-expression of the parsed program."""
        return str(self.parse(source).root_node)
