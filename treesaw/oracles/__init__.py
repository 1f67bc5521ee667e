"""
Oracle Package for tree-saw

Oracles decide whether a generated program exposes a bug: a tree-sitter
parser that cannot parse it, or a compiler that rejects it.
"""

from .base import Oracle, OracleVerdict
from .compiler_oracle import CompilerOracle


def build_oracles(config):
    """
    Create the oracles named in a configuration.

    The parse oracle comes first, so its verdict wins when both fail.

    Args:
        config: FuzzConfig

    Returns:
        list: Configured oracles (empty if none)
    """
    oracles = []
    if config.grammar is not None:
        from .parser_oracle import ParserOracle
        oracles.append(ParserOracle(config.grammar))
    if config.compiler is not None:
        oracles.append(CompilerOracle(config.compiler, timeout=config.timeout))
    return oracles
