"""
Structure Package

This package turns grammars into concrete syntax trees and shrinks those
trees. It holds the tree model, the random generator and the per-rule
caches the generator relies on.
"""

from .tree import Node
from .derived import RuleCache
from .patterns import PatternGenerator
from .generator import Generator
