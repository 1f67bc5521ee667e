#!/usr/bin/env python3
"""
Concrete Tree for tree-saw

This module provides the syntax tree produced by the generator. Besides
serialization, a tree can enumerate smaller variants of itself, which is
the primitive the fuzzer uses to shrink failing test cases.
"""

import copy
from typing import Iterator, List, Union

from ..grammars.rules import RuleType


class Node:
    """A node of a generated syntax tree."""

    def __init__(self, rule_type: RuleType, contents: Union[str, List['Node']]):
        """
        Initialize a node.

        Args:
            rule_type: Type of the rule that produced the node
            contents: Text for terminals, list of child nodes otherwise
        """
        self.rule_type = rule_type
        self.contents = contents

    @property
    def is_terminal(self) -> bool:
        return isinstance(self.contents, str)

    @property
    def children(self) -> List['Node']:
        return [] if self.is_terminal else self.contents

    def tokens(self) -> List[str]:
        """
        Flatten the tree into its terminal texts in document order.

        Empty terminals are kept as zero-length tokens.
        """
        result = []
        stack = [self]
        while stack:
            node = stack.pop()
            if node.is_terminal:
                result.append(node.contents)
            else:
                stack.extend(reversed(node.contents))
        return result

    def to_list(self):
        """Return the nested list form of the tree."""
        if self.is_terminal:
            return [self.contents]
        return [child.to_list() for child in self.contents]

    def to_string(self, separator: str = " ") -> str:
        """Join all tokens with the given separator."""
        return separator.join(self.tokens())

    def token_count(self) -> int:
        return len(self.tokens())

    def size(self) -> int:
        """Total number of nodes in the tree."""
        return 1 + sum(child.size() for child in self.children)

    def depth(self) -> int:
        if self.is_terminal or not self.contents:
            return 1
        return 1 + max(child.depth() for child in self.contents)

    def copy(self) -> 'Node':
        """Return an independent deep copy of the tree."""
        return copy.deepcopy(self)

    def _can_drop_child(self) -> bool:
        length = len(self.contents)
        if self.rule_type == RuleType.REPEAT:
            return length > 0
        if self.rule_type == RuleType.REPEAT1:
            return length > 1
        return False

    def prune(self) -> Iterator['Node']:
        """
        Yield smaller variants of the tree, one cut at a time.

        First, if this node is a repetition that can lose a child, each child
        is removed in turn. Then every variant of each child is substituted
        in place of that child. Each variant is a deep copy, so callers may
        keep or modify it freely. The consumer ends the search by no longer
        pulling from the iterator.
        """
        if self.is_terminal:
            return

        if self._can_drop_child():
            for i in range(len(self.contents)):
                tree = self.copy()
                del tree.contents[i]
                yield tree

        for i, child in enumerate(self.contents):
            for variant in child.prune():
                tree = self._copy_without_child(i)
                tree.contents[i] = variant
                yield tree

    def _copy_without_child(self, index: int) -> 'Node':
        """Deep copy this node, except for the child at index."""
        contents = [None if i == index else copy.deepcopy(child)
                    for i, child in enumerate(self.contents)]
        return Node(self.rule_type, contents)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.rule_type == other.rule_type and self.contents == other.contents

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        type_name = getattr(self.rule_type, 'value', self.rule_type)
        if self.is_terminal:
            return f"Node({type_name}, {self.contents!r})"
        return f"Node({type_name}, {len(self.contents)} children)"
