#!/usr/bin/env python3
"""
Grammar Model for tree-saw

This module provides the in-memory representation of a tree-sitter style
grammar: an arena of rule records addressed by a stable index, plus the
mapping from rule names to the root rule of each definition. Symbol
references are kept by name, so recursive grammars need no cyclic links.
"""

import enum
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..errors import GrammarError, UnknownSymbolError, UnsupportedRuleError


class RuleType(enum.Enum):
    """Rule types found in grammar documents."""
    BLANK = "BLANK"
    STRING = "STRING"
    PATTERN = "PATTERN"
    SYMBOL = "SYMBOL"
    SEQ = "SEQ"
    CHOICE = "CHOICE"
    ALIAS = "ALIAS"
    REPEAT = "REPEAT"
    REPEAT1 = "REPEAT1"

    # Annotations that pass generation through to their content
    TOKEN = "TOKEN"
    IMMEDIATE_TOKEN = "IMMEDIATE_TOKEN"
    FIELD = "FIELD"
    PREC = "PREC"
    PREC_LEFT = "PREC_LEFT"
    PREC_RIGHT = "PREC_RIGHT"
    PREC_DYNAMIC = "PREC_DYNAMIC"


TERMINAL_TYPES = frozenset({RuleType.BLANK, RuleType.STRING, RuleType.PATTERN})

WRAPPER_TYPES = frozenset({
    RuleType.ALIAS,
    RuleType.TOKEN,
    RuleType.IMMEDIATE_TOKEN,
    RuleType.FIELD,
    RuleType.PREC,
    RuleType.PREC_LEFT,
    RuleType.PREC_RIGHT,
    RuleType.PREC_DYNAMIC,
})

REPEAT_TYPES = frozenset({RuleType.REPEAT, RuleType.REPEAT1})

# Rule types that carry a single content rule
CONTENT_TYPES = WRAPPER_TYPES | REPEAT_TYPES


class Rule:
    """A single node of the grammar model."""

    def __init__(self, index: int, rule_type: RuleType, value: Any = None,
                 name: Optional[str] = None, members: Sequence['Rule'] = (),
                 content: Optional['Rule'] = None):
        """
        Initialize a rule.

        Args:
            index: Stable identity of the rule within its grammar
            rule_type: Type of the rule
            value: Literal text (STRING), regular expression (PATTERN),
                alias name (ALIAS) or precedence (PREC*)
            name: Target rule name (SYMBOL) or field name (FIELD)
            members: Child rules (SEQ, CHOICE)
            content: Wrapped or repeated rule
        """
        self.index = index
        self.rule_type = rule_type
        self.value = value
        self.name = name
        self.members = tuple(members)
        self.content = content

    @property
    def is_terminal(self) -> bool:
        return self.rule_type in TERMINAL_TYPES

    def __repr__(self):
        type_name = getattr(self.rule_type, 'value', self.rule_type)
        if self.rule_type == RuleType.SYMBOL:
            return f"Rule({self.index}, {type_name}, name={self.name!r})"
        if self.rule_type in (RuleType.STRING, RuleType.PATTERN):
            return f"Rule({self.index}, {type_name}, value={self.value!r})"
        return f"Rule({self.index}, {type_name})"


class Grammar:
    """An arena of rules and the named definitions that root them."""

    def __init__(self, name: Optional[str] = None,
                 externals: Optional[List[Any]] = None):
        self.name = name
        self.externals = list(externals or [])
        self.rules: List[Rule] = []
        self.definitions: Dict[str, Rule] = {}

    @property
    def start_rule(self) -> Rule:
        """The first declared rule."""
        if not self.definitions:
            raise GrammarError("Grammar has no rules")
        return next(iter(self.definitions.values()))

    @property
    def start_name(self) -> str:
        return next(iter(self.definitions))

    def lookup(self, name: str) -> Rule:
        """Resolve a rule name to its definition."""
        try:
            return self.definitions[name]
        except KeyError:
            raise UnknownSymbolError(name) from None

    def __len__(self):
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def add_rule(self, rule_type: RuleType, **kwargs) -> Rule:
        """Append a new rule to the arena and return it."""
        rule = Rule(len(self.rules), rule_type, **kwargs)
        self.rules.append(rule)
        return rule

    def define(self, name: str, rule: Rule) -> Rule:
        """Register rule as the definition of name."""
        if name in self.definitions:
            raise GrammarError(f"Rule defined twice: {name}")
        self.definitions[name] = rule
        return rule

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Grammar':
        """Create a grammar from a parsed grammar document."""
        if not isinstance(data, dict):
            raise GrammarError("Grammar document must be an object")

        rules = data.get("rules")
        if not isinstance(rules, dict) or not rules:
            raise GrammarError("Grammar document has no rules")

        grammar = cls(name=data.get("name"), externals=data.get("externals"))
        for name, definition in rules.items():
            grammar.define(name, grammar._build_rule(definition, name))
        return grammar

    def _build_rule(self, data: Dict[str, Any], path: str) -> Rule:
        """Recursively add a rule definition and its nested rules."""
        if not isinstance(data, dict) or "type" not in data:
            raise GrammarError(f"{path}: rule must be an object with a type")

        try:
            rule_type = RuleType(data["type"])
        except ValueError:
            raise UnsupportedRuleError(data["type"]) from None

        if rule_type == RuleType.BLANK:
            return self.add_rule(rule_type)

        if rule_type in (RuleType.STRING, RuleType.PATTERN):
            value = _require(data, "value", path, rule_type)
            if not isinstance(value, str):
                raise GrammarError(f"{path}: {rule_type.value} value must be a string")
            return self.add_rule(rule_type, value=value)

        if rule_type == RuleType.SYMBOL:
            return self.add_rule(rule_type, name=_require(data, "name", path, rule_type))

        if rule_type in (RuleType.SEQ, RuleType.CHOICE):
            members = _require(data, "members", path, rule_type)
            if not isinstance(members, list) or not members:
                raise GrammarError(f"{path}: {rule_type.value} needs at least one member")
            built = [self._build_rule(member, f"{path}/{i}") for i, member in enumerate(members)]
            return self.add_rule(rule_type, members=built)

        # Wrappers and repeats
        content = self._build_rule(_require(data, "content", path, rule_type), f"{path}/content")
        return self.add_rule(
            rule_type,
            value=data.get("value"),
            name=data.get("name"),
            content=content,
        )


def _require(data, key, path, rule_type):
    if key not in data:
        raise GrammarError(f"{path}: {rule_type.value} rule is missing '{key}'")
    return data[key]
