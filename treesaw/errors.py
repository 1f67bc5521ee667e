"""
Exceptions for tree-saw.

Only configuration problems are raised as exceptions. Errors reported by an
oracle are what the fuzzer is looking for and travel as data instead.
"""


class TreeSawError(Exception):
    """Base class for all tree-saw errors."""


class ConfigError(TreeSawError):
    """An option has an invalid value."""


class GrammarError(TreeSawError):
    """The grammar document is malformed or cannot be loaded."""


class ExternalSymbolsError(GrammarError):
    """The grammar declares external symbols, which cannot be generated."""

    def __init__(self, externals):
        self.externals = list(externals)
        super().__init__(
            "Grammar contains external symbols; such grammars are not supported "
            f"({len(self.externals)} declared)"
        )


class UnsupportedRuleError(GrammarError):
    """A rule uses a type the generator does not understand."""

    def __init__(self, rule_type):
        self.rule_type = rule_type
        super().__init__(f"Unrecognized rule type: {rule_type}")


class UnknownSymbolError(GrammarError):
    """A SYMBOL rule refers to a name the grammar does not define."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown symbol: {name}")


class OracleSetupError(TreeSawError):
    """An oracle could not be loaded or started."""


class AttemptsExhaustedError(TreeSawError):
    """The fuzzer gave up before finding the requested number of results."""

    def __init__(self, attempts, found, wanted):
        self.attempts = attempts
        self.found = found
        self.wanted = wanted
        super().__init__(
            f"Found {found} of {wanted} results in {attempts} attempts"
        )
