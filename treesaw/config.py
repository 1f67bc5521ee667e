"""
Configuration for tree-saw

This module holds the defaults for every recognized option and the
FuzzConfig object passed between the command line, the generator and the
reduction loop.
"""

from .errors import ConfigError

# Constants
DEFAULT_RESULTS = 1
DEFAULT_SEPARATOR = " "
DEFAULT_DEPTH = 10
DEFAULT_REPEAT = 5.0
DEFAULT_REGEX_REPEAT = 5


class FuzzConfig:
    """Options controlling generation, oracles and the reduction loop."""

    def __init__(self, results=DEFAULT_RESULTS, separator=DEFAULT_SEPARATOR,
                 depth=DEFAULT_DEPTH, repeat=DEFAULT_REPEAT,
                 regex_repeat=DEFAULT_REGEX_REPEAT, grammar=None, compiler=None,
                 seed=None, timeout=None, max_attempts=None, output_dir=None):
        """
        Initialize the configuration.

        Args:
            results: Number of results to find before stopping
            separator: String used to join grammar tokens in the output
            depth: Recursion depth after which depth control heuristics apply
            repeat: Mean of the Poisson distribution for REPEAT lengths
            regex_repeat: Maximum free repetitions when expanding patterns
            grammar: Tree-sitter language module used as the parse oracle
            compiler: Command line of the compiler oracle
            seed: Seed for every random draw, or None for a random run
            timeout: Seconds before a compiler invocation is abandoned
            max_attempts: Give up after this many generated candidates
            output_dir: Directory where results are saved as JSON files
        """
        self.results = results
        self.separator = separator
        self.depth = depth
        self.repeat = repeat
        self.regex_repeat = regex_repeat
        self.grammar = grammar
        self.compiler = compiler
        self.seed = seed
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.output_dir = output_dir

    @property
    def can_check_error(self):
        """True when at least one oracle is configured."""
        return self.grammar is not None or self.compiler is not None

    def validate(self):
        """Raise ConfigError if any option is out of range."""
        if self.results < 1:
            raise ConfigError(f"results must be at least 1, got {self.results}")
        if self.depth < 0:
            raise ConfigError(f"depth must not be negative, got {self.depth}")
        if self.repeat < 0:
            raise ConfigError(f"repeat must not be negative, got {self.repeat}")
        if self.regex_repeat < 0:
            raise ConfigError(f"regex repeat must not be negative, got {self.regex_repeat}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ConfigError(f"max attempts must be at least 1, got {self.max_attempts}")
        if self.compiler is not None:
            args = self.compiler.split() if isinstance(self.compiler, str) else list(self.compiler)
            if not args:
                raise ConfigError("compiler command line is empty")
        return self

    @classmethod
    def from_args(cls, args):
        """Create a configuration from parsed command-line arguments."""
        return cls(
            results=args.results,
            separator=args.separator,
            depth=args.depth,
            repeat=args.repeat,
            regex_repeat=args.regex_repeat,
            grammar=args.grammar,
            compiler=args.compiler,
            seed=args.seed,
            timeout=args.timeout,
            max_attempts=args.max_attempts,
            output_dir=args.output_dir,
        )

    def to_dict(self):
        """Convert the configuration to a dictionary."""
        return dict(vars(self))

    def __repr__(self):
        options = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"FuzzConfig({options})"
