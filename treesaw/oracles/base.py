"""
Oracle interface.

An oracle looks at a generated program and says whether it exposes an
error. Verdicts are plain data: a failing verdict is the expected outcome
the fuzzer searches for, not an exception.
"""


class OracleVerdict:
    """Outcome of checking one program."""

    def __init__(self, failed, message=None):
        self.failed = failed
        self.message = message

    @classmethod
    def passed(cls):
        return cls(False)

    @classmethod
    def failure(cls, message):
        return cls(True, message)

    def __bool__(self):
        return self.failed

    def __repr__(self):
        if self.failed:
            return f"OracleVerdict(failed, {self.message!r})"
        return "OracleVerdict(passed)"


class Oracle:
    """Base class for parser and compiler oracles."""

    name = "oracle"

    def check(self, source):
        """Return an OracleVerdict for the given program text."""
        raise NotImplementedError("Subclasses must implement this method")

    def describe(self, source):
        """Return a human-readable dump of how the oracle sees source, if any."""
        return None

    def close(self):
        """Release resources held by the oracle."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
