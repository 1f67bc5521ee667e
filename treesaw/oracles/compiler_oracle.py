"""
Compiler process oracle.

Runs a compiler (or any command) with the generated program on its
standard input and reports a failure whenever it exits with a nonzero
status.
"""

import subprocess
import logging

import psutil

from ..errors import OracleSetupError
from .base import Oracle, OracleVerdict

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Compiler error:\n"


def kill_process_tree(pid):
    """Kill a process and all of its descendants."""
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return

    processes = parent.children(recursive=True) + [parent]
    for process in processes:
        try:
            process.kill()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass
    psutil.wait_procs(processes, timeout=5)


class CompilerOracle(Oracle):
    """Oracle that fails programs a compiler command rejects."""

    name = "compiler"

    def __init__(self, command, timeout=None):
        """
        Args:
            command: Command line (split on whitespace) or argument list
            timeout: Seconds to wait for the compiler, or None to wait forever
        """
        self.args = command.split() if isinstance(command, str) else list(command)
        if not self.args:
            raise OracleSetupError("Compiler command line is empty")
        self.timeout = timeout
        self.invocations = 0

    def run(self, source):
        """
        Run the compiler on source.

        Returns:
            tuple: (returncode, output) where output is stdout followed by stderr;
            returncode is None if the compiler timed out
        """
        self.invocations += 1
        try:
            process = subprocess.Popen(
                self.args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise OracleSetupError(f"Cannot start compiler {self.args[0]!r}: {e}") from e

        try:
            stdout, stderr = process.communicate(source.encode('utf-8'), timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Compiler timed out after {self.timeout} seconds")
            kill_process_tree(process.pid)
            process.communicate()
            return None, f"timed out after {self.timeout}s"

        output = stdout.decode('utf-8', errors='replace') + stderr.decode('utf-8', errors='replace')
        return process.returncode, output

    def check(self, source):
        returncode, output = self.run(source)
        if returncode != 0:
            logger.debug(f"Compiler exited with status {returncode}")
            return OracleVerdict.failure(ERROR_PREFIX + output.strip())
        return OracleVerdict.passed()
