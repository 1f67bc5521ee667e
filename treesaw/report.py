"""
Result records for tree-saw

This module holds the record emitted for each result, its text framing
for the console and its JSON form for result files.
"""

import os
import json
import logging
from datetime import datetime

logger = logging.getLogger(__name__)


class FuzzResult:
    """A (possibly minimized) generated program and why it was kept."""

    def __init__(self, source, error=None, tree_dump=None, attempts=0,
                 pruning_steps=0, original_source=None):
        """
        Args:
            source: Program text
            error: Final oracle error, or None when no oracle is configured
            tree_dump: Parse tree of source from the parse oracle, if any
            attempts: Candidates generated to find this result
            pruning_steps: Accepted cuts during minimization
            original_source: Program text before minimization
        """
        self.source = source
        self.error = error
        self.tree_dump = tree_dump
        self.attempts = attempts
        self.pruning_steps = pruning_steps
        self.original_source = original_source if original_source is not None else source

    def to_dict(self):
        return {
            'source': self.source,
            'error': self.error,
            'tree': self.tree_dump,
            'attempts': self.attempts,
            'pruning_steps': self.pruning_steps,
            'original_source': self.original_source,
        }

    def __repr__(self):
        return f"FuzzResult(source={self.source!r}, error={self.error!r})"


def format_result(result):
    """Frame a result in the marker format printed on stdout."""
    lines = [">>>>>RESULT", ">>>>>SOURCE", result.source, "<<<<<SOURCE"]

    if result.tree_dump is not None:
        lines += [">>>>>AST", result.tree_dump, "<<<<<AST"]

    if result.error is not None:
        lines += [">>>>>ERROR", result.error, "<<<<<ERROR"]

    lines.append("<<<<<RESULT")
    return "\n".join(lines) + "\n"


def save_result(result, output_dir, index):
    """
    Save a result as a JSON file.

    Args:
        result: FuzzResult to save
        output_dir: Directory for result files (created if needed)
        index: Sequence number of the result in this run

    Returns:
        str: Path of the written file
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"result_{index:04d}.json")

    data = result.to_dict()
    data['saved_at'] = datetime.now().isoformat()

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)

    logger.info(f"Saved result to {path}")
    return path
