"""
Utilities for tree-saw: logging setup and random distributions.
"""

from .logger import setup_logger
from .distributions import poisson, uniform_choice, weighted_choice
