"""
Collapse "perf script" stack samples into folded stacks:
one line per unique stack, frames joined by ';' from root to leaf,
followed by a space and a count.
"""

from perfcollapse.perfscript import CollapseState, collapse
from perfcollapse.config import Options
from perfcollapse.folded import FoldedStacks

__version__ = '1.0.0'
