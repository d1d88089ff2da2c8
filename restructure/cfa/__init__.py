""" Control flow analysis.

Recovery of high-level control flow primitives from control flow graphs.
Two methods are available:

- hammock: repeatedly reduce single entry, single exit regions
- interval: reduce within intervals of the derived sequence of graphs

"""

from .primitive import Primitive, PrimitiveRecord
from .patterns import CATALOGUE, KINDS, find_match
from .observer import StepObserver
from . import hammock, interval


__all__ = (
    'Primitive', 'PrimitiveRecord', 'CATALOGUE', 'KINDS', 'find_match',
    'StepObserver', 'hammock', 'interval')
