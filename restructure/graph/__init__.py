""" Graph algorithms module.

"""

from .digraph import DiGraph, DiNode, Edge
from .cfg import ControlFlowGraph, ControlFlowNode, DominatorTree


__all__ = (
    'DiGraph', 'DiNode', 'Edge',
    'ControlFlowGraph', 'ControlFlowNode', 'DominatorTree')
