""" Interval analysis.

An interval I(h) is the maximal single entry subgraph with header h, in
which all closed paths pass through h. Intervals partition a control flow
graph. Collapsing every interval into a single node gives the derived
graph, and repeating this yields the derived sequence of graphs G1 .. Gn.
The graph is reducible when Gn is a single node.

See also: Allen, "Control flow analysis", 1970.
"""

import logging
from .cfg import ControlFlowGraph, ControlFlowNode

logger = logging.getLogger('interval')


class Interval:
    """ An interval with its header and member nodes """
    def __init__(self, header):
        self.header = header
        self.nodes = [header]

    def __contains__(self, node):
        return node in self.nodes

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __repr__(self):
        return 'Interval({}, {})'.format(
            self.header.label, [n.label for n in self.nodes])


def intervals(cfg):
    """ Partition the graph into intervals.

    Headers are returned in discovery order, starting with the interval of
    the entry node. Within an interval, nodes are in the order in which
    they were added.
    """
    assigned = {}
    headers = [cfg.entry_node]
    result = []
    while headers:
        header = headers.pop(0)
        interval = Interval(header)
        assigned[header] = interval

        # Grow the interval with nodes entered only from within:
        change = True
        while change:
            change = False
            for node in cfg:
                if node in assigned or node is cfg.entry_node:
                    continue
                preds = node.predecessors
                if preds and all(p in interval for p in preds):
                    interval.nodes.append(node)
                    assigned[node] = interval
                    change = True

        # Nodes reached from this interval which are left out are headers:
        for node in cfg:
            if node in assigned or node in headers:
                continue
            if any(p in interval for p in node.predecessors):
                headers.append(node)

        result.append(interval)
    logger.debug('%s nodes in %s intervals', len(cfg), len(result))
    return result


def derived_graph(cfg, partition=None):
    """ Create the derived graph of cfg.

    Each interval becomes one node, carrying the label and attributes of
    its header. Edges between intervals are kept once per pair of
    intervals; edges within an interval vanish.
    """
    if partition is None:
        partition = intervals(cfg)

    derived = ControlFlowGraph(name=cfg.name)
    derived.attributes = dict(cfg.attributes)
    interval_map = {}
    node_map = {}
    for interval in partition:
        header = interval.header
        node_map[interval] = ControlFlowNode(
            derived, header.label, attributes=header.attributes)
        for node in interval:
            interval_map[node] = interval
    derived.entry_node = node_map[partition[0]]

    for interval in partition:
        targets = []
        for node in interval:
            for successor in node.successors:
                target = interval_map[successor]
                if target is not interval and target not in targets:
                    targets.append(target)
        for target in targets:
            derived.add_edge(node_map[interval], node_map[target])
    return derived


def derived_sequence(cfg):
    """ Compute the derived sequence of graphs.

    Returns the graphs G1 .. Gn, where G1 is a copy of cfg, and the
    intervals of each graph. The sequence stops at a single node graph,
    or at a graph that no longer shrinks (an irreducible limit graph).
    """
    graphs = [cfg.copy()]
    interval_lists = []
    while True:
        g = graphs[-1]
        partition = intervals(g)
        interval_lists.append(partition)
        if len(partition) == len(g):
            break
        graphs.append(derived_graph(g, partition))
    return graphs, interval_lists
