""" Merge the nodes of a located primitive into a single node.

The new node takes over the label and attributes of the entry node of the
primitive, so primitives located later on still refer to labels of the
original graph. All edges entering the primitive enter the new node, and
all edges leaving the primitive leave the new node.
"""

import logging
from ..graph.cfg import ControlFlowNode

logger = logging.getLogger('merge')


def merge(cfg, match, name=None):
    """ Contract the nodes of match into a single new node.

    Edges from outside the primitive into its entry are redirected to the
    new node. The outgoing edges of the exit node are kept as outgoing
    edges of the new node; when they lead back into the primitive, they
    become a self-loop. Any other edge leaving the primitive is kept too,
    all remaining edges are internal and are dropped.

    Returns the new node.
    """
    members = match.nodes
    entry = match.entry_node
    exit_node = match.exit_node
    size = len(cfg)

    # Edges crossing the boundary of the primitive:
    incoming = []
    for edge in cfg.in_edges(entry):
        if edge.src not in members:
            incoming.append(edge)
    outgoing = []
    for node in members:
        for edge in cfg.out_edges(node):
            if edge.dst not in members:
                outgoing.append((edge, False))
            elif node is exit_node:
                outgoing.append((edge, True))

    # Unlink and remove the members:
    doomed = []
    for node in members:
        for edge in cfg.out_edges(node) + cfg.in_edges(node):
            if edge not in doomed:
                doomed.append(edge)
    for edge in doomed:
        cfg.remove_edge(edge)
    was_entry = entry is cfg.entry_node
    for node in members:
        cfg.del_node(node)

    new_node = ControlFlowNode(
        cfg, entry.label, attributes=entry.attributes, name=name)
    for edge in incoming:
        cfg.add_edge(edge.src, new_node, edge.attributes)
    for edge, internal in outgoing:
        dst = new_node if internal else edge.dst
        cfg.add_edge(new_node, dst, edge.attributes)
    if was_entry:
        cfg.entry_node = new_node

    assert len(cfg) == size - len(members) + 1
    logger.debug('merged %s into %s', members, new_node)
    return new_node
