""" Iterative (fixed point) dominator calculation.

Slower than Lengauer-Tarjan, but simple enough to serve as a reference.
"""


def calculate_dominators(nodes, entry_node):
    """ Calculate the dominator sets iteratively """
    nodes = list(nodes)

    # Initialize dominator map:
    _dom = {}
    for node in nodes:
        if node is entry_node:
            _dom[node] = {node}
        else:
            _dom[node] = set(nodes)

    # Run fixed point iteration:
    change = True
    while change:
        change = False
        for node in nodes:
            if node is entry_node:
                continue
            # A node is dominated by itself and by the intersection of
            # the dominators of its predecessors
            pred_doms = [_dom[p] for p in node.predecessors if p in _dom]
            if pred_doms:
                new_dom_n = set.union({node}, set.intersection(*pred_doms))
                if new_dom_n != _dom[node]:
                    change = True
                    _dom[node] = new_dom_n
    return _dom


def calculate_immediate_dominators(nodes, _dom):
    """ Determine immediate dominators from the dominator sets.

    The immediate dominator of a node is the strict dominator whose own
    dominator set equals the strict dominator set of the node.
    """
    _idom = {}
    for node in nodes:
        sdom = _dom[node] - {node}
        _idom[node] = None
        for x in sdom:
            if _dom[x] == sdom:
                # This must be the only definition of idom:
                assert _idom[node] is None
                _idom[node] = x
    return _idom
