""" Control flow graph and dominator tree.

A control flow graph is a directed multigraph with a designated entry node.
Nodes are identified towards the outside world by their label, which is
the node name used in the graph description.

Dominator information is kept in a separate DominatorTree, which is only
valid for the graph snapshot it was calculated from.
"""

import logging
from collections import namedtuple
from .digraph import DiGraph, DiNode, reachable
from . import lt
from .algorithm.fixed_point_dominator import calculate_dominators
from .algorithm.fixed_point_dominator import calculate_immediate_dominators
from ..common import GraphError

DomTreeNode = namedtuple('DomTreeNode', ['node', 'children'])
logger = logging.getLogger('cfg')


class ControlFlowGraph(DiGraph):
    """ Control flow graph.

    Besides the directed multigraph, this keeps track of:

    - The entry node
    - A label per node, unique within the graph
    - Graph level attributes, such as the graph name
    """
    def __init__(self, name=None):
        super().__init__()
        self.name = name
        self.entry_node = None
        self.attributes = {}
        self._label_map = {}

    def add_node(self, node):
        if node.label in self._label_map:
            raise GraphError('Duplicate node label {}'.format(node.label))
        super().add_node(node)
        self._label_map[node.label] = node
        if self.entry_node is None:
            self.entry_node = node

    def del_node(self, node):
        super().del_node(node)
        del self._label_map[node.label]
        if node is self.entry_node:
            self.entry_node = None

    def new_node(self, label, **attributes):
        """ Create a new node with the given label """
        return ControlFlowNode(self, label, attributes=attributes)

    def node_by_label(self, label):
        """ Retrieve the node with the given label.

        Raises KeyError when no such node exists.
        """
        return self._label_map[label]

    def has_label(self, label):
        return label in self._label_map

    def connect(self, src, dst, **attributes):
        """ Add an edge between the nodes with the given labels.

        Nodes which do not exist yet are created.
        """
        n = self._get_or_create(src)
        m = self._get_or_create(dst)
        return self.add_edge(n, m, attributes)

    def _get_or_create(self, label):
        if self.has_label(label):
            return self.node_by_label(label)
        return self.new_node(label)

    @property
    def labels(self):
        return [node.label for node in self]

    def validate(self):
        """ Run some sanity checks on the control flow graph """
        if self.entry_node is None:
            raise GraphError('Control flow graph has no entry node')
        reached = reachable(self.entry_node)
        for node in self:
            if node not in reached:
                raise GraphError(
                    'Node {} is not reachable from entry node {}'.format(
                        node.label, self.entry_node.label))

    def copy(self):
        """ Create a structural copy of this graph """
        cfg = ControlFlowGraph(name=self.name)
        cfg.attributes = dict(self.attributes)
        node_map = {}
        for node in self:
            node_map[node] = ControlFlowNode(
                cfg, node.label, attributes=node.attributes)
        for edge in self.edges():
            cfg.add_edge(
                node_map[edge.src], node_map[edge.dst], edge.attributes)
        if self.entry_node is not None:
            cfg.entry_node = node_map[self.entry_node]
        return cfg

    def dominator_tree(self):
        """ Calculate the dominator tree for the current graph """
        return DominatorTree(self)

    def __repr__(self):
        return 'ControlFlowGraph({}, {} nodes)'.format(self.name, len(self))


class ControlFlowNode(DiNode):
    def __init__(self, graph, label, attributes=None, name=None):
        self.label = label
        self.attributes = dict(attributes) if attributes else {}

        # Synthesized name, for nodes created by merging:
        self.name = name
        super().__init__(graph)

    def __repr__(self):
        if self.name:
            return 'CFG-node({}, {})'.format(self.label, self.name)
        return 'CFG-node({})'.format(self.label)


class DominatorTree:
    """ Dominator tree of a control flow graph.

    The tree is calculated once, and is stale as soon as the graph is
    modified. Use a fresh tree after each graph mutation.
    """
    def __init__(self, cfg, algorithm='lt'):
        self.cfg = cfg
        self.generation = cfg.generation
        if cfg.entry_node is None:
            raise GraphError('Cannot calculate dominators without entry')

        if algorithm == 'lt':
            self._idom = lt.calculate_idom(cfg, cfg.entry_node)
        elif algorithm == 'iterative':
            nodes = reachable(cfg.entry_node)
            dom = calculate_dominators(
                [n for n in cfg if n in nodes], cfg.entry_node)
            self._idom = calculate_immediate_dominators(dom.keys(), dom)
        else:
            raise ValueError('Unknown dominator algorithm {}'.format(
                algorithm))

        self._calculate_tree()
        logger.debug(
            'dominator tree for %s with %s nodes', cfg.name, len(self._idom))

    def _calculate_tree(self):
        self.tree_map = {}
        for node in self.cfg:
            if node in self._idom:
                self.tree_map[node] = DomTreeNode(node, list())

        # Add all nodes except for the root node into the tree:
        for node in self.cfg:
            parent = self._idom.get(node)
            if parent is not None:
                self.tree_map[parent].children.append(self.tree_map[node])

        self.root_tree = self.tree_map[self.cfg.entry_node]

        # Number the tree, so dominance is an interval test:
        self._pre = {}
        self._post = {}
        counter = 0
        worklist = [(self.root_tree, False)]
        while worklist:
            tree, done = worklist.pop()
            counter += 1
            if done:
                self._post[tree.node] = counter
            else:
                self._pre[tree.node] = counter
                worklist.append((tree, True))
                for child in reversed(tree.children):
                    worklist.append((child, False))

    def is_stale(self):
        """ Test whether the graph changed since this tree was made """
        return self.generation != self.cfg.generation

    def _check(self):
        assert not self.is_stale(), 'Dominator tree used after graph change'

    def dominates(self, one, other):
        """ Test whether a node dominates another node """
        self._check()
        if one not in self._pre or other not in self._pre:
            return False
        return (self._pre[one] <= self._pre[other]
                and self._post[other] <= self._post[one])

    def strictly_dominates(self, one, other):
        """ Test whether a node strictly dominates another node """
        return one is not other and self.dominates(one, other)

    def immediate_dominator(self, node):
        """ Retrieve a nodes immediate dominator """
        self._check()
        return self._idom[node]

    def children(self, node):
        """ Return all nodes immediately dominated by node """
        self._check()
        for c in self.tree_map[node].children:
            yield c.node

    def nodes(self):
        """ All nodes of the tree, in pre-order """
        self._check()
        return sorted(self._pre, key=self._pre.get)

    def dominator_sets(self):
        """ Map each node onto the set of its dominators """
        self._check()
        dom = {}
        for node in self.nodes():
            parent = self._idom[node]
            if parent is None:
                dom[node] = {node}
            else:
                dom[node] = {node} | dom[parent]
        return dom
