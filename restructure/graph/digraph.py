""" Directed graph.

In a directed graph, the edges have a direction. Parallel edges between the
same pair of nodes are allowed, so this is a directed multigraph. Nodes
carry a stable integer id, handed out by the graph, which is never reused.
"""

from collections import defaultdict
from ..common import GraphError


class Edge:
    """ A directed edge from src to dst with optional attributes """
    __slots__ = ['src', 'dst', 'attributes']

    def __init__(self, src, dst, attributes=None):
        self.src = src
        self.dst = dst
        self.attributes = dict(attributes) if attributes else {}

    def __repr__(self):
        return 'Edge({} -> {})'.format(self.src, self.dst)


class DiGraph:
    """ Directed multigraph. """
    def __init__(self):
        self._nodes = {}
        self._next_id = 0

        # Fast lookup dictionaries:
        self.suc_map = defaultdict(list)
        self.pre_map = defaultdict(list)

        # Bumped on every mutation:
        self.generation = 0

    def __iter__(self):
        # Ids are handed out in increasing order, so this is creation order
        return iter(list(self._nodes.values()))

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, node):
        return self._nodes.get(node.id) is node

    @property
    def nodes(self):
        """ All nodes, in ascending id order """
        return list(self._nodes.values())

    def new_id(self):
        """ Hand out a fresh node id """
        self._next_id += 1
        return self._next_id

    def add_node(self, node):
        """ Add a node to the graph """
        if node.id in self._nodes:
            raise GraphError('Node {} already in graph'.format(node))
        self._nodes[node.id] = node
        self.generation += 1

    def del_node(self, node):
        """ Remove a node from the graph.

        The node must not have any edges left; rewire them first.
        """
        self._check_node(node)
        if self.suc_map[node] or self.pre_map[node]:
            raise GraphError(
                'Cannot remove {}, it still has edges'.format(node))
        del self._nodes[node.id]
        self.suc_map.pop(node, None)
        self.pre_map.pop(node, None)
        self.generation += 1

    def add_edge(self, n, m, attributes=None):
        """ Add a directed edge from n to m """
        self._check_node(n)
        self._check_node(m)
        edge = Edge(n, m, attributes)
        self.suc_map[n].append(edge)
        self.pre_map[m].append(edge)
        self.generation += 1
        return edge

    def del_edge(self, n, m):
        """ Delete one directed edge from n to m """
        for edge in self.suc_map[n]:
            if edge.dst is m:
                self.remove_edge(edge)
                return edge
        raise GraphError('No edge from {} to {}'.format(n, m))

    def remove_edge(self, edge):
        """ Delete the given edge object """
        self.suc_map[edge.src].remove(edge)
        self.pre_map[edge.dst].remove(edge)
        self.generation += 1

    def has_edge(self, n, m):
        """ Test if there exist an edge from n to m """
        return any(edge.dst is m for edge in self.suc_map[n])

    def edge_count(self, n, m):
        """ Number of (parallel) edges from n to m """
        return sum(1 for edge in self.suc_map[n] if edge.dst is m)

    def out_edges(self, node):
        return list(self.suc_map[node])

    def in_edges(self, node):
        return list(self.pre_map[node])

    def out_degree(self, node):
        """ Number of outgoing edges, parallel edges included """
        return len(self.suc_map[node])

    def in_degree(self, node):
        """ Number of incoming edges, parallel edges included """
        return len(self.pre_map[node])

    def successors(self, node):
        """ Get the distinct successors of the node, in edge order """
        return _distinct(edge.dst for edge in self.suc_map[node])

    def predecessors(self, node):
        """ Get the distinct predecessors of the node, in edge order """
        return _distinct(edge.src for edge in self.pre_map[node])

    def edges(self):
        """ Iterate over all edges, grouped per source node """
        for node in self.nodes:
            for edge in self.suc_map[node]:
                yield edge

    def get_number_of_edges(self):
        return sum(len(edges) for edges in self.suc_map.values())

    def _check_node(self, node):
        if node not in self:
            raise GraphError('Node {} is not part of this graph'.format(node))


def _distinct(nodes):
    seen = set()
    result = []
    for node in nodes:
        if node not in seen:
            seen.add(node)
            result.append(node)
    return result


class DiNode:
    """ Node in a directed graph """
    def __init__(self, graph):
        self.graph = graph
        self.id = graph.new_id()
        self.graph.add_node(self)

    @property
    def successors(self):
        """ Get the successors of this node """
        return self.graph.successors(self)

    @property
    def predecessors(self):
        """ Get the predecessors of this node """
        return self.graph.predecessors(self)

    @property
    def in_degree(self):
        return self.graph.in_degree(self)

    @property
    def out_degree(self):
        return self.graph.out_degree(self)

    def add_edge(self, other, attributes=None):
        """ Create an edge to the other node """
        return self.graph.add_edge(self, other, attributes)

    def __repr__(self):
        return 'node({})'.format(self.id)


def dfs(start_node, reverse=False):
    """ Visit nodes in depth-first-search order.

    Args:
        - start_node: node to start with
        - reverse: traverse the graph by reversing the edge directions.
    """
    visited = set()
    worklist = [(None, start_node)]
    while worklist:
        parent, node = worklist.pop()
        if node not in visited:
            visited.add(node)
            yield parent, node
            if reverse:
                neighbours = node.predecessors
            else:
                neighbours = node.successors
            # Push in reverse, so the first neighbour is visited first:
            for neighbour in reversed(neighbours):
                worklist.append((node, neighbour))


def reachable(start_node):
    """ Determine the set of nodes reachable from start_node """
    return {node for _, node in dfs(start_node)}


def reverse_post_order(start_node):
    """ Nodes reachable from start_node in reverse post-order """
    order = []
    visited = {start_node}
    stack = [(start_node, iter(start_node.successors))]
    while stack:
        node, successors = stack[-1]
        for successor in successors:
            if successor not in visited:
                visited.add(successor)
                stack.append((successor, iter(successor.successors)))
                break
        else:
            stack.pop()
            order.append(node)
    order.reverse()
    return order
