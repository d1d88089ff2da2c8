"""
Lengauer and Tarjan developed a fast algorithm to calculate dominators
from a graph.

Algorithm 19.9 and 19.10 as can be found on page 448 of Appel.
"""

import logging
from .digraph import dfs


logger = logging.getLogger('lt')


def calculate_idom(graph, entry, reverse=False):
    """ Map every node reachable from entry onto its immediate dominator.

    The entry node maps onto None.
    """
    return LengauerTarjan(reverse).compute(graph, entry)


class LengauerTarjan:
    """ The lengauer Tarjan algorithm for calculating dominators """

    def __init__(self, reverse):
        self._reverse = reverse

        # Filled during dfs:
        self.dfnum = {}  # depth-first number
        self.vertex = []  # Linear list of nodes
        self.parent = {}

        # Filled later:
        self.ancestor = {}
        self.best = {}
        self.semi = {}

    def compute(self, graph, entry):
        logger.debug('Computing dominator tree from %s nodes', len(graph))
        self.number(entry)
        bucket = {n: [] for n in self.vertex}
        idom = {entry: None}
        samedom = {}

        # Loop over nodes in reversed dfs order, skipping the entry:
        for n in reversed(self.vertex[1:]):
            p = self.parent[n]

            # The semi dominator is the candidate with lowest dfnum:
            s = p
            for v in self.predecessors(n):
                if v not in self.dfnum:
                    # Not reachable from the entry
                    continue
                if self.dfnum[v] <= self.dfnum[n]:
                    candidate = v
                else:
                    candidate = self.semi[self.ancestor_with_lowest_semi(v)]
                if self.dfnum[candidate] < self.dfnum[s]:
                    s = candidate

            self.semi[n] = s
            bucket[s].append(n)
            self.link(p, n)

            # Now that the path from p to n is linked, resolve p's bucket:
            for v in bucket[p]:
                y = self.ancestor_with_lowest_semi(v)
                if self.semi[y] is self.semi[v]:
                    idom[v] = p
                else:
                    samedom[v] = y
            bucket[p] = []

        # Deferred immediate dominators, in dfs order:
        for n in self.vertex[1:]:
            if n in samedom:
                idom[n] = idom[samedom[n]]
        return idom

    def predecessors(self, node):
        if self._reverse:
            return node.successors
        else:
            return node.predecessors

    def number(self, start_node):
        """ Depth first search nodes """
        for dfnum, (parent, node) in enumerate(
                dfs(start_node, reverse=self._reverse)):
            self.dfnum[node] = dfnum
            self.parent[node] = parent
            self.vertex.append(node)

    def link(self, p, n):
        """ Mark p as parent from n """
        assert n not in self.ancestor
        self.ancestor[n] = p
        self.best[n] = n

    def ancestor_with_lowest_semi(self, v):
        """ O(log N) implementation with path compression.

        Iterative instead of recursive, so large graphs do not hit the
        recursion limit.
        """
        original_v = v

        # Walk up to the highest linked ancestor:
        path = []
        a = self.ancestor[v]
        while a in self.ancestor:
            path.append((v, a))
            v = a
            a = self.ancestor[v]

        # Compress the path on the way back down:
        for v, a in reversed(path):
            b = self.best[a]
            self.ancestor[v] = self.ancestor[a]
            if self.dfnum[self.semi[b]] < self.dfnum[self.semi[self.best[v]]]:
                self.best[v] = b

        return self.best[original_v]
