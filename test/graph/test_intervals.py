""" Test interval analysis and the derived sequence of graphs """

import unittest
from restructure.graph import ControlFlowGraph
from restructure.graph.interval import intervals, derived_graph
from restructure.graph.interval import derived_sequence


def make_cfg(edges):
    cfg = ControlFlowGraph()
    for src, dst in edges:
        cfg.connect(src, dst)
    return cfg


def partition_labels(partition):
    return [[n.label for n in interval] for interval in partition]


class IntervalTestCase(unittest.TestCase):
    def test_acyclic(self):
        """ An acyclic graph is a single interval """
        cfg = make_cfg([('a', 'b'), ('a', 'c'), ('b', 'd'), ('c', 'd')])
        self.assertEqual(
            [['a', 'b', 'c', 'd']], partition_labels(intervals(cfg)))

    def test_loop(self):
        """ A loop header starts a new interval """
        cfg = make_cfg([
            ('e', 'h'), ('h', 'b'), ('b', 'h'), ('h', 'x'), ('x', 'y')])
        partition = intervals(cfg)
        self.assertEqual(
            [['e'], ['h', 'b', 'x', 'y']], partition_labels(partition))
        self.assertIs(cfg.node_by_label('h'), partition[1].header)
        self.assertIn(cfg.node_by_label('x'), partition[1])
        self.assertEqual(4, len(partition[1]))

    def test_derived_graph(self):
        cfg = make_cfg([
            ('e', 'h'), ('h', 'b'), ('b', 'h'), ('h', 'x'), ('b', 'x')])
        derived = derived_graph(cfg)
        self.assertEqual(['e', 'h'], derived.labels)
        self.assertEqual('e', derived.entry_node.label)
        edges = [(e.src.label, e.dst.label) for e in derived.edges()]
        self.assertEqual([('e', 'h')], edges)

    def test_reducible_sequence(self):
        """ A reducible graph derives into a single node """
        cfg = make_cfg([
            ('e', 'h'), ('h', 'b'), ('b', 'h'), ('h', 'x')])
        graphs, interval_lists = derived_sequence(cfg)
        self.assertEqual([4, 2, 1], [len(g) for g in graphs])
        self.assertEqual(len(graphs), len(interval_lists))
        self.assertIsNot(cfg, graphs[0])
        self.assertEqual(4, len(cfg))

    def test_irreducible_sequence(self):
        """ The limit graph of an irreducible graph has several nodes """
        cfg = make_cfg([
            ('e', 'a'), ('e', 'b'), ('a', 'b'), ('b', 'a'), ('a', 'x')])
        graphs, interval_lists = derived_sequence(cfg)
        self.assertEqual([4, 3], [len(g) for g in graphs])
        self.assertEqual(
            [['e'], ['a'], ['b']], partition_labels(interval_lists[-1]))


if __name__ == '__main__':
    unittest.main()
