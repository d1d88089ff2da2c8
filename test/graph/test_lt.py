""" Test Lengauer Tarjan algorithm """

import unittest
from restructure.graph import ControlFlowGraph, DiGraph, DiNode
from restructure.graph.lt import calculate_idom


def make_cfg(edges):
    cfg = ControlFlowGraph()
    for src, dst in edges:
        cfg.connect(src, dst)
    return cfg


def idom_labels(idom):
    return {
        n.label: (d.label if d is not None else None)
        for n, d in idom.items()}


class LengauerTarjanTestCase(unittest.TestCase):
    """ Test the Lengauer Tarjan algorithm for computing dominators """
    def test_appel_example_19_4(self):
        """ figure 19.4 """
        cfg = make_cfg([
            (1, 2), (2, 3), (2, 4), (3, 5), (3, 6), (5, 7), (6, 7), (7, 2)])
        idom = calculate_idom(cfg, cfg.node_by_label(1))
        expected = {1: None, 2: 1, 3: 2, 4: 2, 5: 3, 6: 3, 7: 3}
        self.assertEqual(expected, idom_labels(idom))

    def test_appel_example_19_8(self):
        """ figure 19.8 """
        cfg = make_cfg([
            ('a', 'b'), ('a', 'c'), ('b', 'd'), ('b', 'g'), ('c', 'e'),
            ('c', 'h'), ('d', 'f'), ('d', 'g'), ('e', 'c'), ('e', 'h'),
            ('f', 'i'), ('f', 'k'), ('g', 'j'), ('h', 'm'), ('i', 'l'),
            ('j', 'i'), ('k', 'l'), ('l', 'm')])
        self.assertEqual(13, len(cfg))
        idom = calculate_idom(cfg, cfg.node_by_label('a'))
        expected = {
            'a': None, 'b': 'a', 'c': 'a', 'd': 'b', 'e': 'c', 'f': 'd',
            'g': 'b', 'h': 'c', 'i': 'b', 'j': 'g', 'k': 'f', 'l': 'b',
            'm': 'a',
        }
        self.assertEqual(expected, idom_labels(idom))

    def test_unreachable_nodes_are_left_out(self):
        """ Nodes which cannot be reached have no immediate dominator """
        graph = DiGraph()
        entry = DiNode(graph)
        node = DiNode(graph)
        stray = DiNode(graph)
        entry.add_edge(node)
        stray.add_edge(node)
        idom = calculate_idom(graph, entry)
        self.assertEqual({entry: None, node: entry}, idom)

    def test_post_dominators(self):
        """ Reversing the edges gives the post dominators """
        cfg = make_cfg([('a', 'b'), ('a', 'c'), ('b', 'd'), ('c', 'd')])
        idom = calculate_idom(cfg, cfg.node_by_label('d'), reverse=True)
        expected = {'d': None, 'b': 'd', 'c': 'd', 'a': 'd'}
        self.assertEqual(expected, idom_labels(idom))


if __name__ == '__main__':
    unittest.main()
