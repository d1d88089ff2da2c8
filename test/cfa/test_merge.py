import unittest
from restructure.cfa.merge import merge
from restructure.cfa.patterns import find_match
from restructure.graph import ControlFlowGraph


def make_cfg(edges):
    cfg = ControlFlowGraph()
    for src, dst in edges:
        cfg.connect(src, dst)
    return cfg


def edge_labels(cfg):
    return sorted((e.src.label, e.dst.label) for e in cfg.edges())


class MergeTestCase(unittest.TestCase):
    def reduce(self, cfg):
        match = find_match(cfg, cfg.dominator_tree())
        return match, merge(cfg, match, name='{}_1'.format(match.kind))

    def test_entry_label(self):
        """ The new node takes over the label of the entry """
        cfg = make_cfg([('S', 'A'), ('A', 'B'), ('A', 'C'), ('B', 'D'),
                        ('C', 'D'), ('D', 'T')])
        cfg.node_by_label('S').attributes['shape'] = 'box'
        match, node = self.reduce(cfg)
        self.assertEqual('sequence', match.kind)
        self.assertEqual('S', node.label)
        self.assertEqual('sequence_1', node.name)
        self.assertEqual({'shape': 'box'}, node.attributes)
        self.assertIs(node, cfg.entry_node)
        self.assertEqual(
            [('B', 'D'), ('C', 'D'), ('D', 'T'), ('S', 'B'), ('S', 'C')],
            edge_labels(cfg))

    def test_node_count(self):
        cfg = make_cfg([('S', 'A'), ('A', 'B'), ('A', 'C'), ('B', 'D'),
                        ('C', 'D'), ('D', 'T')])
        kinds = []
        counts = []
        while len(cfg) > 1:
            match, _ = self.reduce(cfg)
            kinds.append(match.kind)
            counts.append(len(cfg))
        self.assertEqual(['sequence', 'sequence', 'if_else'], kinds)
        self.assertEqual([5, 4, 1], counts)
        self.assertEqual([], edge_labels(cfg))

    def test_fresh_id(self):
        cfg = make_cfg([('A', 'B')])
        highest = max(n.id for n in cfg)
        _, node = self.reduce(cfg)
        self.assertGreater(node.id, highest)
        self.assertEqual([node], cfg.nodes)

    def test_incoming_edges(self):
        """ Edges into the entry are redirected to the new node """
        cfg = make_cfg([('X', 'A'), ('X', 'Y'), ('Y', 'A'), ('A', 'B'),
                        ('B', 'C')])
        dom = cfg.dominator_tree()
        a = cfg.node_by_label('A')
        match = find_match(cfg, dom, within={a, cfg.node_by_label('B')})
        merge(cfg, match)
        self.assertEqual(
            [('A', 'C'), ('X', 'A'), ('X', 'Y'), ('Y', 'A')], edge_labels(cfg))
        self.assertEqual(2, cfg.node_by_label('A').in_degree)

    def test_exit_back_edge(self):
        """ An edge from the exit back into the primitive is a self-loop """
        cfg = make_cfg([('E', 'A'), ('A', 'B'), ('B', 'A'), ('B', 'X')])
        dom = cfg.dominator_tree()
        within = {cfg.node_by_label('A'), cfg.node_by_label('B')}
        match = find_match(cfg, dom, within=within)
        self.assertEqual('sequence', match.kind)
        node = merge(cfg, match)
        self.assertEqual([('A', 'A'), ('A', 'X'), ('E', 'A')], edge_labels(cfg))
        self.assertEqual(
            'post_loop', find_match(cfg, cfg.dominator_tree()).kind)
        self.assertIn(node, node.successors)

    def test_edge_attributes(self):
        cfg = ControlFlowGraph()
        cfg.connect('A', 'B', label='x')
        cfg.connect('B', 'C', label='y')
        cfg.connect('C', 'D')
        dom = cfg.dominator_tree()
        within = {cfg.node_by_label('B'), cfg.node_by_label('C')}
        merge(cfg, find_match(cfg, dom, within=within))
        attributes = [e.attributes for e in cfg.edges()]
        self.assertIn({'label': 'x'}, attributes)
        self.assertNotIn({'label': 'y'}, attributes)


if __name__ == '__main__':
    unittest.main()
