""" Test structuring by reduction of hammocks """

import unittest
from restructure.cfa import hammock, StepObserver
from restructure.cfa.primitive import Primitive
from restructure.common import IncompleteError
from restructure.graph import ControlFlowGraph
from restructure.graph.algorithm.fixed_point_dominator import \
    calculate_dominators


def make_cfg(edges):
    cfg = ControlFlowGraph()
    for src, dst in edges:
        cfg.connect(src, dst)
    return cfg


# A while loop around an if-else, followed by a return:
LOOP_EDGES = [
    ('entry', 'loop'), ('loop', 'body'), ('loop', 'end'), ('body', 'then'),
    ('body', 'else'), ('then', 'join'), ('else', 'join'), ('join', 'loop'),
    ('end', 'ret'),
]

# A loop with a break to a join point behind the loop:
BREAK_EDGES = [
    ('E0', 'E'), ('E', 'H'), ('H', 'B'), ('H', 'X'), ('B', 'H'), ('B', 'Y'),
    ('X', 'Z'), ('Y', 'Z'),
]


class CheckingObserver(StepObserver):
    """ Check each step against the graph it was located in """
    def __init__(self, test):
        self.test = test
        self.sizes = []
        self.primitives = []

    def before_merge(self, cfg, prim):
        nodes = [cfg.node_by_label(label) for label in prim.nodes.values()]
        entry = cfg.node_by_label(prim.entry)
        self.test.assertIn(entry, nodes)
        if prim.exit is not None:
            self.test.assertIn(cfg.node_by_label(prim.exit), nodes)

        # The entry dominates the primitive:
        dom = calculate_dominators(cfg.nodes, cfg.entry_node)
        for node in nodes:
            self.test.assertIn(entry, dom[node])
        self.sizes.append((len(cfg), len(set(nodes))))

    def after_merge(self, cfg, prim):
        before, merged = self.sizes[-1]
        self.test.assertEqual(before - merged + 1, len(cfg))
        self.test.assertTrue(cfg.has_label(prim.entry))
        self.primitives.append(prim)


class HammockTestCase(unittest.TestCase):
    def test_pre_test_loop(self):
        cfg = make_cfg([('A', 'B'), ('A', 'C'), ('B', 'A')])
        prims = hammock.analyze(cfg)
        self.assertEqual(
            [Primitive('pre_loop', {'cond': 'A', 'body': 'B', 'exit': 'C'},
                       'A', 'C')],
            prims)
        self.assertEqual(1, len(cfg))

    def test_sequence(self):
        cfg = make_cfg([('A', 'B')])
        prims = hammock.analyze(cfg)
        self.assertEqual(
            [Primitive('sequence', {'first': 'A', 'second': 'B'}, 'A', 'B')],
            prims)

    def test_if_else_diamond(self):
        cfg = make_cfg([('A', 'B'), ('A', 'C'), ('B', 'D'), ('C', 'D')])
        prims = hammock.analyze(cfg)
        self.assertEqual(1, len(prims))
        self.assertEqual(
            {'cond': 'A', 'then': 'B', 'else': 'C', 'exit': 'D'},
            dict(prims[0].nodes))
        self.assertEqual(1, len(cfg))
        self.assertEqual('A', cfg.entry_node.label)

    def test_single_node(self):
        cfg = make_cfg([])
        cfg.new_node('A')
        self.assertEqual(0, len(hammock.analyze(cfg)))

    def test_nested(self):
        cfg = make_cfg(LOOP_EDGES)
        prims = hammock.analyze(cfg)
        self.assertEqual(
            ['if_else', 'pre_loop', 'sequence', 'sequence'], prims.kinds)
        self.assertEqual(
            {'cond': 'loop', 'body': 'body', 'exit': 'end'},
            dict(prims[1].nodes))
        self.assertEqual('ret', prims[3].exit)
        self.assertEqual(1, len(cfg))

    def test_loop_with_break(self):
        """ A loop with two exits leaves the hammock method stuck """
        cfg = make_cfg(BREAK_EDGES)
        with self.assertRaises(IncompleteError) as cm:
            hammock.analyze(cfg)
        err = cm.exception
        self.assertEqual(
            [Primitive('sequence', {'first': 'E0', 'second': 'E'},
                       'E0', 'E')],
            err.primitives)
        self.assertEqual(['H', 'B', 'X', 'Y', 'Z', 'E0'], err.remaining)
        self.assertIn('no primitive found', err.msg)
        self.assertGreater(len(cfg), 1)

    def test_irreducible(self):
        """ A loop with two entries cannot be structured at all """
        cfg = make_cfg([
            ('E', 'A'), ('E', 'B'), ('A', 'B'), ('B', 'A'), ('A', 'X')])
        with self.assertRaises(IncompleteError) as cm:
            hammock.analyze(cfg)
        self.assertEqual(0, len(cm.exception.primitives))
        self.assertEqual(4, len(cm.exception.remaining))

    def test_deterministic(self):
        """ The same graph gives the same record """
        first = hammock.analyze(make_cfg(LOOP_EDGES))
        second = hammock.analyze(make_cfg(LOOP_EDGES))
        self.assertEqual(first, second)

    def test_steps(self):
        """ Each step is sound, and shrinks the graph """
        for edges in (LOOP_EDGES, BREAK_EDGES):
            observer = CheckingObserver(self)
            try:
                prims = hammock.analyze(make_cfg(edges), observer=observer)
            except IncompleteError as err:
                prims = err.primitives
            self.assertEqual(list(prims), observer.primitives)
            for _, merged in observer.sizes:
                self.assertGreater(merged, 1)

    def test_observer_does_not_change_result(self):
        plain = hammock.analyze(make_cfg(LOOP_EDGES))
        observed = hammock.analyze(
            make_cfg(LOOP_EDGES), observer=CheckingObserver(self))
        self.assertEqual(plain, observed)


if __name__ == '__main__':
    unittest.main()
