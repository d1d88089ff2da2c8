""" Test structuring within the derived sequence of graphs """

import io
import unittest
from restructure.cfa import hammock, interval
from restructure.cfa.primitive import Primitive
from restructure.common import IncompleteError
from restructure.graph import ControlFlowGraph
from restructure.utils.reporting import TextReportGenerator


def make_cfg(edges):
    cfg = ControlFlowGraph()
    for src, dst in edges:
        cfg.connect(src, dst)
    return cfg


BREAK_EDGES = [
    ('E0', 'E'), ('E', 'H'), ('H', 'B'), ('H', 'X'), ('B', 'H'), ('B', 'Y'),
    ('X', 'Z'), ('Y', 'Z'),
]

# A loop with two exits, which cannot be reduced within its interval:
TWO_EXITS_EDGES = [
    ('H', 'B'), ('H', 'X'), ('B', 'H'), ('B', 'Y'), ('X', 'Z'), ('Y', 'Z'),
]


class IntervalReducerTestCase(unittest.TestCase):
    def test_acyclic(self):
        """ Without loops there is a single interval """
        cfg = make_cfg([('A', 'B'), ('A', 'C'), ('B', 'D'), ('C', 'D')])
        prims = interval.analyze(cfg)
        self.assertEqual(['if_else'], prims.kinds)
        self.assertEqual(1, len(cfg))

    def test_pre_test_loop(self):
        """ A loop is reduced within the interval of its header """
        cfg = make_cfg([('S', 'A'), ('A', 'B'), ('A', 'C'), ('B', 'A')])
        prims = interval.analyze(cfg)
        self.assertEqual(['pre_loop', 'sequence'], prims.kinds)
        self.assertEqual(
            Primitive('sequence', {'first': 'S', 'second': 'A'}, 'S', 'A'),
            prims[1])

    def test_loop_with_break(self):
        """ Where the hammock method gets stuck, intervals succeed """
        with self.assertRaises(IncompleteError):
            hammock.analyze(make_cfg(BREAK_EDGES))

        reducer = interval.IntervalReducer()
        with self.assertLogs('interval', level='WARNING') as cm:
            prims = reducer.analyze(make_cfg(BREAK_EDGES))
        self.assertEqual(1, len(cm.output))
        self.assertIn('interval H collapsed', cm.output[0])
        self.assertEqual(
            [Primitive('sequence', {'first': 'E0', 'second': 'E'},
                       'E0', 'E'),
             Primitive('sequence', {'first': 'E0', 'second': 'H'},
                       'E0', 'H')],
            prims)
        self.assertEqual(2, len(reducer.levels))
        self.assertEqual(1, len(reducer.levels[-1]))

    def test_collapsed_interval(self):
        """ An interval collapsed without a primitive is warned about """
        f = io.StringIO()
        reporter = TextReportGenerator(f)
        cfg = make_cfg(TWO_EXITS_EDGES)
        with self.assertLogs('interval', level='WARNING') as cm:
            prims = interval.analyze(cfg, reporter=reporter)
        self.assertEqual(0, len(prims))
        self.assertEqual(1, len(cm.output))
        self.assertIn(
            'warning: interval H collapsed without a primitive'
            ' (5 nodes: H, B, X, Y, Z)', cm.output[0])
        self.assertIn('- collapsed interval H: H, B, X, Y, Z', f.getvalue())

    def test_irreducible(self):
        """ The limit graph of an irreducible graph is left over """
        cfg = make_cfg([
            ('E', 'A'), ('E', 'B'), ('A', 'B'), ('B', 'A'), ('A', 'X')])
        with self.assertRaises(IncompleteError) as cm:
            interval.analyze(cfg)
        err = cm.exception
        self.assertEqual(0, len(err.primitives))
        self.assertEqual(['E', 'A', 'B'], err.remaining)
        self.assertIn('irreducible', err.msg)

    def test_deterministic(self):
        first = interval.analyze(make_cfg(BREAK_EDGES))
        second = interval.analyze(make_cfg(BREAK_EDGES))
        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
