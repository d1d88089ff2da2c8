""" Structuring by means of the derived sequence of graphs.

The graph is partitioned into intervals, and the primitives within each
interval are reduced first. Then every interval is collapsed into a single
node of the derived graph, where primitives spanning several intervals can
be located. This repeats until the graph is a single node, or until the
derived graph no longer shrinks (the graph is irreducible).

Since back edges disappear when an interval is collapsed, this method
structures graphs which the hammock method leaves with unstructured loops.
"""

import logging
from ..graph.interval import intervals, derived_graph
from .reducer import Reducer


def analyze(cfg, reporter=None, observer=None):
    """ Recover the control flow primitives of cfg.

    The first level of the derived sequence is reduced in place. Returns
    the record of primitives, level by level. Raises IncompleteError when
    the limit graph has more than one node.
    """
    return IntervalReducer(reporter=reporter, observer=observer).analyze(cfg)


class IntervalReducer(Reducer):
    logger = logging.getLogger('interval')

    def analyze(self, cfg):
        cfg.validate()
        self.levels = [cfg]
        while len(cfg) > 1:
            # Repartition until a pass merges nothing:
            merged = 0
            while len(cfg) > 1:
                count = self.reduce_level(cfg)
                if not count:
                    break
                merged += count
            if len(cfg) == 1:
                break

            partition = intervals(cfg)
            for interval in partition:
                if len(interval) > 1:
                    self.collapsed(interval)
            derived = derived_graph(cfg, partition)
            self.logger.debug(
                'level %s: %s nodes, derived graph has %s nodes',
                len(self.levels), len(cfg), len(derived))
            if len(derived) == len(cfg) and not merged:
                raise self.incomplete(cfg, 'irreducible limit graph')
            cfg = derived
            self.levels.append(cfg)
        return self.primitives

    def collapsed(self, interval):
        """ An interval enters the derived graph without a primitive """
        labels = [node.label for node in interval]
        self.logger.warning(
            'warning: interval %s collapsed without a primitive'
            ' (%s nodes: %s)', interval.header.label, len(labels),
            ', '.join(map(str, labels)))
        self.reporter.dump_collapsed(interval.header.label, labels)

    def reduce_level(self, cfg):
        """ Reduce the primitives within each interval of cfg.

        Returns the number of merges performed.
        """
        merged = 0
        for interval in intervals(cfg):
            members = set(interval.nodes)
            while len(members) > 1:
                count = len(cfg)
                new_node = self.reduce_once(cfg, within=members)
                if new_node is None:
                    break
                assert len(cfg) < count
                members = {n for n in members if n in cfg}
                members.add(new_node)
                merged += 1
        return merged
