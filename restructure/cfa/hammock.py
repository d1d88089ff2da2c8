""" Structuring by repeated reduction of hammocks.

A hammock is a single entry, single exit region. This method scans the
whole graph for the first primitive, merges it into one node and starts
over, until only one node is left.
"""

import logging
from .reducer import Reducer


def analyze(cfg, reporter=None, observer=None):
    """ Recover the control flow primitives of cfg.

    The graph is reduced in place. Returns the record of primitives, in
    the order they were located. Raises IncompleteError when the graph
    cannot be reduced into a single node; the error carries the
    primitives located so far.
    """
    return HammockReducer(reporter=reporter, observer=observer).analyze(cfg)


class HammockReducer(Reducer):
    logger = logging.getLogger('hammock')

    def analyze(self, cfg):
        cfg.validate()
        self.logger.debug('structuring %s', cfg)

        # Each merge removes at least one node:
        while len(cfg) > 1:
            count = len(cfg)
            if self.reduce_once(cfg) is None:
                raise self.incomplete(cfg, 'no primitive found')
            assert len(cfg) < count
        return self.primitives
