""" Common machinery of the structuring methods.

A reducer repeatedly locates a primitive, merges its nodes and records it.
The methods differ in which part of the graph they search and in how they
advance when nothing matches.
"""

import logging
from ..common import IncompleteError
from ..utils.reporting import DummyReportGenerator
from .merge import merge
from .observer import StepObserver
from .patterns import find_match
from .primitive import PrimitiveRecord


class Reducer:
    """ Base class of the structuring methods. """
    logger = logging.getLogger('reducer')

    def __init__(self, reporter=None, observer=None):
        self.reporter = reporter or DummyReportGenerator()
        self.observer = observer or StepObserver()
        self.primitives = PrimitiveRecord()
        self._counter = 0

    def reduce_once(self, cfg, within=None):
        """ Locate and merge a single primitive.

        Returns the node created by the merge, or None when no primitive
        was found.
        """
        dom = cfg.dominator_tree()
        match = find_match(cfg, dom, within=within)
        if match is None:
            return None

        prim = match.primitive()
        self._counter += 1
        name = '{}_{}'.format(prim.kind, self._counter)

        self.observer.before_merge(cfg, prim)
        new_node = merge(cfg, match, name=name)
        self.primitives.append(prim)
        self.observer.after_merge(cfg, prim)

        self.logger.info('Located primitive %s', prim)
        self.reporter.dump_primitive(prim)
        return new_node

    def incomplete(self, cfg, reason):
        """ Create the error describing incomplete structuring """
        remaining = cfg.labels
        msg = 'incomplete control flow recovery; {} ({} nodes left: {})'
        msg = msg.format(
            reason, len(remaining), ', '.join(map(str, remaining)))
        return IncompleteError(msg, self.primitives, remaining)
