"""
The api module contains a set of handy functions to read control flow
graphs and recover their control flow primitives.
"""

import logging
import os
from .cfa import hammock, interval
from .cfa.primitive import PrimitiveRecord
from .common import IncompleteError, MethodError, get_file
from .format.dot import parse_dot, read_dot
from .graph.cfg import ControlFlowGraph
from .graph import interval as intervals
from .utils.reporting import DummyReportGenerator, TextReportGenerator

# When using 'from restructure.api import *' include the following:
__all__ = [
    'METHODS', 'parse_cfg', 'restructure', 'derived_sequence',
    'write_primitives', 'read_primitives']

logger = logging.getLogger('restructure')

METHODS = ('hammock', 'interval', 'pattern-independent')

ANALYZERS = {
    'hammock': hammock.analyze,
    'interval': interval.analyze,
}


def get_reporter(reporter):
    if reporter is None:
        return DummyReportGenerator()
    elif isinstance(reporter, str):
        f = open(reporter, 'wt', encoding='utf8')
        r = TextReportGenerator(f)
        r.header()
        return r
    else:
        return reporter


def parse_cfg(source):
    """ Get a control flow graph from the given source.

    Args:
        source: a ControlFlowGraph, a file like object, a file name or a
            string with the graph in DOT format.

    Returns:
        A validated :class:`restructure.graph.cfg.ControlFlowGraph`
    """
    if isinstance(source, ControlFlowGraph):
        source.validate()
        return source
    elif isinstance(source, str) and not os.path.exists(source) \
            and '{' in source:
        return parse_dot(source)
    elif isinstance(source, str):
        with open(source, 'r') as f:
            return read_dot(f)
    else:
        return read_dot(get_file(source))


def restructure(source, method='hammock', reporter=None, observer=None):
    """ Recover the control flow primitives of a control flow graph.

    Args:
        source: the control flow graph, see :func:`parse_cfg`. A given
            ControlFlowGraph is not modified; a copy is reduced.
        method (str): 'hammock' or 'interval'
        reporter: diagnostics sink, see :func:`get_reporter`
        observer: a :class:`restructure.cfa.StepObserver`, which is
            notified around each merge

    Returns:
        The :class:`restructure.cfa.PrimitiveRecord` of located primitives.
        When structuring is incomplete a warning is logged and the
        primitives located so far are returned.

    .. doctest::

        >>> from restructure.api import restructure
        >>> prims = restructure('digraph { A -> B; A -> C; B -> D; C -> D }')
        >>> prims.kinds
        ['if_else']

    """
    if method not in ANALYZERS:
        if method in METHODS:
            raise MethodError(
                'Control flow recovery method {} is not supported'.format(
                    method))
        raise MethodError('Unknown control flow recovery method {}'.format(
            method))

    reporter = get_reporter(reporter)
    cfg = parse_cfg(source).copy()
    logger.info(
        'Structuring %s (%s nodes) with the %s method',
        cfg.name, len(cfg), method)
    reporter.heading(2, 'Control flow graph')
    reporter.dump_graph(cfg)
    reporter.heading(2, 'Primitives')

    analyze = ANALYZERS[method]
    try:
        primitives = analyze(cfg, reporter=reporter, observer=observer)
    except IncompleteError as err:
        logger.warning('warning: %s', err.msg)
        reporter.dump_incomplete(err)
        return err.primitives
    logger.info('Located %s primitives', len(primitives))
    return primitives


def derived_sequence(source):
    """ Compute the derived sequence of graphs of a control flow graph.

    Returns the list of graphs and, per graph, its list of intervals.
    """
    return intervals.derived_sequence(parse_cfg(source))


def write_primitives(primitives, output, indent=False):
    """ Write the record of primitives as JSON into output """
    if isinstance(output, str):
        with open(output, 'w') as f:
            primitives.dump(f, indent=indent)
    else:
        primitives.dump(output, indent=indent)


def read_primitives(source):
    """ Read a record of primitives in JSON format """
    if isinstance(source, str):
        with open(source, 'r') as f:
            return PrimitiveRecord.load(f)
    return PrimitiveRecord.load(get_file(source))
