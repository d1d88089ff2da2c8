""" Recover control flow primitives from a control flow graph.

The control flow graph is read in Graphviz DOT format, the located
primitives are written as a JSON array.
"""

import argparse
import logging
import os
import subprocess
import sys
from .base import base_parser, LogSetup
from .. import api
from ..cfa.observer import StepObserver
from ..format.dot import cfg_to_dot, interval_to_dot
from ..utils.image import render_image

logger = logging.getLogger('restructure')

parser = argparse.ArgumentParser(
    description=__doc__, parents=[base_parser])
parser.add_argument(
    '--method', '-m', help='control flow recovery method',
    choices=api.METHODS, default='hammock')
parser.add_argument(
    '--output', '-o', help='output file (default stdout)',
    metavar='output-file', type=argparse.FileType('w'), default='-')
parser.add_argument(
    '--indent', help='indent the JSON output', action='store_true',
    default=False)
parser.add_argument(
    '--quiet', '-q', help='suppress non-error messages',
    action='store_true', default=False)
parser.add_argument(
    '--steps', help='write the intermediate graphs of each step',
    action='store_true', default=False)
parser.add_argument(
    '--img', help='render the intermediate graphs to png with dot',
    action='store_true', default=False)
parser.add_argument(
    'input', help='control flow graph in DOT format (default stdin)',
    nargs='?', type=argparse.FileType('r'), default='-')


def restructure(args=None):
    """ Recover the control flow primitives of a single DOT file """
    args = parser.parse_args(args)
    with LogSetup(args) as log_setup:
        cfg = api.parse_cfg(args.input)
        prefix = step_prefix(args.input)

        observer = None
        if args.steps:
            observer = DotStepWriter(prefix, img=args.img)
            if args.method == 'interval':
                write_derived_sequence(
                    cfg, os.path.dirname(prefix), img=args.img)

        primitives = api.restructure(
            cfg, method=args.method, reporter=log_setup.reporter,
            observer=observer)
        api.write_primitives(primitives, args.output, indent=args.indent)
    if args.output is not sys.stdout:
        args.output.close()
    if args.input is not sys.stdin:
        args.input.close()


def step_prefix(f):
    """ Determine the prefix of the step files for the input file f """
    name = getattr(f, 'name', '<stdin>')
    if f is sys.stdin or name.startswith('<'):
        return 'stdin'
    return os.path.splitext(name)[0]


def write_step_file(path, text, img=False):
    """ Write a step file, warn when this fails """
    logger.debug('creating file %s', path)
    try:
        with open(path, 'w') as f:
            f.write(text)
    except OSError as err:
        logger.warning('unable to create %s; %s', path, err)
        return

    if img:
        try:
            render_image(path)
        except (OSError, subprocess.CalledProcessError) as err:
            logger.warning('unable to render %s; %s', path, err)


class DotStepWriter(StepObserver):
    """ Write the graph before and after each merge in DOT format.

    Before a merge, the nodes of the located primitive are filled red and
    the entry node carries the kind of the primitive as external label.
    After the merge, the new node is filled red.
    """
    highlight = {'style': 'filled', 'fillcolor': 'red'}

    def __init__(self, prefix, img=False):
        self.prefix = prefix
        self.img = img
        self.step = 1

    def before_merge(self, cfg, prim):
        logger.debug('located primitive %s', prim)
        highlight = {}
        for label in prim.nodes.values():
            highlight[cfg.node_by_label(label)] = dict(self.highlight)
        highlight[cfg.node_by_label(prim.entry)]['xlabel'] = prim.kind
        path = '{}_{:04d}a.dot'.format(self.prefix, self.step)
        write_step_file(path, cfg_to_dot(cfg, highlight), img=self.img)

    def after_merge(self, cfg, prim):
        highlight = {cfg.node_by_label(prim.entry): dict(self.highlight)}
        path = '{}_{:04d}b.dot'.format(self.prefix, self.step)
        write_step_file(path, cfg_to_dot(cfg, highlight), img=self.img)
        self.step += 1


def write_derived_sequence(cfg, directory, img=False):
    """ Write the derived sequence of graphs, and the intervals of each """
    graphs, interval_lists = api.derived_sequence(cfg)
    for i, g in enumerate(graphs, 1):
        path = os.path.join(directory, 'G_{}.dot'.format(i))
        write_step_file(path, cfg_to_dot(g), img=img)
    for i, partition in enumerate(interval_lists, 1):
        for j, interval in enumerate(partition, 1):
            name = 'I_{}_{}'.format(i, j)
            path = os.path.join(directory, name + '.dot')
            write_step_file(path, interval_to_dot(interval, name), img=img)


if __name__ == '__main__':
    restructure()
