""" Graphviz DOT format.

Control flow graphs are read from and written to the DOT language. Only
directed graphs are supported. See also: https://graphviz.org/doc/info/lang.html
"""

from .parser import DotParser, parse_dot, read_dot
from .writer import cfg_to_dot, write_dot, interval_to_dot


__all__ = [
    'DotParser', 'parse_dot', 'read_dot',
    'cfg_to_dot', 'write_dot', 'interval_to_dot']
