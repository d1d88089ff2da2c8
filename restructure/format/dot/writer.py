""" Write control flow graphs in DOT format. """

import re
from .lexer import KEYWORDS, HtmlString

PLAIN_ID = re.compile(
    r'^([A-Za-z_\u0080-\uffff][A-Za-z_0-9\u0080-\uffff]*'
    r'|-?(\.[0-9]+|[0-9]+(\.[0-9]*)?))$')


def quote(value):
    """ Quote an identifier, unless it can be written as is """
    if isinstance(value, HtmlString):
        return str(value)
    value = str(value)
    if PLAIN_ID.match(value) and value.lower() not in KEYWORDS:
        return value
    return '"{}"'.format(value.replace('"', '\\"'))


def format_attributes(attributes):
    if not attributes:
        return ''
    return ' [{}]'.format(', '.join(
        '{}={}'.format(quote(key), quote(value))
        for key, value in attributes.items()))


def cfg_to_dot(cfg, highlight=None):
    """ Render the graph as DOT text.

    All nodes are written first, in order, followed by the edges. The entry
    node is marked with ``entry=true`` when it is not the first node.
    highlight maps nodes onto additional attributes for display.
    """
    highlight = highlight or {}
    if cfg.name is None:
        lines = ['digraph {']
    else:
        lines = ['digraph {} {{'.format(quote(cfg.name))]
    for key, value in cfg.attributes.items():
        lines.append('\t{}={};'.format(quote(key), quote(value)))

    nodes = cfg.nodes
    for node in nodes:
        attributes = dict(node.attributes)
        if node is cfg.entry_node and node is not nodes[0]:
            attributes['entry'] = 'true'
        attributes.update(highlight.get(node, {}))
        lines.append('\t{}{};'.format(
            quote(node.label), format_attributes(attributes)))

    for edge in cfg.edges():
        lines.append('\t{} -> {}{};'.format(
            quote(edge.src.label), quote(edge.dst.label),
            format_attributes(edge.attributes)))
    lines.append('}')
    return '\n'.join(lines) + '\n'


def write_dot(cfg, f, highlight=None):
    """ Write the graph in DOT format to the file f """
    f.write(cfg_to_dot(cfg, highlight=highlight))


def interval_to_dot(interval, name=None):
    """ Render one interval, with the edges among its nodes, as a digraph """
    if name is None:
        lines = ['digraph {']
    else:
        lines = ['digraph {} {{'.format(quote(name))]
    for node in interval:
        attributes = dict(node.attributes)
        if node is interval.header:
            attributes['entry'] = 'true'
        lines.append('\t{}{};'.format(
            quote(node.label), format_attributes(attributes)))
    for node in interval:
        for edge in node.graph.out_edges(node):
            if edge.dst in interval:
                lines.append('\t{} -> {}{};'.format(
                    quote(node.label), quote(edge.dst.label),
                    format_attributes(edge.attributes)))
    lines.append('}')
    return '\n'.join(lines) + '\n'
