""" Recursive descent parser for control flow graphs in DOT format.

Only directed graphs are accepted. Subgraphs are flattened into the
graph, ports are ignored. The entry node is the node with the attribute
``entry=true``, else the node labelled ``entry``, else the first node.
"""

import logging
from ...common import ParseError, get_file
from ...graph.cfg import ControlFlowGraph
from .lexer import DotLexer, EOF

logger = logging.getLogger('dot')


def make_comma_or(parts):
    parts = list(map(lambda x: '"{}"'.format(x), parts))
    if len(parts) > 1:
        last = parts[-1]
        first = parts[:-1]
        return ', '.join(first) + ' or ' + last
    else:
        return ''.join(parts)


def parse_dot(text, filename=None):
    """ Parse DOT text into a validated control flow graph """
    cfg = DotParser().parse(text, filename=filename)
    cfg.validate()
    return cfg


def read_dot(f):
    """ Read a control flow graph from a DOT file or file name """
    if isinstance(f, str):
        filename = f
        with open(f, 'r') as f2:
            text = f2.read()
    else:
        filename = getattr(f, 'name', None)
        text = get_file(f).read()
    return parse_dot(text, filename=filename)


class DotParser:
    """ Parse a directed graph into a ControlFlowGraph """
    ID_TYPES = ('ID', 'STRING')

    def __init__(self):
        self.token = None
        self.tokens = None

    def parse(self, text, filename=None):
        """ Parse the text, return the unvalidated control flow graph """
        lexer = DotLexer(filename=filename)
        self.tokens = lexer.tokenize(text)
        self.token = next(self.tokens)
        self.cfg = None
        self.scopes = [({}, {})]
        self.entry_marks = []
        self.parse_graph()
        self.select_entry()
        logger.debug(
            'parsed %s with %s nodes and %s edges', self.cfg.name,
            len(self.cfg), self.cfg.get_number_of_edges())
        return self.cfg

    def error(self, msg, loc=None):
        """ Raise an error at the current location """
        if loc is None:
            loc = self.token.loc
        raise ParseError(msg, loc)

    # Lexer helpers:
    def consume(self, typ=None):
        """ Assert that the next token is typ, and if so, return it.

        If typ is a list or tuple, consume one of the given types.
        If typ is not given, consume the next token.
        """
        if typ is None:
            typ = self.peak

        expected_types = typ if isinstance(typ, (list, tuple)) else [typ]

        if self.peak in expected_types:
            return self.next_token()
        else:
            expected = make_comma_or(expected_types)
            self.error(
                'Expected {0}, got "{1}"'.format(expected, self.token.val))

    def has_consumed(self, typ):
        """ Checks if the look-ahead token is of type typ, and if so
            eats the token and returns true """
        if self.peak == typ:
            self.consume()
            return True
        return False

    def next_token(self):
        """ Advance to the next token """
        tok = self.token
        if tok.typ != EOF:
            self.token = next(self.tokens)
        return tok

    @property
    def peak(self):
        """ Look at the next token to parse without popping it """
        return self.token.typ

    # Grammar:
    def parse_graph(self):
        self.has_consumed('strict')
        if self.peak == 'graph':
            self.error('Undirected graphs are not supported')
        self.consume('digraph')
        name = None
        if self.peak in self.ID_TYPES:
            name = self.parse_id()
        self.cfg = ControlFlowGraph(name=name)
        self.consume('{')
        self.parse_stmt_list()
        self.consume('}')
        self.consume(EOF)

    def parse_stmt_list(self):
        while self.peak != '}':
            self.parse_stmt()
            self.has_consumed(';')

    def parse_stmt(self):
        if self.peak == 'graph':
            self.consume()
            self.cfg.attributes.update(self.parse_attr_list())
        elif self.peak == 'node':
            self.consume()
            self.node_defaults.update(self.parse_attr_list())
        elif self.peak == 'edge':
            self.consume()
            self.edge_defaults.update(self.parse_attr_list())
        elif self.peak in ('subgraph', '{'):
            self.parse_subgraph()
            if self.peak in ('->', '--'):
                self.error('Edges between subgraphs are not supported')
        elif self.peak in self.ID_TYPES:
            loc = self.token.loc
            label = self.parse_id()
            if self.has_consumed('='):
                self.cfg.attributes[label] = self.parse_id()
                return
            self.parse_port()
            if self.peak in ('->', '--'):
                self.parse_edge_stmt(label, loc)
            else:
                self.parse_node_stmt(label, loc)
        else:
            self.error('Expected statement, got "{}"'.format(self.token.val))

    def parse_subgraph(self):
        if self.has_consumed('subgraph'):
            if self.peak in self.ID_TYPES:
                self.parse_id()
        self.consume('{')
        node_defaults, edge_defaults = self.scopes[-1]
        self.scopes.append((dict(node_defaults), dict(edge_defaults)))
        self.parse_stmt_list()
        self.scopes.pop()
        self.consume('}')

    def parse_node_stmt(self, label, loc):
        node = self.get_node(label, loc)
        attributes = self.parse_attr_list()
        node.attributes.update(attributes)
        if 'entry' in attributes:
            self.mark_entry(node, loc)

    def parse_edge_stmt(self, label, loc):
        labels = [(label, loc)]
        while self.peak in ('->', '--'):
            if self.peak == '--':
                self.error('Undirected edges are not supported')
            self.consume('->')
            if self.peak in ('subgraph', '{'):
                self.error('Edges to subgraphs are not supported')
            loc = self.token.loc
            labels.append((self.parse_id(), loc))
            self.parse_port()
        attributes = dict(self.edge_defaults)
        attributes.update(self.parse_attr_list())

        nodes = [self.get_node(label, loc) for label, loc in labels]
        for src, dst in zip(nodes[:-1], nodes[1:]):
            self.cfg.add_edge(src, dst, attributes)

    def parse_port(self):
        """ Ports are parsed and then ignored """
        while self.has_consumed(':'):
            self.parse_id()

    def parse_attr_list(self):
        """ Parse zero or more bracketed attribute lists """
        attributes = {}
        while self.has_consumed('['):
            while self.peak != ']':
                key = self.parse_id()
                if self.has_consumed('='):
                    attributes[key] = self.parse_id()
                else:
                    attributes[key] = 'true'
                if not self.has_consumed(';'):
                    self.has_consumed(',')
            self.consume(']')
        return attributes

    def parse_id(self):
        """ Parse an identifier, concatenating quoted strings with + """
        tok = self.consume(self.ID_TYPES)
        val = tok.val
        if tok.typ == 'STRING':
            while self.has_consumed('+'):
                val += self.consume('STRING').val
        return val

    @property
    def node_defaults(self):
        return self.scopes[-1][0]

    @property
    def edge_defaults(self):
        return self.scopes[-1][1]

    def get_node(self, label, loc):
        if self.cfg.has_label(label):
            return self.cfg.node_by_label(label)
        node = self.cfg.new_node(label, **self.node_defaults)
        if 'entry' in self.node_defaults:
            self.mark_entry(node, loc)
        return node

    def mark_entry(self, node, loc):
        if node.attributes['entry'].lower() != 'true':
            return
        if node not in [n for n, _ in self.entry_marks]:
            self.entry_marks.append((node, loc))

    def select_entry(self):
        """ Determine the entry node of the parsed graph """
        if len(self.entry_marks) > 1:
            _, loc = self.entry_marks[1]
            labels = ', '.join(str(n.label) for n, _ in self.entry_marks)
            self.error('Multiple entry nodes: {}'.format(labels), loc=loc)
        elif self.entry_marks:
            self.cfg.entry_node = self.entry_marks[0][0]
            return

        labelled = [
            n for n in self.cfg if n.attributes.get('label') == 'entry']
        if len(labelled) > 1:
            labels = ', '.join(str(n.label) for n in labelled)
            self.error(
                'Multiple nodes labelled entry: {}'.format(labels))
        elif labelled:
            self.cfg.entry_node = labelled[0]
