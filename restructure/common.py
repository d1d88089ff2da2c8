"""
   Error handling routines
   Source location structures
"""

logformat = '%(asctime)s | %(levelname)8s | %(name)10.10s | %(message)s'


def get_file(f, mode='r'):
    """ Determine if argument is a file like object or make it so! """
    if hasattr(f, 'read'):
        # Assume this is a file like object
        return f
    elif isinstance(f, str):
        return open(f, mode)
    else:
        raise FileNotFoundError('Cannot open {}'.format(f))


class Token:
    """ A lexical token of a graph description """

    __slots__ = ['typ', 'val', 'loc']

    def __init__(self, typ, val, loc):
        self.typ = typ
        self.val = val
        assert isinstance(loc, SourceLocation)
        self.loc = loc

    def __repr__(self):
        return 'Token({}, {}, {})'.format(self.typ, self.val, self.loc)


class SourceLocation:
    """ A location that refers to a position in a source file """

    __slots__ = ['filename', 'row', 'col', 'length', 'source']

    def __init__(self, filename, row, col, ln, source=None):
        self.filename = filename
        self.row = row
        self.col = col
        self.length = ln
        self.source = source

    def __repr__(self):
        return '({}, {}, {}, {})'.format(
            self.filename, self.row, self.col, self.length)

    def print_message(self, message, lines=None, file=None):
        """ Print a message at this location in the given source lines """
        if lines is None:
            if self.source is None:
                print(
                    '{}:{}:{}: {}'.format(
                        self.filename, self.row, self.col, message),
                    file=file)
                return
            lines = self.source.splitlines()

        if self.filename:
            print('File : "{}"'.format(self.filename), file=file)

        # Print the line containing the error, with a marker below it:
        if 1 <= self.row <= len(lines):
            print('{:5} :{}'.format(self.row, lines[self.row - 1]), file=file)
            marker = '^' * max(self.length, 1)
            print('      :' + ' ' * (self.col - 1) + marker, file=file)
        print('      : {}'.format(message), file=file)


class RestructureError(Exception):
    """ Base of all expected failures during control flow recovery """
    def __init__(self, msg, loc=None):
        super().__init__(msg)
        self.msg = msg
        self.loc = loc
        if loc:
            assert isinstance(loc, SourceLocation), \
                   '{0} must be SourceLocation'.format(type(loc))

    def __repr__(self):
        return '"{}"'.format(self.msg)

    def print(self, file=None):
        """ Print the error inside some nice context """
        if self.loc:
            self.loc.print_message(self.msg, file=file)
        else:
            print(self.msg, file=file)


class ParseError(RestructureError):
    """ The graph description could not be parsed """
    pass


class GraphError(RestructureError):
    """ Invalid construction or mutation of a graph """
    pass


class MethodError(RestructureError):
    """ An unsupported control flow recovery method was requested """
    pass


class IncompleteError(RestructureError):
    """ Structuring stopped with more than one node left.

    This is not fatal; the primitives located so far are available in
    ``primitives`` and the labels of the nodes that are left over in
    ``remaining``.
    """
    def __init__(self, msg, primitives, remaining):
        super().__init__(msg)
        self.primitives = primitives
        self.remaining = remaining
