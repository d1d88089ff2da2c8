""" Lexical analysis of the DOT language. """

import re
from ...common import ParseError, SourceLocation, Token

EOF = 'EOF'
KEYWORDS = ('strict', 'graph', 'digraph', 'node', 'edge', 'subgraph')


class HtmlString(str):
    """ Value of an html string, including its outer angle brackets """
    pass


def on(pattern, flags=0, order=0):
    """ Register method to the given pattern """
    prog = re.compile(pattern, flags=flags)

    def wrapper(f):
        setattr(f, '$lex', (prog, order))
        return f
    return wrapper


class LexMeta(type):
    """ Meta class which inspects the functions decorated with 'on' """
    def __new__(cls, name, bases, attrs):
        lexmap = []
        for n, value in attrs.items():
            if n.startswith('__'):
                continue
            if hasattr(value, '$lex'):
                prog, order = getattr(value, '$lex')
                lexmap.append((prog, order, value))
        lexmap.sort(key=lambda l: l[1])
        attrs['lexmap'] = lexmap
        return type.__new__(cls, name, bases, attrs)


class DotLexer(metaclass=LexMeta):
    """ Splits a DOT graph description into tokens.

    Identifiers, numerals and html strings become ID tokens. Quoted strings
    become unquoted STRING tokens, which can be concatenated with +. Html
    strings keep their angle brackets, as HtmlString values.
    """
    def __init__(self, filename=None):
        self.filename = filename

    def tokenize(self, txt):
        """ Generator that generates lexical tokens from text.

        The last token is always the EOF token.
        """
        self.line = 1
        self.line_start = 0
        self.pos = 0
        self.txt = txt
        while self.pos < len(txt):
            tok = self.gettok()
            if tok:
                yield tok
        yield Token(EOF, EOF, self.location(self.pos, 0))

    def gettok(self):
        """ Find a match at the current position """
        for prog, _, func in self.lexmap:
            mo = prog.match(self.txt, self.pos)
            if mo:
                start = mo.start()
                loc = self.location(start, mo.end() - start)
                self.pos = mo.end()

                # The handler may consume more text:
                res = func(self, mo.group(0))
                self.newlines(start, self.pos)
                if res:
                    typ, val = res
                    return Token(typ, val, loc)
                return

        # No match found!
        char = self.txt[self.pos]
        raise ParseError(
            'Unexpected char: {0} (0x{1:X})'.format(char, ord(char)),
            loc=self.location(self.pos, 1))

    def location(self, pos, length):
        column = pos - self.line_start + 1
        return SourceLocation(
            self.filename, self.line, column, length, source=self.txt)

    def newlines(self, start, end):
        """ Update row and column information """
        count = self.txt.count('\n', start, end)
        if count:
            self.line += count
            self.line_start = self.txt.rindex('\n', start, end) + 1

    @on(r'[ \t\r\n\f\v]+')
    def handle_whitespace(self, val):
        pass

    @on(r'//[^\n]*|/\*.*?\*/', flags=re.DOTALL)
    def handle_comment(self, val):
        pass

    @on(r'^#[^\n]*', flags=re.MULTILINE)
    def handle_preprocessor_line(self, val):
        pass

    @on(r'->|--', order=1)
    def handle_edge_op(self, val):
        return val, val

    @on(r'-?(\.[0-9]+|[0-9]+(\.[0-9]*)?)', order=2)
    def handle_numeral(self, val):
        return 'ID', val

    @on(r'[A-Za-z_\u0080-\uffff][A-Za-z_0-9\u0080-\uffff]*', order=2)
    def handle_identifier(self, val):
        if val.lower() in KEYWORDS:
            return val.lower(), val
        return 'ID', val

    @on(r'"(\\.|[^"\\])*"', flags=re.DOTALL, order=2)
    def handle_string(self, val):
        # Only \" is an escape; line continuations are dropped:
        val = val[1:-1].replace('\\"', '"').replace('\\\n', '')
        return 'STRING', val

    @on(r'<', order=3)
    def handle_html(self, val):
        depth = 1
        pos = self.pos
        while depth:
            if pos >= len(self.txt):
                raise ParseError(
                    'Unterminated html string',
                    loc=self.location(self.pos - 1, 1))
            char = self.txt[pos]
            if char == '<':
                depth += 1
            elif char == '>':
                depth -= 1
            pos += 1
        start = self.pos - 1
        self.pos = pos
        return 'ID', HtmlString(self.txt[start:pos])

    @on(r'[{}\[\]=;,:+]', order=3)
    def handle_punctuation(self, val):
        return val, val
