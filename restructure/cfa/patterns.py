""" The catalogue of control flow primitives.

Each primitive kind is a Pattern: a recognizer which proposes assignments
of graph nodes to the roles of the primitive, and a validity test which
checks the assignment against the graph and its dominator tree.

A pattern is always anchored at the node playing its entry role. All other
roles are dominated by the entry, and have all their predecessors within
the primitive, so a primitive is a single entry region which can be merged
into one node. The exit role may have any successors.

The catalogue order is significant: at a given node, the first pattern in
CATALOGUE that matches wins.
"""

from collections import Counter
from .primitive import Primitive


class Match:
    """ A pattern matched in a graph, with roles bound to live nodes """
    def __init__(self, pattern, roles):
        self.pattern = pattern
        self.roles = roles

    @property
    def kind(self):
        return self.pattern.kind

    @property
    def entry_node(self):
        return self.roles[self.pattern.entry_role]

    @property
    def exit_node(self):
        if self.pattern.exit_role is None:
            return None
        return self.roles[self.pattern.exit_role]

    @property
    def nodes(self):
        """ The distinct nodes of the match, in role order """
        nodes = []
        for node in self.roles.values():
            if node not in nodes:
                nodes.append(node)
        return nodes

    def primitive(self):
        """ Extract the primitive, in terms of node labels """
        exit_node = self.exit_node
        return Primitive(
            self.kind,
            {role: node.label for role, node in self.roles.items()},
            self.entry_node.label,
            exit_node.label if exit_node is not None else None)

    def __repr__(self):
        return 'Match({})'.format(self.primitive())


class Pattern:
    """ Base class of primitive patterns. """
    kind = None
    roles = ()
    entry_role = None
    exit_role = None

    def candidates(self, cfg, node):  # pragma: no cover
        """ Generate role assignments with node in the entry role """
        raise NotImplementedError()

    def is_valid(self, cfg, dom, roles):  # pragma: no cover
        """ Test whether the role assignment forms this primitive """
        raise NotImplementedError()

    def match(self, cfg, dom, node, within=None):
        """ Return the first valid match anchored at node, or None.

        When within is given, only matches with all nodes in it qualify.
        """
        for roles in self.candidates(cfg, node):
            if within is not None:
                if not all(n in within for n in roles.values()):
                    continue
            if self.is_valid(cfg, dom, roles):
                return Match(self, roles)

    def find(self, cfg, dom):
        """ Return the first occurrence of this primitive in cfg """
        for node in cfg:
            match = self.match(cfg, dom, node)
            if match:
                return match

    def __repr__(self):
        return 'Pattern({})'.format(self.kind)


def targets(cfg, node, *expected):
    """ Test that the outgoing edges of node go exactly to expected """
    return _same(cfg.suc_map[node], expected, lambda e: e.dst)


def sources(cfg, node, *expected):
    """ Test that the incoming edges of node come exactly from expected """
    return _same(cfg.pre_map[node], expected, lambda e: e.src)


def _same(edges, expected, end):
    if len(edges) != len(expected):
        return False
    return Counter(id(end(e)) for e in edges) == \
        Counter(id(n) for n in expected)


def distinct(*nodes):
    return len(set(nodes)) == len(nodes)


def dominates_all(dom, entry, *others):
    return all(dom.dominates(entry, other) for other in others)


def two_way(cfg, node):
    """ The two successors of node, in both orders """
    succs = cfg.successors(node)
    if len(succs) == 2:
        yield succs[0], succs[1]
        yield succs[1], succs[0]


class PreLoop(Pattern):
    """ Pre-test loop.

    Pseudo-code:

    .. code::

        while (cond) {
           body
        }
        exit

    """
    kind = 'pre_loop'
    roles = ('cond', 'body', 'exit')
    entry_role = 'cond'
    exit_role = 'exit'

    def candidates(self, cfg, node):
        for body, exit in two_way(cfg, node):
            yield {'cond': node, 'body': body, 'exit': exit}

    def is_valid(self, cfg, dom, roles):
        cond, body, exit = roles['cond'], roles['body'], roles['exit']
        if not distinct(cond, body, exit):
            return False
        # Dominator sanity check:
        if not dominates_all(dom, cond, body, exit):
            return False
        # Tight back edge, no side exits from the body:
        return (targets(cfg, cond, body, exit)
                and sources(cfg, body, cond) and targets(cfg, body, cond)
                and sources(cfg, exit, cond))


class PostLoop(Pattern):
    """ Post-test loop.

    Pseudo-code:

    .. code::

        do {
           body
        } while (cond)
        exit

    When the body consists of the condition only, body and cond are bound
    to the same node, which has a self-loop.
    """
    kind = 'post_loop'
    roles = ('body', 'cond', 'exit')
    entry_role = 'body'
    exit_role = 'exit'

    def candidates(self, cfg, node):
        succs = cfg.successors(node)
        if node in succs:
            for exit in succs:
                if exit is not node:
                    yield {'body': node, 'cond': node, 'exit': exit}
        elif len(succs) == 1:
            cond = succs[0]
            for exit in cfg.successors(cond):
                if exit is not node:
                    yield {'body': node, 'cond': cond, 'exit': exit}

    def is_valid(self, cfg, dom, roles):
        body, cond, exit = roles['body'], roles['cond'], roles['exit']
        if body is cond:
            return (distinct(cond, exit)
                    and dom.dominates(cond, exit)
                    and targets(cfg, cond, cond, exit)
                    and sources(cfg, exit, cond))
        if not distinct(body, cond, exit):
            return False
        if not dominates_all(dom, body, cond, exit):
            return False
        return (targets(cfg, body, cond)
                and sources(cfg, cond, body)
                and targets(cfg, cond, body, exit)
                and sources(cfg, exit, cond))


class IfElseReturn(Pattern):
    """ Two-way conditional where both branches return.

    Pseudo-code:

    .. code::

        if (cond) {
           then
           return
        }
        else
        return

    """
    kind = 'if_else_return'
    roles = ('cond', 'then', 'else')
    entry_role = 'cond'
    exit_role = None

    def candidates(self, cfg, node):
        succs = cfg.successors(node)
        if len(succs) == 2:
            yield {'cond': node, 'then': succs[0], 'else': succs[1]}

    def is_valid(self, cfg, dom, roles):
        cond, then, else_ = roles['cond'], roles['then'], roles['else']
        if not distinct(cond, then, else_):
            return False
        if not dominates_all(dom, cond, then, else_):
            return False
        return (targets(cfg, cond, then, else_)
                and sources(cfg, then, cond) and targets(cfg, then)
                and sources(cfg, else_, cond) and targets(cfg, else_))


class IfReturn(Pattern):
    """ One-way conditional with a body that returns.

    Pseudo-code:

    .. code::

        if (cond) {
           body
           return
        }
        exit

    """
    kind = 'if_return'
    roles = ('cond', 'body', 'exit')
    entry_role = 'cond'
    exit_role = 'exit'

    def candidates(self, cfg, node):
        for body, exit in two_way(cfg, node):
            yield {'cond': node, 'body': body, 'exit': exit}

    def is_valid(self, cfg, dom, roles):
        cond, body, exit = roles['cond'], roles['body'], roles['exit']
        if not distinct(cond, body, exit):
            return False
        if not dominates_all(dom, cond, body, exit):
            return False
        return (targets(cfg, cond, body, exit)
                and sources(cfg, body, cond) and targets(cfg, body)
                and sources(cfg, exit, cond))


class If(Pattern):
    """ One-way conditional.

    Pseudo-code:

    .. code::

        if (cond) {
           body
        }
        exit

    """
    kind = 'if'
    roles = ('cond', 'body', 'exit')
    entry_role = 'cond'
    exit_role = 'exit'

    def candidates(self, cfg, node):
        for body, exit in two_way(cfg, node):
            yield {'cond': node, 'body': body, 'exit': exit}

    def is_valid(self, cfg, dom, roles):
        cond, body, exit = roles['cond'], roles['body'], roles['exit']
        if not distinct(cond, body, exit):
            return False
        if not dominates_all(dom, cond, body, exit):
            return False
        return (targets(cfg, cond, body, exit)
                and sources(cfg, body, cond) and targets(cfg, body, exit)
                and sources(cfg, exit, cond, body))


class IfElse(Pattern):
    """ Two-way conditional.

    Pseudo-code:

    .. code::

        if (cond) {
           then
        } else {
           else
        }
        exit

    """
    kind = 'if_else'
    roles = ('cond', 'then', 'else', 'exit')
    entry_role = 'cond'
    exit_role = 'exit'

    def candidates(self, cfg, node):
        succs = cfg.successors(node)
        if len(succs) == 2:
            then, else_ = succs
            for exit in cfg.successors(then):
                yield {'cond': node, 'then': then, 'else': else_, 'exit': exit}

    def is_valid(self, cfg, dom, roles):
        cond, then, else_, exit = (
            roles['cond'], roles['then'], roles['else'], roles['exit'])
        if not distinct(cond, then, else_, exit):
            return False
        if not dominates_all(dom, cond, then, else_, exit):
            return False
        return (targets(cfg, cond, then, else_)
                and sources(cfg, then, cond) and targets(cfg, then, exit)
                and sources(cfg, else_, cond) and targets(cfg, else_, exit)
                and sources(cfg, exit, then, else_))


class Fallthrough(Pattern):
    """ Two-way branch where both targets are the same node.

    Pseudo-code:

    .. code::

        if (cond) {
        }
        exit

    """
    kind = 'fallthrough'
    roles = ('cond', 'exit')
    entry_role = 'cond'
    exit_role = 'exit'

    def candidates(self, cfg, node):
        succs = cfg.successors(node)
        if len(succs) == 1:
            yield {'cond': node, 'exit': succs[0]}

    def is_valid(self, cfg, dom, roles):
        cond, exit = roles['cond'], roles['exit']
        return (distinct(cond, exit)
                and dom.dominates(cond, exit)
                and targets(cfg, cond, exit, exit)
                and sources(cfg, exit, cond, cond))


class Sequence(Pattern):
    """ Two statements executed after each other.

    Pseudo-code:

    .. code::

        first
        second

    """
    kind = 'sequence'
    roles = ('first', 'second')
    entry_role = 'first'
    exit_role = 'second'

    def candidates(self, cfg, node):
        succs = cfg.successors(node)
        if len(succs) == 1:
            yield {'first': node, 'second': succs[0]}

    def is_valid(self, cfg, dom, roles):
        first, second = roles['first'], roles['second']
        return (distinct(first, second)
                and dom.dominates(first, second)
                and targets(cfg, first, second)
                and sources(cfg, second, first))


class NWay(Pattern):
    """ N-way conditional, such as a switch statement.

    Pseudo-code:

    .. code::

        switch (head) {
        case 0:
           case_0
        ...
        case n:
           case_n
        }
        exit

    The head may also branch to the exit directly (an empty default case).
    """
    kind = 'n_way'
    roles = ('head', 'case_<i>', 'exit')
    entry_role = 'head'
    exit_role = 'exit'

    def candidates(self, cfg, node):
        succs = cfg.successors(node)
        if len(succs) < 3:
            return
        exits = []
        for case in succs:
            for exit in cfg.successors(case):
                if exit not in exits:
                    exits.append(exit)
        for exit in exits:
            roles = {'head': node}
            cases = [s for s in succs if s is not exit]
            for index, case in enumerate(cases):
                roles['case_{}'.format(index)] = case
            roles['exit'] = exit
            yield roles

    def is_valid(self, cfg, dom, roles):
        head, exit = roles['head'], roles['exit']
        cases = [n for r, n in roles.items() if r.startswith('case_')]
        if len(cases) < 2 or not distinct(head, exit, *cases):
            return False
        if not dominates_all(dom, head, exit, *cases):
            return False
        succs = cfg.successors(head)
        direct = exit in succs
        if direct:
            ok = targets(cfg, head, exit, *cases)
        else:
            ok = targets(cfg, head, *cases)
        if not ok or len(succs) < 3:
            return False
        for case in cases:
            if not (sources(cfg, case, head) and targets(cfg, case, exit)):
                return False
        if direct:
            return sources(cfg, exit, head, *cases)
        return sources(cfg, exit, *cases)


# Ordered by priority; more specific shapes come first.
CATALOGUE = (
    PreLoop(),
    PostLoop(),
    IfElseReturn(),
    IfReturn(),
    If(),
    IfElse(),
    Fallthrough(),
    Sequence(),
    NWay(),
)

KINDS = tuple(pattern.kind for pattern in CATALOGUE)


def find_match(cfg, dom, within=None):
    """ Find the first primitive in cfg.

    Nodes are scanned in ascending id order. At each node, the patterns of
    the catalogue are tried in priority order, with the node in the entry
    role. When within is given, only matches inside it are considered.
    """
    for node in cfg:
        if within is not None and node not in within:
            continue
        for pattern in CATALOGUE:
            match = pattern.match(cfg, dom, node, within=within)
            if match:
                return match
