""" Recovered control flow primitives.

A primitive maps the roles of a high-level control flow construct (for
instance the "cond", "body" and "exit" of a pre-test loop) onto the labels
of the control flow graph nodes it was recognized in.

Primitives are serialized to JSON as objects of the form:

.. code::

    {"prim": "pre_loop",
     "node": {"cond": "A", "body": "B", "exit": "C"},
     "entry": "A",
     "exit": "C"}

"""

import json
from types import MappingProxyType


class Primitive:
    """ A recognized high-level control flow primitive.

    Primitives are immutable, and refer to nodes by label only.
    """
    __slots__ = ['_kind', '_nodes', '_entry', '_exit']

    def __init__(self, kind, nodes, entry, exit=None):
        self._kind = kind
        self._nodes = MappingProxyType(dict(nodes))
        self._entry = entry
        self._exit = exit

    @property
    def kind(self):
        """ Name of the primitive, e.g. "if" or "pre_loop" """
        return self._kind

    @property
    def nodes(self):
        """ Read-only mapping from role name to node label """
        return self._nodes

    @property
    def entry(self):
        """ Label of the entry node """
        return self._entry

    @property
    def exit(self):
        """ Label of the exit node, or None for terminal primitives """
        return self._exit

    def __eq__(self, other):
        if not isinstance(other, Primitive):
            return NotImplemented
        return (self.kind, dict(self.nodes), self.entry, self.exit) == \
            (other.kind, dict(other.nodes), other.entry, other.exit)

    def __hash__(self):
        return hash((self.kind, tuple(sorted(self.nodes.items()))))

    def __repr__(self):
        roles = ', '.join(
            '{}={}'.format(role, label) for role, label in self.nodes.items())
        return '{}({})'.format(self.kind, roles)

    def to_json(self):
        """ Encode this primitive as a JSON compatible dictionary """
        return {
            'prim': self.kind,
            'node': dict(self.nodes),
            'entry': self.entry,
            'exit': self.exit,
        }

    @classmethod
    def from_json(cls, obj):
        """ Decode a primitive from a JSON dictionary """
        return cls(obj['prim'], obj['node'], obj['entry'], obj.get('exit'))


class PrimitiveRecord:
    """ Ordered record of primitives, in the order they were located """
    def __init__(self, primitives=()):
        self._primitives = list(primitives)

    def append(self, primitive):
        assert isinstance(primitive, Primitive)
        self._primitives.append(primitive)

    def __len__(self):
        return len(self._primitives)

    def __getitem__(self, index):
        return self._primitives[index]

    def __iter__(self):
        return iter(self._primitives)

    def __eq__(self, other):
        if isinstance(other, PrimitiveRecord):
            return self._primitives == other._primitives
        if isinstance(other, (list, tuple)):
            return self._primitives == list(other)
        return NotImplemented

    def __repr__(self):
        return 'PrimitiveRecord({})'.format(self._primitives)

    @property
    def kinds(self):
        return [p.kind for p in self._primitives]

    def to_json(self, indent=False):
        """ Serialize the record into a JSON document.

        With indent, the output is indented with tabs.
        """
        objs = [p.to_json() for p in self._primitives]
        if indent:
            return json.dumps(objs, indent='\t') + '\n'
        return json.dumps(objs) + '\n'

    @classmethod
    def from_json(cls, text):
        return cls(Primitive.from_json(obj) for obj in json.loads(text))

    def dump(self, f, indent=False):
        """ Write the record as JSON into the file f """
        f.write(self.to_json(indent=indent))

    @classmethod
    def load(cls, f):
        return cls.from_json(f.read())
