""" Recover high-level control flow primitives from control flow graphs.

The input is the unstructured control flow graph of a function, given in
Graphviz DOT format. The output describes how loops, conditionals and
sequences relate to the nodes of that graph.

Example usage:

>>> from restructure import api
>>> cfg = api.parse_cfg('digraph f { A -> B; A -> C; B -> A }')
>>> prims = api.restructure(cfg)
>>> prims[0].kind
'pre_loop'

"""

# Define version here. Used in docs, and setup script:
__version_info__ = (0, 1, 0)
__version__ = '.'.join(map(str, __version_info__))
