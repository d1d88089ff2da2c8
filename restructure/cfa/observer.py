""" Observation of the structuring process.

An observer is notified right before and right after each merge, with the
graph and the primitive that was located. Observers must not modify the
graph; they exist for tracing, for example to write intermediate graphs.
"""


class StepObserver:
    """ Observer which ignores all steps. Override the hooks to trace. """
    def before_merge(self, cfg, prim):
        """ Called with the graph before the nodes of prim are merged """
        pass

    def after_merge(self, cfg, prim):
        """ Called with the graph after the nodes of prim are merged """
        pass
