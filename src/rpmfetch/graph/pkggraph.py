"""
package dependency graph

Nodes live in an arena keyed by their integer id; edges point from a
dependent to the package it depends on. Parallel edges are kept unless the
graph is strict, matching DOT semantics. Only node fields are ever modified
after load, the structure itself is left alone.
"""

__all__ = ("PkgGraph",)

import networkx as nx


class PkgGraph:
    """Directed package graph backed by :obj:`networkx.MultiDiGraph`.

    :ivar name: graph name emitted when the graph is written out
    :ivar strict: whether the graph was declared ``strict``
    :ivar attrs: graph level attributes
    :ivar defaults: default attribute statements, keyed by ``node``/``edge``
    """

    def __init__(self, name='G', strict=False, attrs=None, defaults=None):
        self.name = name
        self.strict = strict
        self.attrs = dict(attrs) if attrs else {}
        self.defaults = {k: dict(v) for k, v in (defaults or {}).items()}
        self._graph = nx.MultiDiGraph()

    def add_node(self, node):
        if node.node_id in self._graph:
            raise ValueError(f'duplicate node id {node.node_id}')
        self._graph.add_node(node.node_id, pkg=node)
        return node

    def add_edge(self, dependent, dependency, attrs=None):
        """Record that ``dependent`` depends on ``dependency``."""
        for n in (dependent, dependency):
            if n.node_id not in self._graph:
                raise KeyError(f'node {n.node_id} is not part of the graph')
        src, dst = dependent.node_id, dependency.node_id
        if self.strict and self._graph.has_edge(src, dst):
            # strict graphs merge repeated edges
            self._graph.edges[src, dst, 0]['attrs'].update(attrs or {})
            return
        self._graph.add_edge(src, dst, attrs=dict(attrs or {}))

    def node(self, node_id):
        try:
            return self._graph.nodes[node_id]['pkg']
        except KeyError:
            raise KeyError(f'no node with id {node_id}') from None

    def all_nodes(self):
        return [data['pkg'] for _, data in self._graph.nodes(data=True)]

    def all_run_nodes(self):
        return [n for n in self.all_nodes() if n.is_run_node]

    def unresolved_nodes(self):
        return [n for n in self.all_run_nodes() if n.unresolved]

    def has_unresolved_nodes(self):
        return any(n.unresolved for n in self.all_run_nodes())

    def dependents(self, node):
        """Return the nodes that directly depend on ``node``."""
        return [self.node(x) for x in self._graph.predecessors(node.node_id)]

    def dependencies(self, node):
        """Return the nodes ``node`` directly depends on."""
        return [self.node(x) for x in self._graph.successors(node.node_id)]

    def edges(self):
        """Yield ``(dependent, dependency, attrs)`` for every edge."""
        for src, dst, data in self._graph.edges(data=True):
            yield self.node(src), self.node(dst), data['attrs']

    def __contains__(self, node_id):
        return node_id in self._graph

    def __iter__(self):
        return iter(self.all_nodes())

    def __len__(self):
        return self._graph.number_of_nodes()
