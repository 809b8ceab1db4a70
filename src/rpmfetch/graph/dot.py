"""
DOT serialization for package graphs

Parsing is done by pydot; emission is done here so every value is written
in one consistently quoted form. Attributes rpmfetch doesn't know about are
kept verbatim on the node, edge or graph they came from.
"""

__all__ = ("read_dot_graph", "write_dot_graph", "parse_dot_graph", "format_dot_graph")

import pydot
from snakeoil.fileutils import AtomicWriteFile

from ..log import logger
from .errors import GraphIOError
from .node import NodeType, PkgNode, State, VersionedPkg
from .pkggraph import PkgGraph

# node attributes mapped onto PkgNode fields
_versioned_keys = ('condition', 'version', 'scondition', 'sversion')
_node_keys = frozenset(('pkg', 'implicit', 'state', 'type', 'rpm_path') + _versioned_keys)
_default_stmts = ('graph', 'node', 'edge')


def _unquote(value):
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1].replace('\\"', '"')
    return value


def _quote(value):
    value = str(value)
    if value.startswith('<') and value.endswith('>'):
        # HTML-like label, emitted as is
        return value
    return '"' + value.replace('"', '\\"') + '"'


def _attrs(obj):
    return {k: _unquote(v) for k, v in obj.get_attributes().items()}


def _parse_bool(path, node_id, value):
    lowered = value.lower()
    if lowered in ('true', '1'):
        return True
    elif lowered in ('false', '0', ''):
        return False
    raise GraphIOError(path, f'node {node_id}: invalid implicit value {value!r}')


def _node_id(path, name):
    try:
        return int(_unquote(name))
    except ValueError:
        raise GraphIOError(path, f'invalid node id {name!r}') from None


def _mk_node(path, node_id, attrs):
    try:
        name = attrs['pkg']
    except KeyError:
        raise GraphIOError(path, f'node {node_id} is missing its package name') from None
    try:
        pkg = VersionedPkg(name, *(attrs.get(k) or None for k in _versioned_keys))
        return PkgNode(
            node_id, pkg,
            implicit=_parse_bool(path, node_id, attrs.get('implicit', 'false')),
            state=attrs.get('state', State.Unresolved),
            node_type=attrs.get('type', NodeType.Normal),
            rpm_path=attrs.get('rpm_path', ''),
            attrs={k: v for k, v in attrs.items() if k not in _node_keys})
    except ValueError as e:
        raise GraphIOError(path, str(e)) from e


def parse_dot_graph(data, path='<string>'):
    """Build a :obj:`PkgGraph` from DOT source text."""
    try:
        dots = pydot.graph_from_dot_data(data)
    except Exception as e:
        raise GraphIOError(path, f'failed parsing: {e}') from e
    if not dots:
        raise GraphIOError(path, 'no graph found')
    elif len(dots) > 1:
        raise GraphIOError(path, f'expected a single graph, found {len(dots)}')
    dot = dots[0]
    if dot.get_type() != 'digraph':
        raise GraphIOError(path, f'expected a digraph, got {dot.get_type()!r}')

    graph_attrs = _attrs(dot)
    defaults = {}
    node_attrs = {}
    for n in dot.get_nodes():
        name = _unquote(n.get_name())
        if name in _default_stmts:
            if name == 'graph':
                graph_attrs.update(_attrs(n))
            else:
                defaults.setdefault(name, {}).update(_attrs(n))
            continue
        # a node may be declared more than once, later attributes win
        node_attrs.setdefault(_node_id(path, name), {}).update(_attrs(n))

    graph = PkgGraph(
        name=_unquote(dot.get_name()),
        strict=bool(dot.obj_dict.get('strict', False)),
        attrs=graph_attrs, defaults=defaults)
    for node_id, attrs in node_attrs.items():
        graph.add_node(_mk_node(path, node_id, attrs))

    for edge in dot.get_edges():
        src, dst = edge.get_source(), edge.get_destination()
        if not isinstance(src, str) or not isinstance(dst, str):
            raise GraphIOError(path, 'subgraph edges are not supported')
        src, dst = _node_id(path, src), _node_id(path, dst)
        try:
            graph.add_edge(graph.node(src), graph.node(dst), _attrs(edge))
        except KeyError as e:
            raise GraphIOError(path, f'edge {src} -> {dst} references an undeclared node') from e

    logger.debug('loaded %d nodes from %r', len(graph), path)
    return graph


def read_dot_graph(path):
    """Load a :obj:`PkgGraph` from a DOT file."""
    try:
        with open(path, 'r', encoding='utf8') as f:
            data = f.read()
    except OSError as e:
        raise GraphIOError(path, f'failed reading: {e.strerror}') from e
    return parse_dot_graph(data, path=path)


def _format_attrs(attrs):
    return ', '.join(f'{k}={_quote(v)}' for k, v in attrs.items())


def _node_attrs(node):
    pkg = node.versioned_pkg
    d = {'pkg': pkg.name}
    for k in _versioned_keys:
        v = getattr(pkg, k)
        if v is not None:
            d[k] = v
    d['implicit'] = 'true' if node.implicit else 'false'
    d['state'] = node.state
    d['type'] = node.node_type
    if node.rpm_path:
        d['rpm_path'] = node.rpm_path
    d.update(node.attrs)
    return d


def format_dot_graph(graph):
    """Render ``graph`` as DOT source text."""
    header = 'digraph'
    if graph.strict:
        header = 'strict digraph'
    lines = [f'{header} {_quote(graph.name)} {{']
    if graph.attrs:
        lines.append(f'\tgraph [{_format_attrs(graph.attrs)}];')
    for stmt in ('node', 'edge'):
        if graph.defaults.get(stmt):
            lines.append(f'\t{stmt} [{_format_attrs(graph.defaults[stmt])}];')
    for node in graph.all_nodes():
        lines.append(f'\t{node.node_id} [{_format_attrs(_node_attrs(node))}];')
    for src, dst, attrs in graph.edges():
        if attrs:
            lines.append(f'\t{src.node_id} -> {dst.node_id} [{_format_attrs(attrs)}];')
        else:
            lines.append(f'\t{src.node_id} -> {dst.node_id};')
    lines.append('}')
    return '\n'.join(lines) + '\n'


def write_dot_graph(graph, path):
    """Atomically write ``graph`` to ``path`` in DOT form."""
    data = format_dot_graph(graph)
    outfile = None
    try:
        try:
            outfile = AtomicWriteFile(path, binary=False)
            outfile.write(data)
            outfile.close()
        except OSError as e:
            raise GraphIOError(path, f'failed writing: {e.strerror}') from e
    finally:
        if outfile is not None:
            outfile.discard()
    logger.debug('wrote %d nodes to %r', len(graph), path)
