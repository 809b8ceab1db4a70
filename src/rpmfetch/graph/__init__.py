"""
package dependency graph store
"""

from .dot import read_dot_graph, write_dot_graph
from .errors import GraphIOError
from .node import NodeType, PkgNode, State, VersionedPkg
from .pkggraph import PkgGraph
