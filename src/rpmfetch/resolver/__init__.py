"""
graph node resolution engine
"""

from .driver import ScanResult, resolve_graph_nodes, resolve_packages
from .node import NodeResolver, ResolutionContext
from .select import select_rpm_path
