"""
exceptions thrown while loading or saving dependency graphs
"""

from ..exceptions import RpmfetchUserException


class GraphIOError(RpmfetchUserException):
    """Reading or writing a graph file failed."""

    def __init__(self, path, reason):
        super().__init__(f'graph file {path!r}: {reason}')
        self.path = path
        self.reason = reason
