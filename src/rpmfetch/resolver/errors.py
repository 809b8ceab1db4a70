"""
exceptions raised while resolving graph nodes

Everything deriving from :obj:`NodeResolveError` is scoped to a single node
and never stops a scan; :obj:`CachingFailed` reports a run's failures in
aggregate.
"""

from ..exceptions import RpmfetchException, RpmfetchUserException


class ResolveError(RpmfetchException):
    """Generic resolution error."""


class NodeResolveError(ResolveError):
    """A single node couldn't be resolved, it's left unresolved."""

    def __init__(self, node, message):
        super().__init__(message)
        self.node = node

    @property
    def pkg(self):
        return self.node.versioned_pkg


class ProviderNotFound(NodeResolveError):

    def __init__(self, node, reason=None):
        message = f"failed to find any packages providing '{node.versioned_pkg}'"
        if reason:
            message += f': {reason}'
        super().__init__(node, message)
        self.reason = reason


class CloneFailed(NodeResolveError):

    def __init__(self, node, package, reason):
        super().__init__(
            node, f"failed cloning {package!r} to provide '{node.versioned_pkg}': {reason}")
        self.package = package
        self.reason = reason


class CompetingPackagesError(NodeResolveError):
    """Arbitrating between several candidates failed outright."""

    def __init__(self, node, candidates, reason):
        super().__init__(
            node,
            f"failed picking an RPM providing '{node.versioned_pkg}' "
            f"from {', '.join(candidates)}: {reason}")
        self.candidates = tuple(candidates)
        self.reason = reason


class NoInstallableCandidate(NodeResolveError):

    def __init__(self, node, candidates):
        super().__init__(
            node,
            f"no RPM providing '{node.versioned_pkg}' can be installed "
            f"from the following: {', '.join(candidates)}")
        self.candidates = tuple(candidates)


class CachingFailed(ResolveError, RpmfetchUserException):
    """Raised at the end of a scan when failures are configured to be fatal."""

    def __init__(self, failures=(), reason=None):
        self.failures = tuple(failures)
        if reason is None:
            names = ', '.join(f"'{node.versioned_pkg}'" for node, _ in self.failures)
            reason = f'{len(self.failures)} node(s) failed: {names}'
        super().__init__(f'failed to cache unresolved nodes: {reason}')
        self.reason = reason
