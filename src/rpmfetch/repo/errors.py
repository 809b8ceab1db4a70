"""
exceptions thrown by repo cloners and the cache they populate
"""

from ..exceptions import RpmfetchException, RpmfetchUserException


class RepoError(RpmfetchException):
    """Generic repo cloner error."""


class ClonerInitError(RepoError, RpmfetchUserException):
    """Cloner couldn't be set up, nothing can be resolved."""

    def __init__(self, reason):
        super().__init__(f'failed initializing repo cloner: {reason}')
        self.reason = reason


class ProviderQueryError(RepoError):
    """Querying which packages provide a requirement failed."""

    def __init__(self, pkg, reason):
        super().__init__(f'failed querying providers of {str(pkg)!r}: {reason}')
        self.pkg = pkg
        self.reason = reason


class CloneError(RepoError):
    """A package couldn't be cloned into the cache."""

    def __init__(self, package, reason):
        super().__init__(f'failed cloning {package!r}: {reason}')
        self.package = package
        self.reason = reason


class SnapshotRestoreError(RepoError, RpmfetchUserException):
    """Cache couldn't be restored from a snapshot file."""

    def __init__(self, path, reason):
        super().__init__(f'failed restoring cache from {path!r}: {reason}')
        self.path = path
        self.reason = reason


class SnapshotSaveError(RepoError, RpmfetchUserException):
    """Cache contents couldn't be saved to a snapshot file."""

    def __init__(self, path, reason):
        super().__init__(f'failed saving cache contents to {path!r}: {reason}')
        self.path = path
        self.reason = reason


class RepositoryMaterializationError(RepoError, RpmfetchUserException):
    """Cloned packages couldn't be turned into a package repository."""

    def __init__(self, location, reason):
        super().__init__(f'failed converting {location!r} into a repo: {reason}')
        self.location = location
        self.reason = reason
