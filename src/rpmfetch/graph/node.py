"""dependency graph vertices and the package requirement they carry"""

__all__ = ("State", "NodeType", "VersionedPkg", "PkgNode")


class State:
    """Lifecycle states a graph node may be in.

    rpmfetch only ever moves a node out of :obj:`Unresolved`, into either
    :obj:`Cached` or :obj:`UpToDate`. The remaining states belong to the
    build scheduler and are carried through untouched.
    """

    Unresolved = 'Unresolved'
    Cached = 'Cached'
    UpToDate = 'UpToDate'
    Meta = 'Meta'
    Build = 'Build'
    BuildError = 'BuildError'

    known = frozenset((Unresolved, Cached, UpToDate, Meta, Build, BuildError))
    resolved = frozenset((Cached, UpToDate))


class NodeType:
    """Node classification handed to the build scheduler."""

    Normal = 'Normal'
    PreBuilt = 'PreBuilt'
    Build = 'Build'
    Goal = 'Goal'

    known = frozenset((Normal, PreBuilt, Build, Goal))
    # nodes of these types don't represent run-time requirements
    non_run = frozenset((Build, Goal))


class VersionedPkg:
    """A package name plus an optional version interval it must fall in.

    :ivar name: package or capability name
    :ivar condition: comparison operator for the lower (or only) bound
    :ivar version: version compared against with ``condition``
    :ivar scondition: comparison operator for the optional second bound
    :ivar sversion: version compared against with ``scondition``
    """

    __slots__ = ('name', 'condition', 'version', 'scondition', 'sversion')

    conditions = frozenset(('=', '<', '<=', '>', '>='))

    def __init__(self, name, condition=None, version=None, scondition=None, sversion=None):
        if not name:
            raise ValueError('package name must be non-empty')
        for op, ver in ((condition, version), (scondition, sversion)):
            if (op is None) != (ver is None):
                raise ValueError(
                    f'{name!r}: version condition and version must be given together')
            if op is not None and op not in self.conditions:
                raise ValueError(f'{name!r}: invalid version condition {op!r}')
        if scondition is not None and condition is None:
            raise ValueError(f'{name!r}: second version bound without a first one')
        self.name = name
        self.condition = condition
        self.version = version
        self.scondition = scondition
        self.sversion = sversion

    def terms(self):
        """Return the query terms a package manager understands.

        Each bound is its own term, an unversioned package is a single term
        holding just the name.
        """
        if self.condition is None:
            return (self.name,)
        l = [f'{self.name} {self.condition} {self.version}']
        if self.scondition is not None:
            l.append(f'{self.name} {self.scondition} {self.sversion}')
        return tuple(l)

    def __str__(self):
        return ','.join(self.terms())

    def __repr__(self):
        return f'<{self.__class__.__name__} {self} @{id(self):#x}>'

    def __eq__(self, other):
        try:
            return (
                self.name == other.name and
                self.condition == other.condition and
                self.version == other.version and
                self.scondition == other.scondition and
                self.sversion == other.sversion)
        except AttributeError:
            return NotImplemented

    def __hash__(self):
        return hash((self.name, self.condition, self.version, self.scondition, self.sversion))


class PkgNode:
    """A single vertex of the package dependency graph.

    :ivar node_id: stable integer id, unique within its graph
    :ivar versioned_pkg: :obj:`VersionedPkg` the node must be satisfied by
    :ivar implicit: requirement was discovered during the build instead of
        being declared up front
    :ivar state: one of the :obj:`State` values
    :ivar node_type: one of the :obj:`NodeType` values
    :ivar rpm_path: resolved artifact path, empty until resolved
    :ivar attrs: every other attribute the node was loaded with
    """

    __slots__ = ('node_id', 'versioned_pkg', 'implicit', 'state', 'node_type', 'rpm_path', 'attrs')

    def __init__(self, node_id, versioned_pkg, implicit=False, state=State.Unresolved,
                 node_type=NodeType.Normal, rpm_path='', attrs=None):
        if state not in State.known:
            raise ValueError(f'node {node_id}: unknown state {state!r}')
        if node_type not in NodeType.known:
            raise ValueError(f'node {node_id}: unknown type {node_type!r}')
        self.node_id = node_id
        self.versioned_pkg = versioned_pkg
        self.implicit = implicit
        self.state = state
        self.node_type = node_type
        self.rpm_path = rpm_path
        self.attrs = dict(attrs) if attrs else {}

    @property
    def unresolved(self):
        return self.state == State.Unresolved

    @property
    def is_run_node(self):
        return self.node_type not in NodeType.non_run

    def friendly_name(self):
        return f'{self.versioned_pkg}-{self.state}'

    def __str__(self):
        return f'{self.node_id}:{self.friendly_name()}'

    def __repr__(self):
        return f'<{self.__class__.__name__} {self}>'
