"""
picking one RPM out of the candidates providing a requirement
"""

__all__ = ("select_rpm_path",)

from ..log import logger
from ..rpm import RpmError, resolve_competing_packages, rpm_path
from .errors import CompetingPackagesError, NoInstallableCandidate


def select_rpm_path(node, packages, out_dir, tmp_dir, solver=resolve_competing_packages):
    """Return the path of the RPM chosen to satisfy ``node``.

    A single candidate is used as is. Otherwise ``solver`` is asked which
    candidates can be installed together and the first one it returns wins.

    :param packages: ordered, unique package identifiers providing the node
    :param solver: callable taking ``(tmp_dir, rpm_paths)``, returning the
        installable subset of ``rpm_paths``
    :raise NoInstallableCandidate: if no candidate can be installed
    :raise CompetingPackagesError: if the solver itself fails
    """
    if not packages:
        raise ValueError(f'no candidates given for {node}')

    rpm_paths = [rpm_path(x, out_dir) for x in packages]
    if len(rpm_paths) == 1:
        return rpm_paths[0]

    logger.debug('found %d candidates, resolving', len(rpm_paths))
    try:
        resolved = solver(tmp_dir, rpm_paths)
    except RpmError as e:
        logger.error(
            "failed while trying to pick an RPM providing '%s' from the following RPMs: %s",
            node.versioned_pkg.name, rpm_paths)
        raise CompetingPackagesError(node, packages, str(e)) from e

    if not resolved:
        logger.error(
            "failed while trying to pick an RPM providing '%s', "
            "no RPM can be installed from the following: %s",
            node.versioned_pkg.name, rpm_paths)
        raise NoInstallableCandidate(node, packages)
    elif len(resolved) > 1:
        logger.warning(
            "found %d candidates to provide '%s', picking the first one",
            len(resolved), node.versioned_pkg.name)
    return resolved[0]
