import pytest

from rpmfetch.resolver.errors import CompetingPackagesError, NoInstallableCandidate
from rpmfetch.resolver.select import select_rpm_path
from rpmfetch.test.misc import FakeSolver, mk_node


class TestSelectRpmPath:

    def setup_method(self):
        self.node = mk_node(1, 'sh')

    def test_single_candidate(self):
        solver = FakeSolver(error='unused')
        path = select_rpm_path(self.node, ['bash-5.1-1.x86_64'], '/cache', '/tmp', solver=solver)
        assert path == '/cache/bash-5.1-1.x86_64.rpm'
        assert solver.calls == []

    def test_no_candidates(self):
        with pytest.raises(ValueError):
            select_rpm_path(self.node, [], '/cache', '/tmp', solver=FakeSolver())

    def test_first_installable_wins(self, caplog):
        solver = FakeSolver()
        packages = ['bash-5.1-1.x86_64', 'dash-0.5-1.x86_64']
        path = select_rpm_path(self.node, packages, '/cache', '/tmp', solver=solver)
        assert path == '/cache/bash-5.1-1.x86_64.rpm'
        assert solver.calls == [
            ('/tmp', ['/cache/bash-5.1-1.x86_64.rpm', '/cache/dash-0.5-1.x86_64.rpm'])]
        assert "found 2 candidates to provide 'sh', picking the first one" in caplog.text

    def test_solver_order(self):
        solver = FakeSolver(installable=['dash-0.5-1.x86_64'])
        packages = ['bash-5.1-1.x86_64', 'dash-0.5-1.x86_64']
        path = select_rpm_path(self.node, packages, '/cache', '/tmp', solver=solver)
        assert path == '/cache/dash-0.5-1.x86_64.rpm'

    def test_none_installable(self):
        solver = FakeSolver(installable=[])
        with pytest.raises(NoInstallableCandidate) as excinfo:
            select_rpm_path(self.node, ['a-1-1.noarch', 'b-1-1.noarch'], '/c', '/t', solver=solver)
        assert excinfo.value.node is self.node
        assert excinfo.value.candidates == ('a-1-1.noarch', 'b-1-1.noarch')

    def test_solver_failure(self):
        solver = FakeSolver(error='rpm exploded')
        with pytest.raises(CompetingPackagesError) as excinfo:
            select_rpm_path(self.node, ['a-1-1.noarch', 'b-1-1.noarch'], '/c', '/t', solver=solver)
        assert 'rpm exploded' in str(excinfo.value)
