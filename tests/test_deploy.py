"""
Deploy Script Tests
Output, exit codes, and single-attempt behaviour of scripts/deploy.py
"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

from blockchain.exceptions import (
    ArtifactNotFoundError,
    ConfigurationError,
    DeploymentFailedError
)
from scripts import deploy


@pytest.fixture
def factory():
    """DealClient factory whose deploy resolves to 0xABC123"""
    contract_factory = Mock()
    contract_factory.deploy = AsyncMock(return_value=SimpleNamespace(address='0xABC123'))
    return contract_factory


@pytest.fixture
def network(factory):
    net = Mock()
    net.get_contract_factory = AsyncMock(return_value=factory)
    net.disconnect = AsyncMock()
    return net


class TestDeploySuccess:
    """Successful deployment"""

    def test_prints_deployed_address(self, network, capsys):
        exit_code = deploy.run(network)
        captured = capsys.readouterr()

        assert exit_code == 0
        assert captured.out == "Deployed to 0xABC123\n"

    def test_requests_dealclient_factory(self, network, factory):
        deploy.run(network)

        network.get_contract_factory.assert_awaited_once_with("DealClient")
        factory.deploy.assert_awaited_once_with()

    def test_address_comes_from_deployed_contract(self, network, factory, capsys):
        factory.deploy.return_value = SimpleNamespace(address='0x5FbDB2315678afecb367f032d93F642f64180aa3')

        deploy.run(network)

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["Deployed to 0x5FbDB2315678afecb367f032d93F642f64180aa3"]

    def test_uses_network_from_env_by_default(self, network, capsys):
        with patch.object(deploy.Network, 'from_env', return_value=network) as from_env:
            exit_code = deploy.run()

        assert exit_code == 0
        from_env.assert_called_once_with()
        assert "Deployed to 0xABC123" in capsys.readouterr().out


class TestDeployFailure:
    """Any failure: no success line, error on stderr, exit code 1"""

    def test_insufficient_funds(self, network, factory, capsys):
        factory.deploy.side_effect = Exception("insufficient funds")

        exit_code = deploy.run(network)
        captured = capsys.readouterr()

        assert exit_code == 1
        assert "Deployed to" not in captured.out
        assert "insufficient funds" in captured.err

    def test_factory_lookup_failure(self, network, factory, capsys):
        network.get_contract_factory.side_effect = ArtifactNotFoundError('DealClient', 'artifacts')

        exit_code = deploy.run(network)
        captured = capsys.readouterr()

        assert exit_code == 1
        assert captured.out == ""
        assert "Artifact for DealClient not found" in captured.err
        factory.deploy.assert_not_awaited()

    def test_confirmation_failure(self, network, factory, capsys):
        factory.deploy.side_effect = DeploymentFailedError('DealClient', '0x' + 'ab' * 32)

        exit_code = deploy.run(network)
        captured = capsys.readouterr()

        assert exit_code == 1
        assert captured.out == ""
        assert "reverted" in captured.err

    def test_configuration_failure(self, capsys):
        with patch.object(deploy.Network, 'from_env', side_effect=ConfigurationError("PRIVATE_KEY must be set in .env")):
            exit_code = deploy.run()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "PRIVATE_KEY must be set" in captured.err

    def test_error_reported_at_any_log_level(self, network, factory, capsys, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'CRITICAL')
        factory.deploy.side_effect = Exception("insufficient funds")

        exit_code = deploy.run(network)
        captured = capsys.readouterr()

        assert exit_code == 1
        assert "insufficient funds" in captured.err

    def test_no_retry_after_failure(self, network, factory):
        factory.deploy.side_effect = Exception("nonce too low")

        deploy.run(network)

        assert factory.deploy.await_count == 1
        assert network.get_contract_factory.await_count == 1


class TestProviderCleanup:
    """The network connection is closed once the deployment settles"""

    def test_disconnects_after_success(self, network):
        deploy.run(network)

        network.disconnect.assert_awaited_once_with()

    def test_disconnects_after_failure(self, network, factory):
        factory.deploy.side_effect = Exception("nonce too low")

        deploy.run(network)

        network.disconnect.assert_awaited_once_with()


class TestEntryPoint:
    """Console script wrapper"""

    @pytest.mark.parametrize('code', [0, 1])
    def test_cli_exits_with_run_status(self, code):
        with patch.object(deploy, 'run', return_value=code):
            with pytest.raises(SystemExit) as exc_info:
                deploy.cli()

        assert exc_info.value.code == code
