"""Unit tests for cluster client and schema root resolution."""

import pytest
from pathlib import Path
from unittest.mock import patch, MagicMock

from kubernetes.config import ConfigException


class TestGetApiClient:

    @pytest.mark.unit
    @patch("crd_schema_pull.k8s_config.config.new_client_from_config")
    def test_uses_kubeconfig_context(self, mock_new_client):
        from crd_schema_pull.k8s_config import get_api_client

        api_client = MagicMock()
        mock_new_client.return_value = api_client

        assert get_api_client("staging") is api_client
        mock_new_client.assert_called_once_with(context="staging")

    @pytest.mark.unit
    @patch("crd_schema_pull.k8s_config.config.new_client_from_config")
    def test_current_context_by_default(self, mock_new_client):
        from crd_schema_pull.k8s_config import get_api_client

        get_api_client()
        mock_new_client.assert_called_once_with(context=None)

    @pytest.mark.unit
    @patch("crd_schema_pull.k8s_config.config.load_incluster_config")
    @patch("crd_schema_pull.k8s_config.config.new_client_from_config")
    def test_explicit_context_does_not_fall_back(self, mock_new_client, mock_incluster):
        from crd_schema_pull.errors import ConfigurationError
        from crd_schema_pull.k8s_config import get_api_client

        mock_new_client.side_effect = ConfigException("context 'staging' not found")

        with pytest.raises(ConfigurationError) as excinfo:
            get_api_client("staging")

        assert str(excinfo.value) == "kubeconfig: context 'staging' not found"
        mock_incluster.assert_not_called()

    @pytest.mark.unit
    @patch("crd_schema_pull.k8s_config.config.load_incluster_config")
    @patch("crd_schema_pull.k8s_config.config.new_client_from_config")
    def test_falls_back_to_incluster(self, mock_new_client, mock_incluster):
        from kubernetes import client
        from crd_schema_pull.k8s_config import get_api_client

        mock_new_client.side_effect = ConfigException("No configuration found.")

        api_client = get_api_client()

        assert isinstance(api_client, client.ApiClient)
        _, kwargs = mock_incluster.call_args
        assert kwargs["client_configuration"] is api_client.configuration

    @pytest.mark.unit
    @patch("crd_schema_pull.k8s_config.config.load_incluster_config")
    @patch("crd_schema_pull.k8s_config.config.new_client_from_config")
    def test_no_configuration_at_all(self, mock_new_client, mock_incluster):
        from crd_schema_pull.errors import ConfigurationError
        from crd_schema_pull.k8s_config import get_api_client

        mock_new_client.side_effect = ConfigException("No configuration found.")
        mock_incluster.side_effect = ConfigException("Service host/port is not set.")

        with pytest.raises(ConfigurationError) as excinfo:
            get_api_client()
        assert "Service host/port is not set." in str(excinfo.value)


class TestSchemaRoot:

    @pytest.mark.unit
    def test_explicit_root(self, monkeypatch, tmp_path):
        from crd_schema_pull.k8s_config import SCHEMA_ROOT_ENV, get_schema_root

        monkeypatch.setenv(SCHEMA_ROOT_ENV, "/elsewhere")
        assert get_schema_root(str(tmp_path)) == tmp_path

    @pytest.mark.unit
    def test_environment_root(self, monkeypatch):
        from crd_schema_pull.k8s_config import SCHEMA_ROOT_ENV, get_schema_root

        monkeypatch.setenv(SCHEMA_ROOT_ENV, "/srv/schemas")
        assert get_schema_root() == Path("/srv/schemas")

    @pytest.mark.unit
    def test_default_root(self, monkeypatch, tmp_path):
        from crd_schema_pull.k8s_config import SCHEMA_ROOT_ENV, get_schema_root

        monkeypatch.delenv(SCHEMA_ROOT_ENV, raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_schema_root() == tmp_path / ".ytt-lint" / "schema" / "k8s"

    @pytest.mark.unit
    def test_unknown_home(self, monkeypatch):
        from crd_schema_pull.errors import ConfigurationError
        from crd_schema_pull.k8s_config import SCHEMA_ROOT_ENV, get_schema_root

        def no_home(cls):
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.delenv(SCHEMA_ROOT_ENV, raising=False)
        monkeypatch.setattr(Path, "home", classmethod(no_home))

        with pytest.raises(ConfigurationError) as excinfo:
            get_schema_root()
        assert excinfo.value.operation == "Path.home"
