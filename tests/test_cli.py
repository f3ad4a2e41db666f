"""Unit tests for the crd-schema-pull command line."""

import logging
import pytest
from pathlib import Path
from unittest.mock import patch, MagicMock


class TestMain:

    @pytest.mark.unit
    @patch("crd_schema_pull.cli.pull_schemas")
    @patch("crd_schema_pull.cli.get_api_client")
    def test_success(self, mock_get_client, mock_pull, tmp_path, caplog):
        from crd_schema_pull.cli import main

        api_client = MagicMock()
        mock_get_client.return_value = api_client
        mock_pull.return_value = [tmp_path / "example.com" / "v1" / "widget.json"]

        with caplog.at_level(logging.INFO, logger="crd-schema-pull"):
            code = main(["--context", "staging", "--output", str(tmp_path)])

        assert code == 0
        mock_get_client.assert_called_once_with("staging")
        mock_pull.assert_called_once_with(api_client, tmp_path)
        assert f"Wrote 1 schemas to {tmp_path}" in caplog.text

    @pytest.mark.unit
    @patch("crd_schema_pull.cli.pull_schemas")
    @patch("crd_schema_pull.cli.get_api_client")
    def test_fatal_error(self, mock_get_client, mock_pull, tmp_path, caplog):
        from crd_schema_pull.cli import main
        from crd_schema_pull.errors import TransportError

        mock_pull.side_effect = TransportError(
            "ApiextensionsV1Api.list_custom_resource_definition", "connection refused",
        )

        code = main(["--output", str(tmp_path)])

        assert code == 1
        assert (
            "Error pulling CRD schemas: "
            "ApiextensionsV1Api.list_custom_resource_definition: connection refused"
        ) in caplog.text

    @pytest.mark.unit
    @patch("crd_schema_pull.cli.get_api_client")
    def test_configuration_error(self, mock_get_client, tmp_path):
        from crd_schema_pull.cli import main
        from crd_schema_pull.errors import ConfigurationError

        mock_get_client.side_effect = ConfigurationError("kubeconfig", "no context")
        assert main(["--output", str(tmp_path)]) == 1

    @pytest.mark.unit
    @patch("crd_schema_pull.cli.pull_schemas")
    @patch("crd_schema_pull.cli.get_api_client")
    def test_default_root_from_environment(self, mock_get_client, mock_pull, monkeypatch):
        from crd_schema_pull.cli import main
        from crd_schema_pull.k8s_config import SCHEMA_ROOT_ENV

        monkeypatch.setenv(SCHEMA_ROOT_ENV, "/srv/schemas")
        mock_pull.return_value = []

        assert main([]) == 0
        mock_get_client.assert_called_once_with("")
        assert mock_pull.call_args[0][1] == Path("/srv/schemas")

    @pytest.mark.unit
    def test_verbose_and_quiet_are_exclusive(self):
        from crd_schema_pull.cli import main

        with pytest.raises(SystemExit) as excinfo:
            main(["--verbose", "--quiet"])
        assert excinfo.value.code == 2
