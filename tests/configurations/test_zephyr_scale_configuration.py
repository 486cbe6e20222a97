from unittest.mock import Mock, patch

import pytest
import requests

from zephyr_sdk.configurations import ZephyrScaleConfiguration


class TestCheckConnection:

    def test_rejects_url_without_scheme(self):
        error = ZephyrScaleConfiguration.check_connection({"base_url": "jira.example.com", "token": "t"})
        assert error == "Zephyr Scale URL must start with http:// or https://"

    def test_requires_credentials(self):
        error = ZephyrScaleConfiguration.check_connection({"token": "  "})
        assert error == "Zephyr Scale API token, or username and password, are required"

    @patch("requests.get")
    def test_cloud_probe_uses_bearer_token(self, mock_get):
        mock_get.return_value = Mock(status_code=200)

        assert ZephyrScaleConfiguration.check_connection({"token": "secret"}) is None

        args, kwargs = mock_get.call_args
        assert args[0] == "https://api.zephyrscale.smartbear.com/v2/projects"
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}

    @patch("requests.get")
    def test_datacenter_probe_uses_basic_auth(self, mock_get):
        mock_get.return_value = Mock(status_code=200)

        error = ZephyrScaleConfiguration.check_connection({
            "base_url": "https://jira.example.com/",
            "deployment": "datacenter",
            "username": "user",
            "password": "pass",
        })

        assert error is None
        args, kwargs = mock_get.call_args
        assert args[0] == "https://jira.example.com/rest/atm/1.0/healthcheck"
        assert kwargs["auth"] == ("user", "pass")

    @pytest.mark.parametrize("status,message", [
        (401, "Authentication failed: invalid credentials"),
        (403, "Access forbidden: credentials lack required permissions"),
        (404, "Zephyr Scale API endpoint not found: verify the API URL"),
        (502, "Zephyr Scale API returned status code 502"),
    ])
    @patch("requests.get")
    def test_status_messages(self, mock_get, status, message):
        mock_get.return_value = Mock(status_code=status)
        assert ZephyrScaleConfiguration.check_connection({"token": "secret"}) == message

    @patch("requests.get", side_effect=requests.exceptions.ConnectionError("refused"))
    def test_connection_refused(self, mock_get):
        error = ZephyrScaleConfiguration.check_connection({"token": "secret"})
        assert error == ("Cannot connect to Zephyr Scale at "
                         "https://api.zephyrscale.smartbear.com/v2: connection refused")

    @patch("requests.get", side_effect=requests.exceptions.Timeout())
    def test_timeout(self, mock_get):
        error = ZephyrScaleConfiguration.check_connection({"token": "secret"})
        assert "timed out" in error


def test_secrets_are_masked_in_schema_dump():
    configuration = ZephyrScaleConfiguration(token="secret")
    assert "secret" not in str(configuration.model_dump())
    assert configuration.token.get_secret_value() == "secret"


class TestBaseUrl:

    def test_cloud_defaults_to_public_api(self):
        configuration = ZephyrScaleConfiguration(token="secret")
        assert configuration.base_url == "https://api.zephyrscale.smartbear.com/v2"

    def test_datacenter_requires_base_url(self):
        with pytest.raises(ValueError, match="base_url is required for Data Center"):
            ZephyrScaleConfiguration(deployment="datacenter", username="u", password="p")

    def test_datacenter_keeps_configured_url(self):
        configuration = ZephyrScaleConfiguration(deployment="datacenter", base_url="https://jira.example.com",
                                                 username="u", password="p")
        assert configuration.base_url == "https://jira.example.com"

    @patch("requests.get")
    def test_check_connection_datacenter_without_url_makes_no_request(self, mock_get):
        error = ZephyrScaleConfiguration.check_connection({
            "deployment": "datacenter",
            "username": "user",
            "password": "pass",
        })

        assert error == "Zephyr Scale Data Center requires the Jira base URL"
        mock_get.assert_not_called()
