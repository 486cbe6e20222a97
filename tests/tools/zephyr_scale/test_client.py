from unittest.mock import Mock, patch

import pytest
import requests

from zephyr_sdk.tools.zephyr_scale.client import ZephyrApiError, ZephyrScaleClient
from zephyr_sdk.tools.zephyr_scale.models import DeploymentVariant


def _response(status_code, json_data=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if json_data is not None:
        response.headers = {"Content-Type": "application/json; charset=utf-8"}
        response.content = b"{}"
        response.json.return_value = json_data
    else:
        response.headers = {"Content-Type": "text/plain"}
        response.content = text.encode()
        response.text = text
    return response


class TestZephyrScaleClient:

    def setup_method(self):
        self.cloud = ZephyrScaleClient("https://api.zephyrscale.smartbear.com/v2/", token="secret")
        self.datacenter = ZephyrScaleClient("https://jira.example.com", deployment="datacenter",
                                            username="user", password="pass", timeout=5)

    def test_cloud_uses_bearer_token(self):
        assert self.cloud.session.headers["Authorization"] == "Bearer secret"
        assert self.cloud.deployment == DeploymentVariant.CLOUD

    def test_datacenter_uses_basic_auth(self):
        assert self.datacenter.session.auth == ("user", "pass")
        assert "Authorization" not in self.datacenter.session.headers

    @patch("requests.Session.request")
    def test_cloud_endpoints(self, mock_request):
        mock_request.return_value = _response(200, {"key": "PROJ-T1"})

        response = self.cloud.get_test_case("PROJ-T1")

        assert response.status_code == 200
        assert response.data == {"key": "PROJ-T1"}
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://api.zephyrscale.smartbear.com/v2/testcases/PROJ-T1"
        assert kwargs["timeout"] == 30

    @patch("requests.Session.request")
    def test_datacenter_endpoints(self, mock_request):
        mock_request.return_value = _response(200, [])

        self.datacenter.get_test_run_results("PROJ-C1")

        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == "https://jira.example.com/rest/atm/1.0/testrun/PROJ-C1/testresults"
        assert kwargs["timeout"] == 5

    @patch("requests.Session.request")
    def test_search_sends_query_params(self, mock_request):
        mock_request.return_value = _response(200, [])

        self.datacenter.search_test_cases('projectKey = "PROJ"', max_results=10)

        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == "https://jira.example.com/rest/atm/1.0/testcase/search"
        assert kwargs["params"] == {"query": 'projectKey = "PROJ"', "maxResults": 10}

    @patch("requests.Session.request")
    def test_empty_body_is_none(self, mock_request):
        mock_request.return_value = _response(204)

        response = self.cloud.delete_test_case("PROJ-T1")

        assert response.status_code == 204
        assert response.data is None

    @patch("requests.Session.request")
    def test_non_2xx_raises_with_status_and_body(self, mock_request):
        mock_request.return_value = _response(400, {"errorMessages": ["bad folder"]})

        with pytest.raises(ZephyrApiError) as exc_info:
            self.cloud.create_folder({"projectKey": "PROJ", "name": "x", "type": "TEST_CASE"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.data == {"errorMessages": ["bad folder"]}
        assert str(exc_info.value) == 'Status: 400, Data: {"errorMessages": ["bad folder"]}'

    @patch("requests.Session.request")
    def test_transport_failure_has_no_status(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ZephyrApiError) as exc_info:
            self.cloud.get_test_run("PROJ-R1")

        assert exc_info.value.status_code is None
        assert "refused" in str(exc_info.value)
