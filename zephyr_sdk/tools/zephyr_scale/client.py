import logging
from typing import Any, NamedTuple, Optional

import requests

from .models import ApiEndpoints, DeploymentVariant, ENDPOINTS
from .results import describe_http_error

logger = logging.getLogger(__name__)


class ZephyrApiError(Exception):
    """Raised for non-2xx responses and transport failures."""

    def __init__(self, message: str, status_code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.data = data

    @classmethod
    def from_response(cls, response: requests.Response) -> "ZephyrApiError":
        data = _parse_body(response)
        return cls(describe_http_error(response.status_code, data), response.status_code, data)


class ApiResponse(NamedTuple):
    status_code: int
    data: Any


def _parse_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    if response.headers.get("Content-Type", "").startswith("application/json"):
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class ZephyrScaleClient:
    def __init__(self, base_url: str, deployment: DeploymentVariant = DeploymentVariant.CLOUD,
                 token: Optional[str] = None, username: Optional[str] = None,
                 password: Optional[str] = None, timeout: float = 30,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.deployment = DeploymentVariant(deployment)
        self.endpoints: ApiEndpoints = ENDPOINTS[self.deployment]
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        elif username and password:
            self.session.auth = (username, password)

    def _do_request(self, method: str, api_path: str, json: Any = None, params: dict = None) -> ApiResponse:
        url = f"{self.base_url}{api_path}"
        logger.debug(f"{method} {url} params={params}")
        try:
            resp = self.session.request(method=method, url=url, json=json, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ZephyrApiError(f"Error performing request {method} {api_path}: {str(e)}") from e
        if not resp.ok:
            logger.error(f"{method} {api_path} returned {resp.status_code}")
            raise ZephyrApiError.from_response(resp)
        return ApiResponse(resp.status_code, _parse_body(resp))

    # Test Cases
    def get_test_case(self, test_case_key: str) -> ApiResponse:
        return self._do_request("GET", f"{self.endpoints.testcase}/{test_case_key}")

    def create_test_case(self, test_case_data: dict) -> ApiResponse:
        return self._do_request("POST", self.endpoints.testcase, json=test_case_data)

    def update_test_case(self, test_case_key: str, test_case_data: dict) -> ApiResponse:
        return self._do_request("PUT", f"{self.endpoints.testcase}/{test_case_key}", json=test_case_data)

    def delete_test_case(self, test_case_key: str) -> ApiResponse:
        return self._do_request("DELETE", f"{self.endpoints.testcase}/{test_case_key}")

    def search_test_cases(self, query: str, max_results: int = 100) -> ApiResponse:
        params = {
            "query": query,
            "maxResults": max_results,
        }
        return self._do_request("GET", self.endpoints.search, params=params)

    # Test Runs
    def get_test_run(self, test_run_key: str) -> ApiResponse:
        return self._do_request("GET", f"{self.endpoints.testrun}/{test_run_key}")

    def create_test_run(self, test_run_data: dict) -> ApiResponse:
        return self._do_request("POST", self.endpoints.testrun, json=test_run_data)

    def update_test_run(self, test_run_key: str, test_run_data: dict) -> ApiResponse:
        return self._do_request("PUT", f"{self.endpoints.testrun}/{test_run_key}", json=test_run_data)

    def get_test_run_results(self, test_run_key: str) -> ApiResponse:
        return self._do_request("GET", f"{self.endpoints.testrun}/{test_run_key}/testresults")

    # Folders
    def create_folder(self, folder_data: dict) -> ApiResponse:
        return self._do_request("POST", self.endpoints.folder, json=folder_data)
