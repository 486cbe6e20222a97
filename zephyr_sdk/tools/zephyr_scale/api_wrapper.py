import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, PrivateAttr, SecretStr, ValidationError, create_model, model_validator

from ..base_wrapper import BaseToolApiWrapper
from ...configurations.zephyr_scale import CLOUD_API_URL
from .client import ZephyrApiError, ZephyrScaleClient
from .membership import RunMembership, membership_for
from .models import CreateTestCaseArgs, CreateTestRunArgs, DeploymentVariant
from .payloads import (
    build_create_payload,
    build_folder_payload,
    build_folder_query,
    build_test_run_payload,
    build_update_payload,
)
from .results import (
    INVALID_PARAMS,
    ToolResult,
    ZephyrToolError,
    describe_http_error,
    error_result,
    text_result,
    to_json,
    unwrap_items,
)

logger = logging.getLogger(__name__)

MAX_DIAGNOSTIC_IDS = 5

GetTestCase = create_model(
    "GetTestCase",
    test_case_key=(str, Field(description="Test case key (e.g., PROJ-T123)")),
)

UpdateTestCaseBdd = create_model(
    "UpdateTestCaseBdd",
    test_case_key=(str, Field(description="Test case key to update")),
    bdd_content=(str, Field(description="BDD content in markdown format")),
)

CreateFolder = create_model(
    "CreateFolder",
    project_key=(str, Field(description="Project key (required)")),
    name=(str, Field(description='Full folder path including parent folders (required). '
                                 'Examples: "/MyFolder" for root folder, "/Parent/Child" for nested folder')),
    folder_type=(Literal["TEST_CASE", "TEST_PLAN", "TEST_RUN"], Field(description="Type of folder",
                                                                      default="TEST_CASE")),
)

GetTestRunCases = create_model(
    "GetTestRunCases",
    test_run_key=(str, Field(description="Test run key (e.g., PROJ-C123)")),
)

DeleteTestCase = create_model(
    "DeleteTestCase",
    test_case_key=(str, Field(description="Test case key to delete (e.g., PROJ-T123)")),
)

GetTestRun = create_model(
    "GetTestRun",
    test_run_key=(str, Field(description="Test run key (e.g., PROJ-R123)")),
)

GetTestExecution = create_model(
    "GetTestExecution",
    execution_id=(str, Field(description="Test execution ID (e.g., 5805255)")),
    test_run_keys=(Optional[List[str]], Field(
        description='Test run keys to search in (required, e.g., ["PROJ-C152", "PROJ-C161"])',
        default=None)),
)

SearchTestCasesByFolder = create_model(
    "SearchTestCasesByFolder",
    project_key=(str, Field(description="Project key (e.g., PROJ)")),
    folder_path=(str, Field(description="Folder path to search in (e.g., /ProjectName/SubFolder)")),
    max_results=(Optional[int], Field(description="Maximum number of results to return", default=100)),
)

AddTestCasesToRun = create_model(
    "AddTestCasesToRun",
    test_run_key=(str, Field(description="Test run key (e.g., PROJ-C161)")),
    test_case_keys=(List[str], Field(description="Test case keys to add to the test run")),
)


def _failure(action: str, error: Exception, not_found: Optional[str] = None, **extra: Any) -> ZephyrToolError:
    if isinstance(error, ZephyrApiError) and error.status_code is not None:
        if not_found and error.status_code == 404:
            detail = not_found
        else:
            detail = describe_http_error(error.status_code, error.data)
            for name, value in extra.items():
                detail += f", {name}: {to_json(value)}"
    else:
        detail = str(error)
    return ZephyrToolError(f"Failed to {action}: {detail}")


class ZephyrScaleApiWrapper(BaseToolApiWrapper):
    # Zephyr Scale Cloud API url, or the Jira url of a Data Center instance
    base_url: str = CLOUD_API_URL
    deployment: DeploymentVariant = DeploymentVariant.CLOUD
    # bearer token (cloud & datacenter)
    token: Optional[SecretStr] = None
    # basic auth (datacenter)
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    timeout: float = 30

    _client: Optional[ZephyrScaleClient] = PrivateAttr(default=None)
    _membership: Optional[RunMembership] = PrivateAttr(default=None)

    @model_validator(mode='before')
    @classmethod
    def validate_toolkit(cls, values):
        if not values.get('base_url'):
            if values.get('deployment') == DeploymentVariant.DATACENTER:
                raise ValueError("base_url is required for Data Center deployments.")
            values['base_url'] = CLOUD_API_URL
        if not values.get('token') and not (values.get('username') and values.get('password')):
            raise ValueError("Either token or username and password are required.")
        return values

    def model_post_init(self, __context: Any) -> None:
        self._client = ZephyrScaleClient(
            base_url=self.base_url,
            deployment=self.deployment,
            token=self.token.get_secret_value() if self.token else None,
            username=self.username,
            password=self.password.get_secret_value() if self.password else None,
            timeout=self.timeout,
        )
        # the membership strategy is fixed for the lifetime of the wrapper
        self._membership = membership_for(self._client)

    def get_test_case(self, test_case_key: str) -> ToolResult:
        """Get detailed information about a specific test case."""
        try:
            response = self._client.get_test_case(test_case_key)
        except ZephyrApiError as e:
            raise _failure("get test case", e) from e
        return text_result(to_json(response.data))

    def create_test_case(self, project_key: str, name: str, test_script: Any = None,
                         folder: Optional[str] = None, status: Optional[str] = None,
                         priority: Optional[str] = None, precondition: Optional[str] = None,
                         objective: Optional[str] = None, component: Optional[str] = None,
                         owner: Optional[str] = None, estimated_time: Optional[int] = None,
                         labels: Optional[List[str]] = None, issue_links: Optional[List[str]] = None,
                         custom_fields: Optional[Dict[str, Any]] = None, parameters: Any = None) -> ToolResult:
        """Create a new test case with STEP_BY_STEP, PLAIN_TEXT, or BDD content.
        New test cases always start in Draft status. To match the project's structure,
        fetch an existing test case with get_test_case and reuse its customFields layout."""
        try:
            args = CreateTestCaseArgs(
                project_key=project_key, name=name, test_script=test_script, folder=folder,
                status=status, priority=priority, precondition=precondition, objective=objective,
                component=component, owner=owner, estimated_time=estimated_time, labels=labels,
                issue_links=issue_links, custom_fields=custom_fields, parameters=parameters,
            )
        except ValidationError as e:
            raise ZephyrToolError(f"Failed to create test case: {e}", code=INVALID_PARAMS) from e
        payload = build_create_payload(args)
        logger.debug(f"Create test case payload: {payload}")

        try:
            response = self._client.create_test_case(payload)
        except ZephyrApiError as e:
            raise _failure("create test case", e) from e
        if response.status_code != 201:
            raise ZephyrToolError(f"Failed to create test case: Unexpected status code: {response.status_code}")

        test_key = (response.data or {}).get("key") or "Unknown"
        summary = {"key": test_key, "type": args.test_script.type if args.test_script else "none"}
        if args.test_script is not None and args.test_script.type == "STEP_BY_STEP":
            summary["hasSteps"] = len(args.test_script.steps)
        elif args.test_script is not None:
            summary["hasText"] = bool(args.test_script.text)
        logger.info(f"Created test case {test_key} in project {project_key}")
        return text_result(f"Test case created successfully: {test_key}\n{to_json(summary)}")

    def update_test_case_bdd(self, test_case_key: str, bdd_content: str) -> ToolResult:
        """Update an existing test case with BDD content.
        Markdown steps are normalized to Given/When/Then; all other fields of the test case are preserved."""
        try:
            existing = self._client.get_test_case(test_case_key).data or {}
            payload = build_update_payload(existing, bdd_content)
            response = self._client.update_test_case(test_case_key, payload)
        except ZephyrToolError as e:
            raise ZephyrToolError(f"Failed to update test case BDD: {e.message}", code=e.code) from e
        except ZephyrApiError as e:
            raise _failure("update test case BDD", e) from e
        if response.status_code != 200:
            raise ZephyrToolError(
                f"Failed to update test case BDD: Failed to update {test_case_key}: {response.status_code}")

        summary = {
            "textLength": len(payload["testScript"]["text"]),
            "projectKey": payload["projectKey"],
            "preservedLabels": len(payload.get("labels") or []),
        }
        return text_result(f"Updated {test_case_key} with BDD content successfully\n"
                           f"Payload summary: {to_json(summary)}")

    def create_folder(self, project_key: str, name: str, folder_type: str = "TEST_CASE") -> ToolResult:
        """Create a new folder. The name is the full folder path, e.g. "/Parent/Child"."""
        payload = build_folder_payload(project_key, name, folder_type)
        try:
            response = self._client.create_folder(payload)
        except ZephyrApiError as e:
            raise _failure("create folder", e, **{"Payload sent": payload}) from e
        if response.status_code not in (200, 201):
            raise ZephyrToolError(f"Failed to create folder: Unexpected status code: {response.status_code}")

        data = response.data or {}
        return text_result(f"Folder created successfully: {data.get('name') or name} "
                           f"(ID: {data.get('id') or 'N/A'})\n{to_json(data)}")

    def get_test_run_cases(self, test_run_key: str) -> ToolResult:
        """Get test case keys from a test run."""
        try:
            response = self._client.get_test_run(test_run_key)
        except ZephyrApiError as e:
            raise _failure("get test run cases", e) from e
        items = (response.data or {}).get("items") or []
        return text_result(to_json([item.get("testCaseKey") for item in items]))

    def delete_test_case(self, test_case_key: str) -> ToolResult:
        """Delete a specific test case."""
        try:
            response = self._client.delete_test_case(test_case_key)
        except ZephyrApiError as e:
            raise _failure("delete test case", e) from e
        if response.status_code == 204:
            return text_result(f"Test case {test_case_key} deleted successfully.")
        return error_result(f"Failed to delete test case. Status: {response.status_code}")

    def create_test_run(self, project_key: str, name: str, test_case_keys: Optional[List[str]] = None,
                        test_plan_key: Optional[str] = None, folder: Optional[str] = None,
                        planned_start_date: Optional[str] = None, planned_end_date: Optional[str] = None,
                        description: Optional[str] = None, owner: Optional[str] = None,
                        environment: Optional[str] = None,
                        custom_fields: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Create a new test run, optionally populated with test cases."""
        try:
            args = CreateTestRunArgs(
                project_key=project_key, name=name, test_case_keys=test_case_keys, test_plan_key=test_plan_key,
                folder=folder, planned_start_date=planned_start_date, planned_end_date=planned_end_date,
                description=description, owner=owner, environment=environment, custom_fields=custom_fields,
            )
        except ValidationError as e:
            raise ZephyrToolError(f"Failed to create test run: {e}", code=INVALID_PARAMS) from e
        payload = build_test_run_payload(args)
        try:
            response = self._client.create_test_run(payload)
        except ZephyrApiError as e:
            raise _failure("create test run", e) from e
        if response.status_code != 201:
            raise ZephyrToolError(f"Failed to create test run: Unexpected status code: {response.status_code}")

        test_run_key = (response.data or {}).get("key") or "Unknown"
        summary = {
            "key": test_run_key,
            "name": name,
            "testCaseCount": len(test_case_keys or []),
            "environment": environment or "Not specified",
        }
        return text_result(f"Test run created successfully: {test_run_key}\n{to_json(summary)}")

    def get_test_run(self, test_run_key: str) -> ToolResult:
        """Get detailed information about a specific test run."""
        try:
            response = self._client.get_test_run(test_run_key)
        except ZephyrApiError as e:
            raise _failure("get test run", e, not_found=f"Test run {test_run_key} not found") from e
        return text_result(to_json(response.data))

    def get_test_execution(self, execution_id: str, test_run_keys: Optional[List[str]] = None) -> ToolResult:
        """Get detailed information about a specific test execution by its ID.
        The given test runs are searched in order and the search stops at the first match."""
        if not test_run_keys:
            raise ZephyrToolError(
                'test_run_keys is required. Please provide an array of test run keys to search in '
                '(e.g., ["PROJ-C152", "PROJ-C161"]). Use get_test_run_cases to find test runs if needed.',
                code=INVALID_PARAMS,
            )

        search_results = []
        for test_run_key in test_run_keys:
            self._log_tool_event(f"Searching test run {test_run_key} for execution {execution_id}",
                                 tool_name="get_test_execution")
            try:
                response = self._client.get_test_run_results(test_run_key)
            except ZephyrApiError as e:
                logger.warning(f"Skipping test run {test_run_key}: {e}")
                search_results.append({"testRunKey": test_run_key, "error": str(e)})
                continue

            data = response.data
            # non-JSON bodies and non-object entries hold no executions
            results = [result for result in (data if isinstance(data, list) else [data])
                       if isinstance(result, dict)]
            for result in results:
                if result.get("id") is not None and str(result["id"]) == str(execution_id):
                    return text_result(f"Test execution {execution_id} found in {test_run_key}:\n{to_json(result)}")
            search_results.append({
                "testRunKey": test_run_key,
                "executionCount": len(results),
                "executionIds": [result.get("id") for result in results][:MAX_DIAGNOSTIC_IDS],
            })

        raise ZephyrToolError(
            f"Failed to get test execution: Test execution {execution_id} not found in any of the "
            f"{len(test_run_keys)} test runs searched. Search results: {to_json(search_results)}"
        )

    def search_test_cases_by_folder(self, project_key: str, folder_path: str,
                                    max_results: Optional[int] = 100) -> ToolResult:
        """Search for test cases in a specific folder."""
        query = build_folder_query(project_key, folder_path)
        try:
            response = self._client.search_test_cases(query, max_results=max_results or 100)
        except ZephyrApiError as e:
            raise _failure("search test cases by folder", e,
                           not_found=f'Folder "{folder_path}" not found or no test cases found') from e

        test_cases = unwrap_items(response.data)
        summary = {
            "folder": folder_path,
            "query": query,
            "testCaseKeys": [test_case.get("key") for test_case in test_cases],
            "totalCount": len(test_cases),
        }
        return text_result(f'Found {len(test_cases)} test cases in folder "{folder_path}":\n{to_json(summary)}')

    def add_test_cases_to_run(self, test_run_key: str, test_case_keys: List[str]) -> ToolResult:
        """Add test cases to an existing test run. Test cases already in the run are left untouched."""
        self._log_tool_event(f"Adding {len(test_case_keys)} test cases to test run {test_run_key}",
                             tool_name="add_test_cases_to_run")
        try:
            update = self._membership.add_test_cases(test_run_key, test_case_keys)
        except ZephyrApiError as e:
            raise _failure("add test cases", e) from e

        if not update.written:
            return text_result("All specified test cases are already in the test run.")
        if not update.accepted:
            return error_result("An unexpected error occurred.")
        if self._client.deployment == DeploymentVariant.DATACENTER:
            return text_result(f"Added {update.added} new test cases to test run {test_run_key}.")
        return text_result(f"Successfully updated test cases for test run {test_run_key}.")

    def get_available_tools(self):
        return [
            {
                "name": "get_test_case",
                "description": self.get_test_case.__doc__,
                "args_schema": GetTestCase,
                "ref": self.get_test_case,
            },
            {
                "name": "create_test_case",
                "description": self.create_test_case.__doc__,
                "args_schema": CreateTestCaseArgs,
                "ref": self.create_test_case,
            },
            {
                "name": "update_test_case_bdd",
                "description": self.update_test_case_bdd.__doc__,
                "args_schema": UpdateTestCaseBdd,
                "ref": self.update_test_case_bdd,
            },
            {
                "name": "create_folder",
                "description": self.create_folder.__doc__,
                "args_schema": CreateFolder,
                "ref": self.create_folder,
            },
            {
                "name": "get_test_run_cases",
                "description": self.get_test_run_cases.__doc__,
                "args_schema": GetTestRunCases,
                "ref": self.get_test_run_cases,
            },
            {
                "name": "delete_test_case",
                "description": self.delete_test_case.__doc__,
                "args_schema": DeleteTestCase,
                "ref": self.delete_test_case,
            },
            {
                "name": "create_test_run",
                "description": self.create_test_run.__doc__,
                "args_schema": CreateTestRunArgs,
                "ref": self.create_test_run,
            },
            {
                "name": "get_test_run",
                "description": self.get_test_run.__doc__,
                "args_schema": GetTestRun,
                "ref": self.get_test_run,
            },
            {
                "name": "get_test_execution",
                "description": self.get_test_execution.__doc__,
                "args_schema": GetTestExecution,
                "ref": self.get_test_execution,
            },
            {
                "name": "search_test_cases_by_folder",
                "description": self.search_test_cases_by_folder.__doc__,
                "args_schema": SearchTestCasesByFolder,
                "ref": self.search_test_cases_by_folder,
            },
            {
                "name": "add_test_cases_to_run",
                "description": self.add_test_cases_to_run.__doc__,
                "args_schema": AddTestCasesToRun,
                "ref": self.add_test_cases_to_run,
            },
        ]
