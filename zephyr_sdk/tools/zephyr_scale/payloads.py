"""
Request bodies for the Zephyr Scale write endpoints.

Optional values are only copied when the caller supplied something truthy, so
the platform's defaults apply on create and stored values survive an update.
"""
import logging
from typing import Any, Dict, Optional, Union

from .gherkin import bdd_text_or_original
from .models import (
    BddScript,
    CreateTestCaseArgs,
    CreateTestRunArgs,
    PlainTextScript,
    ScriptStep,
    StepByStepScript,
    TestScript,
    test_script_adapter,
)
from .results import INTERNAL_ERROR, ZephyrToolError

logger = logging.getLogger(__name__)

DRAFT_STATUS = "Draft"
NOT_EXECUTED = "Not Executed"

# argument name -> payload field, in payload order
_TEST_CASE_FIELDS = (
    ("folder", "folder"),
    ("priority", "priority"),
    ("precondition", "precondition"),
    ("objective", "objective"),
    ("component", "component"),
    ("owner", "owner"),
    ("estimated_time", "estimatedTime"),
    ("labels", "labels"),
    ("issue_links", "issueLinks"),
    ("custom_fields", "customFields"),
    ("parameters", "parameters"),
)

_TEST_RUN_FIELDS = (
    ("folder", "folder"),
    ("planned_start_date", "plannedStartDate"),
    ("planned_end_date", "plannedEndDate"),
    ("description", "description"),
    ("owner", "owner"),
    ("environment", "environment"),
    ("custom_fields", "customFields"),
    ("test_plan_key", "testPlanKey"),
)

# full-replace update: these must survive from the stored record
UPDATE_REQUIRED_FIELDS = ("projectKey", "name", "status", "priority")
UPDATE_OPTIONAL_FIELDS = ("objective", "precondition", "folder", "component", "owner", "estimatedTime")


def _dump(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(by_alias=True, exclude_none=True)
    return value


def _step_payload(step: ScriptStep) -> Dict[str, str]:
    return {
        field: value
        for field, value in step.model_dump(by_alias=True).items()
        if value
    }


def build_test_script_payload(script: Union[TestScript, dict]) -> Dict[str, Any]:
    script = test_script_adapter.validate_python(_dump(script))
    payload: Dict[str, Any] = {"type": script.type}
    if isinstance(script, StepByStepScript):
        if script.steps:
            payload["steps"] = [_step_payload(step) for step in script.steps]
    elif isinstance(script, BddScript):
        if script.text:
            payload["text"] = bdd_text_or_original(script.text)
    elif isinstance(script, PlainTextScript):
        if script.text:
            payload["text"] = script.text
    return payload


def build_create_payload(args: Union[CreateTestCaseArgs, dict]) -> Dict[str, Any]:
    if not isinstance(args, CreateTestCaseArgs):
        args = CreateTestCaseArgs.model_validate(args)
    payload: Dict[str, Any] = {
        "projectKey": args.project_key,
        "name": args.name,
    }
    for arg_name, field in _TEST_CASE_FIELDS:
        value = getattr(args, arg_name)
        if value:
            payload[field] = _dump(value)
    if args.test_script is not None:
        payload["testScript"] = build_test_script_payload(args.test_script)
    if args.status and args.status != DRAFT_STATUS:
        logger.info(f"Ignoring status '{args.status}': new test cases are created as {DRAFT_STATUS}")
    payload["status"] = DRAFT_STATUS
    return payload


def build_update_payload(existing: Dict[str, Any], bdd_text: str) -> Dict[str, Any]:
    """Full-replace body that swaps the test script of ``existing`` for BDD text.

    Every field the stored record carries is resent; a required field missing
    from the record is an error because leaving it out would clear it.
    """
    payload: Dict[str, Any] = {}
    for field in UPDATE_REQUIRED_FIELDS:
        value = existing.get(field)
        if value is None or value == "":
            raise ZephyrToolError(
                f"Existing test case is missing required field '{field}' needed for update.",
                code=INTERNAL_ERROR,
            )
        payload[field] = value

    for field in UPDATE_OPTIONAL_FIELDS:
        if field in existing:
            payload[field] = existing[field]

    if isinstance(existing.get("labels"), list):
        payload["labels"] = existing["labels"]
    if existing.get("customFields"):
        payload["customFields"] = existing["customFields"]
    if existing.get("parameters"):
        payload["parameters"] = existing["parameters"]
    # issueKey is the deprecated single-link form of issueLinks
    if isinstance(existing.get("issueLinks"), list):
        payload["issueLinks"] = existing["issueLinks"]
    elif existing.get("issueKey"):
        payload["issueLinks"] = [existing["issueKey"]]

    payload["testScript"] = {
        "type": "BDD",
        "text": bdd_text_or_original(bdd_text),
    }
    return payload


def build_run_items(test_case_keys, status: Optional[str] = None):
    items = []
    for key in test_case_keys:
        item = {"testCaseKey": key}
        if status:
            item["testResultStatus"] = status
        items.append(item)
    return items


def build_test_run_payload(args: Union[CreateTestRunArgs, dict]) -> Dict[str, Any]:
    if not isinstance(args, CreateTestRunArgs):
        args = CreateTestRunArgs.model_validate(args)
    payload: Dict[str, Any] = {
        "projectKey": args.project_key,
        "name": args.name,
    }
    if args.test_case_keys:
        payload["items"] = build_run_items(args.test_case_keys)
    for arg_name, field in _TEST_RUN_FIELDS:
        value = getattr(args, arg_name)
        if value:
            payload[field] = value
    return payload


def build_folder_payload(project_key: str, name: str, folder_type: str = "TEST_CASE") -> Dict[str, Any]:
    # name is the full folder path, e.g. "/Parent/Child"
    return {
        "projectKey": project_key,
        "name": name,
        "type": folder_type,
    }


def build_folder_query(project_key: str, folder_path: str) -> str:
    escaped_path = folder_path.replace('"', '\\"')
    return f'projectKey = "{project_key}" AND folder = "{escaped_path}"'
