from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class DeploymentVariant(str, Enum):
    CLOUD = "cloud"
    DATACENTER = "datacenter"


class ApiEndpoints(BaseModel):
    testcase: str
    testrun: str
    folder: str
    search: str


ENDPOINTS = {
    DeploymentVariant.CLOUD: ApiEndpoints(
        testcase="/testcases",
        testrun="/testcycles",
        folder="/folders",
        search="/testcases/search",
    ),
    DeploymentVariant.DATACENTER: ApiEndpoints(
        testcase="/rest/atm/1.0/testcase",
        testrun="/rest/atm/1.0/testrun",
        folder="/rest/atm/1.0/folder",
        search="/rest/atm/1.0/testcase/search",
    ),
}


class ScriptStep(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    description: Optional[str] = Field(default=None, description="Step description")
    test_data: Optional[str] = Field(default=None, alias="testData",
                                     description="Test data for the step (optional)")
    expected_result: Optional[str] = Field(default=None, alias="expectedResult",
                                           description="Expected result for the step (optional)")
    test_case_key: Optional[str] = Field(default=None, alias="testCaseKey",
                                         description="Test case key reference for calling other tests (optional)")


class StepByStepScript(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["STEP_BY_STEP"] = "STEP_BY_STEP"
    steps: List[ScriptStep] = Field(default_factory=list, description="Ordered test steps")


class PlainTextScript(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["PLAIN_TEXT"] = "PLAIN_TEXT"
    text: str = Field(description="Plain text test script")


class BddScript(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["BDD"] = "BDD"
    text: str = Field(description="Scenario in Gherkin syntax (Given/When/Then) or markdown")


TestScript = Annotated[
    Union[StepByStepScript, PlainTextScript, BddScript],
    Field(discriminator="type"),
]

test_script_adapter = TypeAdapter(TestScript)


class ParameterVariable(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: Literal["FREE_TEXT", "DATA_SET"]
    data_set: Optional[str] = Field(default=None, alias="dataSet")


class CaseParameters(BaseModel):
    variables: List[ParameterVariable] = Field(default_factory=list,
                                               description="Array of parameter variables")
    entries: List[Dict[str, Any]] = Field(default_factory=list,
                                          description="Array of parameter value entries")


class CreateTestCaseArgs(BaseModel):
    project_key: str = Field(description="Project key (required)")
    name: str = Field(description="Test case name (required)")
    test_script: Optional[TestScript] = Field(
        default=None,
        description="Test script: STEP_BY_STEP with 'steps', or PLAIN_TEXT / BDD with 'text'. "
                    "For BDD use Given/When/Then steps; markdown bullets are normalized.")
    folder: Optional[str] = Field(default=None, description='Folder path (optional, e.g., "/Orbiter/Cargo Bay")')
    status: Optional[Literal["Draft", "Approved", "Deprecated"]] = Field(
        default=None, description="Ignored on create: new test cases always start as Draft")
    priority: Optional[Literal["High", "Normal", "Low"]] = Field(default=None, description="Test case priority")
    precondition: Optional[str] = Field(default=None, description="Test precondition")
    objective: Optional[str] = Field(default=None, description="Test objective")
    component: Optional[str] = Field(default=None, description="Component name")
    owner: Optional[str] = Field(default=None, description="Test case owner")
    estimated_time: Optional[int] = Field(default=None, description="Estimated time in milliseconds")
    labels: Optional[List[str]] = Field(default=None, description="Labels")
    issue_links: Optional[List[str]] = Field(default=None,
                                             description="Issue keys to link, sent as issueLinks")
    custom_fields: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Custom fields object. Copy the customFields structure of an existing test case, "
                    'e.g. {"Type": "Functional", "Regression": false}')
    parameters: Optional[CaseParameters] = Field(default=None,
                                                 description="Test parameters for data-driven testing")


class CreateTestRunArgs(BaseModel):
    project_key: str = Field(description="Project key (required)")
    name: str = Field(description="Test run name (required)")
    test_case_keys: Optional[List[str]] = Field(default=None,
                                                description="Test case keys to include in the test run")
    test_plan_key: Optional[str] = Field(default=None, description="Test plan key to link this test run to")
    folder: Optional[str] = Field(default=None, description="Folder path")
    planned_start_date: Optional[str] = Field(default=None, description="Planned start date in ISO format")
    planned_end_date: Optional[str] = Field(default=None, description="Planned end date in ISO format")
    description: Optional[str] = Field(default=None, description="Test run description")
    owner: Optional[str] = Field(default=None, description="Test run owner")
    environment: Optional[str] = Field(default=None, description="Test environment")
    custom_fields: Optional[Dict[str, Any]] = Field(default=None, description="Custom fields object")
