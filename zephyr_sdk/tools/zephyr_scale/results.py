import json
from typing import Any, List, Literal, Optional

from langchain_core.tools import ToolException
from pydantic import BaseModel, Field

INVALID_PARAMS = "invalid_params"
INTERNAL_ERROR = "internal_error"


class ZephyrToolError(ToolException):
    """The single error kind every Zephyr Scale tool fails with."""

    def __init__(self, message: str, code: str = INTERNAL_ERROR):
        super().__init__(message)
        self.message = message
        self.code = code


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    content: List[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    model_config = {"populate_by_name": True}

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    def to_envelope(self) -> dict:
        envelope = {"content": [item.model_dump() for item in self.content]}
        if self.is_error:
            envelope["isError"] = True
        return envelope


def text_result(text: str) -> ToolResult:
    return ToolResult(content=[TextContent(text=text)])


def error_result(text: str) -> ToolResult:
    return ToolResult(content=[TextContent(text=text)], is_error=True)


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def unwrap_items(data: Any) -> List[Any]:
    """Return the list of records carried by a collection response.

    The platform answers list queries in one of three shapes, checked in
    this order: a bare JSON array, ``{"values": [...]}`` (paged responses) or
    ``{"results": [...]}``. Anything else is treated as an empty collection.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for field in ("values", "results"):
            if isinstance(data.get(field), list):
                return data[field]
    return []


def describe_http_error(status_code: Optional[int], data: Any) -> str:
    return f"Status: {status_code}, Data: {json.dumps(data)}"
