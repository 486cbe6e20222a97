import re
from typing import Optional, Type, Any

from langchain_core.callbacks import CallbackManagerForToolRun
from pydantic import BaseModel
from pydantic import Field
from langchain_core.tools import BaseTool, ToolException

from ..utils import TOOLKIT_SPLITTER


class BaseAction(BaseTool):
    """Tool that forwards a call to one operation of an API wrapper."""

    api_wrapper: BaseModel = Field(default_factory=BaseModel)
    name: str = ""
    description: str = ""
    args_schema: Optional[Type[BaseModel]] = None

    def _run(
        self,
        *args: Any,
        run_manager: Optional[CallbackManagerForToolRun] = None,
        **kwargs: Any,
    ) -> ToolException | str:
        try:
            # Strip the toolkit prefix and the numeric suffix added for deduplication (_2, _3, etc.)
            tool_name = re.sub(r'_\d+$', '', self.name.split(TOOLKIT_SPLITTER)[-1])
            result = self.api_wrapper.run(tool_name, *args, **kwargs)
        except Exception as e:
            return ToolException(f"An exception occurred: {e}")
        # result envelopes render to their text; error envelopes become exceptions
        if getattr(result, "is_error", False):
            return ToolException(result.text)
        return getattr(result, "text", result)
