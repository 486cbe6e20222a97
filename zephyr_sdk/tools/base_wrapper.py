import logging
import re
import traceback
from typing import Any, Dict, Optional

from langchain_core.tools import ToolException
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class BaseToolApiWrapper(BaseModel):

    # Optional RunnableConfig for CLI/standalone usage (allows dispatch_custom_event to work)
    _runnable_config: Optional[Dict[str, Any]] = None

    def get_available_tools(self):
        raise NotImplementedError("Subclasses should implement this method")

    def set_runnable_config(self, config: Optional[Dict[str, Any]]) -> None:
        """
        Set the RunnableConfig for dispatching custom events.

        Outside of a LangChain run (e.g. from the CLI) dispatch_custom_event
        needs a config carrying a run_id to attach events to.
        """
        self._runnable_config = config

    def _log_tool_event(self, message: str, tool_name: str = None, config: Optional[Dict[str, Any]] = None):
        """Log a progress message and dispatch it as a custom event for the tool."""
        logger.info(message)
        try:
            from langchain_core.callbacks import dispatch_custom_event

            dispatch_custom_event(
                name="thinking_step",
                data={
                    "message": message,
                    "tool_name": tool_name or "tool_progress",
                    "toolkit": self.__class__.__name__,
                },
                config=config or self._runnable_config,
            )
        except Exception as e:
            logger.warning(f"Failed to dispatch progress event: {str(e)}")

    def run(self, mode: str, *args: Any, **kwargs: Any):
        for tool in self.get_available_tools():
            if tool["name"] == mode:
                try:
                    return tool["ref"](*args, **kwargs)
                except ToolException:
                    # already carries a message meant for the caller
                    raise
                except Exception as e:
                    error_type = type(e).__name__
                    error_message = str(e)
                    full_traceback = traceback.format_exc()

                    logger.error(f"Tool execution failed for '{mode}': {error_type}: {error_message}")
                    logger.error(f"Full traceback:\n{full_traceback}")
                    logger.debug(f"Tool execution parameters - args: {args}, kwargs: {kwargs}")

                    if isinstance(e, TypeError) and "unexpected keyword argument" in error_message:
                        match = re.search(r"unexpected keyword argument '(\w+)'", error_message)
                        expected_params = "unknown"
                        if "args_schema" in tool and hasattr(tool["args_schema"], "model_fields"):
                            expected_params = list(tool["args_schema"].model_fields.keys())
                        bad_param = match.group(1) if match else error_message
                        user_friendly_message = (
                            f"Parameter error in tool '{mode}': unexpected parameter '{bad_param}'. "
                            f"Expected parameters: {expected_params}"
                        )
                    elif isinstance(e, (TypeError, ValueError)):
                        user_friendly_message = f"Parameter error in tool '{mode}': {error_message}"
                    elif isinstance(e, (ConnectionError, TimeoutError)):
                        user_friendly_message = f"Connection error in tool '{mode}': {error_message}"
                    else:
                        user_friendly_message = f"Tool '{mode}' execution failed: {error_type}: {error_message}"

                    raise ToolException(user_friendly_message) from e
        else:
            raise ValueError(f"Unknown mode: {mode}. "
                             f"Available modes: {', '.join([tool['name'] for tool in self.get_available_tools()])}. "
                             f"Review the tool's name in your request.")
