import logging
from copy import deepcopy

from langchain_core.tools import ToolException

from . import zephyr_scale

logger = logging.getLogger(__name__)

AVAILABLE_TOOLS = {
    zephyr_scale.name: {
        'get_tools': zephyr_scale.get_tools,
        'toolkit_class': zephyr_scale.ZephyrScaleToolkit,
    },
}
AVAILABLE_TOOLKITS = {
    'ZephyrScaleToolkit': zephyr_scale.ZephyrScaleToolkit,
}


def get_tools(tools_list):
    tools = []

    for tool in tools_list:
        settings = tool.get('settings')

        # Skip tools without settings early
        if not settings:
            logger.warning(f"Tool '{tool.get('type', '')}' has no settings, skipping...")
            continue

        selected_tools = settings.get('selected_tools', [])
        invalid_tools = [name for name in selected_tools if isinstance(name, str) and name.startswith('_')]
        if invalid_tools:
            raise ValueError(f"Tool names {invalid_tools} from toolkit '{tool.get('type', '')}' cannot start with '_'")

        tool_type = tool['type']
        if tool_type in AVAILABLE_TOOLS:
            try:
                tools.extend(AVAILABLE_TOOLS[tool_type]['get_tools'](tool))
            except Exception as e:
                logger.error(f"Error getting tools for {tool_type}: {e}")
                raise ToolException(f"Error getting tools for {tool_type}: {e}")
        else:
            logger.warning(f"Unknown tool type: {tool_type}")

    return tools


def get_toolkits():
    """Return toolkit configuration schemas for all registered toolkits."""
    return [toolkit_class.toolkit_config_schema() for toolkit_class in AVAILABLE_TOOLKITS.values()]


def get_available_tools():
    """Return list of available tool types."""
    return list(AVAILABLE_TOOLS.keys())


def get_available_toolkit_models():
    """Return dict with available toolkit classes."""
    return deepcopy(AVAILABLE_TOOLS)


__all__ = [
    'get_tools',
    'get_toolkits',
    'get_available_tools',
    'get_available_toolkit_models',
]
