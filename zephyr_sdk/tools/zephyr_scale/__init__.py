from typing import ClassVar, List, Literal, Optional

from langchain_core.tools import BaseTool, BaseToolkit
from pydantic import BaseModel, Field, create_model

from .api_wrapper import ZephyrScaleApiWrapper
from ..base.tool import BaseAction
from ..utils import clean_string, get_max_toolkit_length, TOOLKIT_SPLITTER
from ...configurations.zephyr_scale import ZephyrScaleConfiguration

name = "zephyr_scale"


def get_tools(tool):
    return ZephyrScaleToolkit().get_toolkit(
        selected_tools=tool['settings'].get('selected_tools', []),
        zephyr_scale_configuration=tool['settings'].get('zephyr_scale_configuration', {}),
        toolkit_name=tool.get('toolkit_name'),
    ).get_tools()


class ZephyrScaleToolkit(BaseToolkit):
    tools: List[BaseTool] = []
    toolkit_max_length: ClassVar[int] = 0

    @staticmethod
    def toolkit_config_schema() -> BaseModel:
        selected_tools = {x['name']: x['args_schema'].model_json_schema()
                          for x in ZephyrScaleApiWrapper.model_construct().get_available_tools()}
        ZephyrScaleToolkit.toolkit_max_length = get_max_toolkit_length(selected_tools)
        return create_model(
            name,
            zephyr_scale_configuration=(ZephyrScaleConfiguration, Field(
                description="Zephyr Scale Configuration",
                json_schema_extra={'configuration_types': ['zephyr_scale']})),
            selected_tools=(List[Literal[tuple(selected_tools)]],
                            Field(default=[], json_schema_extra={'args_schemas': selected_tools})),
            __config__={
                'json_schema_extra': {
                    'metadata': {
                        "label": "Zephyr Scale",
                        "icon_url": "zephyr.svg",
                        "categories": ["test management"],
                        "extra_categories": ["test automation", "test case management", "test run management"],
                    }
                }
            }
        )

    @classmethod
    def get_toolkit(cls, selected_tools: list[str] | None = None, toolkit_name: Optional[str] = None, **kwargs):
        if selected_tools is None:
            selected_tools = []
        configuration = kwargs.get('zephyr_scale_configuration') or {}
        if isinstance(configuration, BaseModel):
            configuration = configuration.model_dump()
        wrapper_payload = {
            **kwargs,
            **configuration,
        }
        zephyr_wrapper = ZephyrScaleApiWrapper(**wrapper_payload)
        if toolkit_name and not cls.toolkit_max_length:
            cls.toolkit_config_schema()
        prefix = clean_string(toolkit_name, cls.toolkit_max_length) + TOOLKIT_SPLITTER if toolkit_name else ''
        available_tools = zephyr_wrapper.get_available_tools()
        tools = []
        for tool in available_tools:
            if selected_tools:
                if tool["name"] not in selected_tools:
                    continue
            tools.append(BaseAction(
                api_wrapper=zephyr_wrapper,
                name=prefix + tool["name"],
                description=tool["description"],
                args_schema=tool["args_schema"]
            ))
        return cls(tools=tools)

    def get_tools(self):
        return self.tools
