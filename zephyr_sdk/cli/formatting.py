"""
Output formatting utilities for the Zephyr CLI.

Provides text and JSON formatters for tool listings, tool results,
connection checks and errors.
"""

import json
from typing import Any, Dict, List, Optional


class OutputFormatter:
    """Base class for output formatters."""

    def format_tool_list(self, tools: List[Dict[str, Any]]) -> str:
        """Format list of available tools."""
        raise NotImplementedError

    def format_tool_result(self, tool_name: str, envelope: Dict[str, Any]) -> str:
        """Format a tool result envelope."""
        raise NotImplementedError

    def format_connection(self, base_url: Optional[str], error: Optional[str]) -> str:
        """Format connection check outcome."""
        raise NotImplementedError

    def format_config(self, config: Dict[str, Any], missing: List[str]) -> str:
        """Format current configuration."""
        raise NotImplementedError

    def format_error(self, error: str) -> str:
        """Format error message."""
        raise NotImplementedError


class TextFormatter(OutputFormatter):
    """Human-readable text formatter."""

    def format_tool_list(self, tools: List[Dict[str, Any]]) -> str:
        lines = ["\nAvailable tools:\n"]
        for tool in tools:
            lines.append(f"  - {tool.get('name', 'unknown')}: {tool.get('description', '')}")
        lines.append(f"\nTotal: {len(tools)} tools")
        return "\n".join(lines)

    def format_tool_result(self, tool_name: str, envelope: Dict[str, Any]) -> str:
        text = "\n".join(item.get('text', '') for item in envelope.get('content', []))
        if envelope.get('isError'):
            return self.format_error(text)
        return f"\n✓ {tool_name}\n\n{text}\n"

    def format_connection(self, base_url: Optional[str], error: Optional[str]) -> str:
        if error:
            return self.format_error(error)
        return f"\n✓ Connected to Zephyr Scale at {base_url}\n"

    def format_config(self, config: Dict[str, Any], missing: List[str]) -> str:
        lines = ["\nCurrent configuration:\n"]
        for key, value in config.items():
            lines.append(f"  {key}: {value}")
        if missing:
            lines.append(f"\n⚠ Missing: {', '.join(missing)}")
        else:
            lines.append("\n✓ Configuration is complete")
        return "\n".join(lines)

    def format_error(self, error: str) -> str:
        return f"\n✗ Error: {error}\n"


class JSONFormatter(OutputFormatter):
    """JSON formatter for scripting and automation."""

    def __init__(self, pretty: bool = True):
        """
        Initialize JSON formatter.

        Args:
            pretty: If True, format JSON with indentation
        """
        self.pretty = pretty

    def _dump(self, data: Any) -> str:
        """Dump data as JSON."""
        if self.pretty:
            return json.dumps(data, indent=2, default=str, ensure_ascii=False)
        return json.dumps(data, default=str, ensure_ascii=False)

    def format_tool_list(self, tools: List[Dict[str, Any]]) -> str:
        return self._dump({'tools': tools, 'total': len(tools)})

    def format_tool_result(self, tool_name: str, envelope: Dict[str, Any]) -> str:
        return self._dump(envelope)

    def format_connection(self, base_url: Optional[str], error: Optional[str]) -> str:
        return self._dump({'success': error is None, 'base_url': base_url, 'error': error})

    def format_config(self, config: Dict[str, Any], missing: List[str]) -> str:
        return self._dump({**config, 'missing': missing})

    def format_error(self, error: str) -> str:
        return self._dump({'success': False, 'error': error})


def get_formatter(output_format: str = 'text', pretty: bool = True) -> OutputFormatter:
    """
    Get output formatter by name.

    Args:
        output_format: Format type ('text' or 'json')
        pretty: For JSON formatter, whether to pretty-print

    Returns:
        OutputFormatter instance
    """
    if output_format == 'json':
        return JSONFormatter(pretty=pretty)
    return TextFormatter()
