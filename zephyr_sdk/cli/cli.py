"""
Main CLI application for the Zephyr SDK.

Provides command-line access to the Zephyr Scale tools, using
connection settings from a .env file or the environment.
"""

# Suppress warnings FIRST before any other imports
import warnings
warnings.filterwarnings('ignore', category=DeprecationWarning)
warnings.filterwarnings('ignore', category=UserWarning)
warnings.filterwarnings('ignore', message='Unverified HTTPS request')

import json
import logging
import sys

import click

from .config import get_config
from .formatting import get_formatter

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@click.group()
@click.option('--env-file', default=None, help='Path to .env file')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose/info logging')
@click.option('--output', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.pass_context
def cli(ctx, env_file, debug: bool, verbose: bool, output: str):
    """
    Zephyr SDK CLI - run Zephyr Scale tools from the command line.

    Settings are loaded from a .env file with variables:
    - ZEPHYR_BASE_URL: API url (defaults to the Zephyr Scale Cloud API)
    - ZEPHYR_DEPLOYMENT: cloud or datacenter
    - ZEPHYR_API_TOKEN: bearer token
    - ZEPHYR_USERNAME / ZEPHYR_PASSWORD: basic auth (Data Center)
    - ZEPHYR_TIMEOUT: request timeout in seconds

    Example .env file:

        ZEPHYR_DEPLOYMENT=cloud
        ZEPHYR_API_TOKEN=your_token_here
    """
    ctx.ensure_object(dict)

    if debug:
        logging.getLogger('zephyr_sdk').setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif verbose:
        logging.getLogger('zephyr_sdk').setLevel(logging.INFO)
        logger.info("Verbose logging enabled")

    config = get_config(env_file=env_file)
    ctx.obj['config'] = config
    ctx.obj['formatter'] = get_formatter(output)

    # some commands work without credentials, so only record the problem here
    if not config.is_configured():
        missing = config.get_missing_config()
        ctx.obj['config_error'] = f"Missing required configuration: {', '.join(missing)}"
        logger.debug(f"Configuration incomplete: {missing}")
    else:
        ctx.obj['config_error'] = None


def get_api_wrapper(ctx):
    """
    Build a ZephyrScaleApiWrapper from the context configuration.

    Raises click.ClickException if configuration is invalid.
    """
    if ctx.obj.get('config_error'):
        raise click.ClickException(
            f"{ctx.obj['config_error']}\n\n"
            "Please ensure your .env file contains:\n"
            "  ZEPHYR_DEPLOYMENT=cloud\n"
            "  ZEPHYR_API_TOKEN=your_token_here"
        )

    # Import here to avoid loading langchain if not needed
    from zephyr_sdk.tools.zephyr_scale.api_wrapper import ZephyrScaleApiWrapper

    try:
        return ZephyrScaleApiWrapper(**ctx.obj['config'].to_settings())
    except Exception as e:
        raise click.ClickException(f"Failed to initialize Zephyr Scale client: {str(e)}")


@cli.command()
@click.pass_context
def config(ctx):
    """Show current configuration (credentials masked)."""
    config_obj = ctx.obj['config']
    click.echo(ctx.obj['formatter'].format_config(config_obj.to_dict(), config_obj.get_missing_config()))


@cli.command()
@click.pass_context
def tools(ctx):
    """List available tools."""
    from zephyr_sdk.tools.zephyr_scale.api_wrapper import ZephyrScaleApiWrapper

    available = [
        {'name': tool['name'], 'description': tool['description'].strip()}
        for tool in ZephyrScaleApiWrapper.model_construct().get_available_tools()
    ]
    click.echo(ctx.obj['formatter'].format_tool_list(available))


@cli.command()
@click.argument('tool_name')
@click.option('--args', 'tool_args', default='{}', help='Tool arguments as a JSON object')
@click.pass_context
def run(ctx, tool_name: str, tool_args: str):
    """Run one tool and print its result envelope."""
    from langchain_core.tools import ToolException
    from zephyr_sdk.tools.zephyr_scale.results import error_result

    formatter = ctx.obj['formatter']
    try:
        params = json.loads(tool_args)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in --args: {e}")
    if not isinstance(params, dict):
        raise click.ClickException("--args must be a JSON object")

    api_wrapper = get_api_wrapper(ctx)
    try:
        result = api_wrapper.run(tool_name, **params)
    except ToolException as e:
        result = error_result(str(e))
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(formatter.format_tool_result(tool_name, result.to_envelope()))
    if result.is_error:
        sys.exit(1)


@cli.command('check-connection')
@click.pass_context
def check_connection(ctx):
    """Validate the configured credentials against the API."""
    from zephyr_sdk.configurations import ZephyrScaleConfiguration

    formatter = ctx.obj['formatter']
    if ctx.obj.get('config_error'):
        raise click.ClickException(ctx.obj['config_error'])

    settings = ctx.obj['config'].to_settings()
    error = ZephyrScaleConfiguration.check_connection(settings)
    click.echo(formatter.format_connection(settings['base_url'], error))
    if error:
        sys.exit(1)


def main():
    """Entry point for the zephyr-toolkit console script."""
    cli(obj={})


if __name__ == '__main__':
    main()
