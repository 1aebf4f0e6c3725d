"""Configuration file commands."""

from pathlib import Path
from typing import Optional

import click
import yaml

from ..config import TreehashConfig, load_config, save_config
from ..errors import InvalidArgumentError, ResourceNotFoundError
from .core.command_wrapper import with_error_handling
from .output import print_json, print_line

DEFAULT_CONFIG_FILE = "treehash.yaml"


@with_error_handling("config init", error_prefix="Config init failed")
def init_config(path: str, force: bool, output_json: bool = False):
    """Write a configuration file holding the default builder options."""
    config_path = Path(path)
    if config_path.exists() and not force:
        raise InvalidArgumentError(f"{config_path} already exists (use --force to overwrite)")

    save_config(TreehashConfig(), config_path)

    if output_json:
        print_json("success", f"Wrote {config_path}", data={"config": str(config_path)})
    else:
        print_line(f"Wrote {config_path}")


@with_error_handling("config show", error_prefix="Config show failed")
def show_config(path: Optional[str], output_json: bool = False):
    """Print the effective configuration (defaults when no file is given)."""
    if path:
        try:
            config = load_config(Path(path))
        except FileNotFoundError as e:
            raise ResourceNotFoundError(str(e)) from e
    else:
        config = TreehashConfig()

    data = config.model_dump(mode='json')
    if output_json:
        print_json("success", "Effective configuration", data=data)
    else:
        print(yaml.dump(data, default_flow_style=False), end="")


@click.group(name='config')
def config_group():
    """Configuration file management"""
    pass


@config_group.command('init')
@click.argument('path', default=DEFAULT_CONFIG_FILE, type=click.Path(dir_okay=False))
@click.option('--force', is_flag=True, help='Overwrite an existing file')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def init_config_command(path, force, output_json):
    """Write a default configuration file to PATH"""
    init_config(path, force, output_json=output_json)


@config_group.command('show')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None, help='YAML configuration file')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def show_config_command(config_path, output_json):
    """Show the effective configuration"""
    show_config(config_path, output_json=output_json)
