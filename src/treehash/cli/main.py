"""Main CLI entry point for treehash."""

import sys
import click
from treehash import __version__
from treehash.config import MAX_IGNORE_DAYS
from treehash.errors import (
    EXIT_SUCCESS,
    EXIT_ERROR,
    EXIT_INVALID_ARGS,
    EXIT_NOT_FOUND,
    TreehashError,
    InvalidArgumentError,
    ResourceNotFoundError,
)

MIN_PYTHON = (3, 10)
if sys.version_info < MIN_PYTHON:
    print(f"[ERROR] Python {MIN_PYTHON[0]}.{MIN_PYTHON[1]}+ required")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """treehash: incremental SHA-1 index of a directory tree"""
    pass


@cli.command('update')
@click.argument('path', default='.', type=click.Path(exists=True, file_okay=False))
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), help='YAML configuration file')
@click.option('-c', '--remove-missing', is_flag=True, help='Remove hashes for files that no longer exist')
@click.option('-i', '--ignore-days', type=click.IntRange(0, MAX_IGNORE_DAYS), default=None, help='Ignore files modified more than N days ago (0 disables)')
@click.option('--ignore-mode', type=click.Choice(['exclude', 'expire']), default=None, help='exclude: never hash old files; expire: keep old files while present')
@click.option('-f', '--index-file', default=None, help='Index file name inside PATH (default: .sha1s)')
@click.option('--settle-seconds', type=click.FloatRange(min=0), default=None, help='Defer files modified within this many seconds (default: 2)')
@click.option('--max-depth', type=click.IntRange(min=0), default=None, help='Maximum directory depth to descend')
@click.option('--no-follow-symlinks', is_flag=True, help='Skip symbolic links instead of following them')
@click.option('--backend', type=click.Choice(['hashlib', 'python']), default=None, help='Digest engine (default: hashlib)')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--debug', is_flag=True, help='Debug mode (log every file)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def update(path, config_path, remove_missing, ignore_days, ignore_mode, index_file, settle_seconds, max_depth, no_follow_symlinks, backend, verbose, debug, output_json):
    """Add, rehash and prune entries of the index in PATH"""
    from treehash.cli.update import update_command
    update_command(
        path, config_path, remove_missing, ignore_days, ignore_mode, index_file,
        settle_seconds, max_depth, no_follow_symlinks, backend, verbose, debug,
        output_json=output_json,
    )


@cli.command('compare')
@click.argument('local', type=click.Path(dir_okay=False))
@click.argument('remote', type=click.Path(dir_okay=False))
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
def compare(local, remote, verbose, output_json):
    """List REMOTE files whose content is not anywhere in LOCAL"""
    from treehash.cli.compare import compare_command
    compare_command(local, remote, verbose, output_json=output_json)


# Register config command group
from treehash.cli.config import config_group
cli.add_command(config_group, name='config')


def main():
    """Main CLI entry point with structured error handling."""
    try:
        cli()
        return EXIT_SUCCESS
    except click.ClickException as e:
        # Click handles its own exceptions (usage errors, etc.)
        e.show()
        return EXIT_INVALID_ARGS
    except InvalidArgumentError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_INVALID_ARGS
    except ResourceNotFoundError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except KeyboardInterrupt:
        print("\n[INFO] Operation cancelled by user", file=sys.stderr)
        return EXIT_ERROR
    except TreehashError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
