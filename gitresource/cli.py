#!/usr/bin/env python3

import sys

import click

from gitresource import __version__
from gitresource.cli_utils import add_common_options, read_payload, standard_command
from gitresource.services.resource_service import ResourceService


@click.group()
@click.version_option(version=__version__)
def cli():
    """gitresource - Pipeline resource for git repositories.

    Each command reads a JSON payload ({"source": {...}, "version": {...}})
    on stdin and writes a JSON result on stdout. Logs go to stderr.
    """
    pass


@cli.command('init')
@click.argument('path', type=click.Path(file_okay=False))
@add_common_options('verbose', 'pretty')
@standard_command
def init_handler(path, verbose, pretty, config):
    """Provision SSH keys and clone or fetch the repository into PATH."""
    payload = read_payload(sys.stdin)
    source = ResourceService(config=config).initialize(payload, path)
    return source.to_dict()


@cli.command('check')
@click.option('--path', type=click.Path(file_okay=False),
              help='Local mirror to clone/fetch into (default: cache directory)')
@add_common_options('verbose', 'pretty')
@standard_command
def check_handler(path, verbose, pretty, config):
    """List versions newer than the payload's version, oldest first."""
    payload = read_payload(sys.stdin)
    service = ResourceService(config=config)
    versions = service.check(payload, path or service.cache_path(payload.source))
    return [v.to_dict() for v in versions]


@cli.command('in')
@click.argument('destination', type=click.Path(file_okay=False))
@add_common_options('verbose', 'pretty')
@standard_command
def in_handler(destination, verbose, pretty, config):
    """Check out the payload's version into DESTINATION and print its metadata."""
    payload = read_payload(sys.stdin)
    return ResourceService(config=config).materialize(payload, destination)


def main():
    cli()

if __name__ == "__main__":
    main()
