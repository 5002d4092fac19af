"""Trellis CLI - Main Entry Point.

Commands:
    routes - List controller actions with their HTTP method and view
    check  - Validate controllers, exit 1 on misconfiguration
"""

import logging
import sys
from typing import List, Tuple

import click

from . import __version__, __cli_name__
from .discovery import discover_controllers
from .output import success, error, warning, table, _CHECK, _CROSS
from ..controller import ActionMethodResolver, MetadataRegistry
from ..faults import MethodResolutionFault


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Minimal output')
@click.option('--path', 'search_path', default='.', show_default=True,
              type=click.Path(exists=True, file_okay=False), help='Import root for controller modules')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool, search_path: str):
    """Inspect and validate Trellis controllers."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet
    ctx.obj['search_path'] = search_path

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(ctx, modules: Tuple[str, ...]):
    try:
        controllers = discover_controllers(modules, search_path=ctx.obj['search_path'])
    except ImportError as e:
        error(f"  {_CROSS} Cannot import controllers: {e}")
        sys.exit(2)

    if not controllers:
        warning(f"  No controllers found in {', '.join(modules)}")
    return controllers


def _validate(controllers) -> Tuple[List[Tuple[str, str, str, str]], List[MethodResolutionFault]]:
    resolver = ActionMethodResolver(MetadataRegistry())
    rows = []
    faults = []

    for controller_class in controllers:
        metadata = resolver.registry.register(controller_class)
        for name in metadata.actions:
            try:
                method = resolver.resolve_method(controller_class, name)
            except MethodResolutionFault as fault:
                faults.append(fault)
                continue
            rows.append((
                metadata.class_name,
                name,
                method.value,
                f"{metadata.path}/{name}",
            ))

    return rows, faults


@cli.command('routes')
@click.argument('modules', nargs=-1, required=True)
@click.pass_context
def routes(ctx, modules: Tuple[str, ...]):
    """
    List actions with the HTTP method they accept.

    Examples:
      trellis routes app.controllers.books
      trellis --path src routes app.controllers
    """
    rows, faults = _validate(_load(ctx, modules))

    if rows and not ctx.obj['quiet']:
        click.echo()
        table(["Controller", "Action", "Method", "View"], rows)
        click.echo()

    for fault in faults:
        error(f"  {_CROSS} {fault.message}")
    if faults:
        sys.exit(1)


@cli.command('check')
@click.argument('modules', nargs=-1, required=True)
@click.pass_context
def check(ctx, modules: Tuple[str, ...]):
    """
    Validate controllers without serving requests.

    Exits with status 1 when any action is misconfigured.
    """
    controllers = _load(ctx, modules)
    rows, faults = _validate(controllers)

    for fault in faults:
        error(f"  {_CROSS} [{fault.code}] {fault.message}")

    if faults:
        error(f"  {len(faults)} misconfigured action(s)")
        sys.exit(1)

    if not ctx.obj['quiet']:
        success(f"  {_CHECK} {len(controllers)} controller(s), {len(rows)} action(s) OK")


def main():
    """Entry point for `trellis` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
