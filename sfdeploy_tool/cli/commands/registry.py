"""Registry inspection command"""

import json

import click

from ..utils.output import format_registry, print_error
from ...api.exceptions import RegistryError


@click.command()
@click.option('--json', 'as_json', is_flag=True, help='Print rules as JSON')
@click.pass_context
def types(ctx, as_json):
    """List the metadata types known to the registry"""
    try:
        registry = ctx.obj.registry
    except RegistryError as e:
        print_error("Cannot load metadata registry", e)
        ctx.exit(1)

    if as_json:
        data = {
            'api_version': registry.api_version,
            'rules': [rule.to_dict() for rule in registry.rules()]
        }
        click.echo(json.dumps(data, indent=2))
    else:
        format_registry(registry)
