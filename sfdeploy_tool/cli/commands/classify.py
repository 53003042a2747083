"""Classify command implementation"""

import json

import click

from ..utils.output import format_descriptors, print_error
from ...api.exceptions import RegistryError
from ...core.classifier import Classifier


@click.command()
@click.argument('paths', nargs=-1, required=True)
@click.option('--json', 'as_json', is_flag=True, help='Print descriptors as JSON')
@click.pass_context
def classify(ctx, paths, as_json):
    """Show the metadata type of each path

    Examples:
        sfdeploy classify src/classes/Foo.cls src/classes/Foo.cls-meta.xml
    """
    try:
        classifier = Classifier(ctx.obj.registry)
    except RegistryError as e:
        print_error("Cannot load metadata registry", e)
        ctx.exit(1)

    descriptors = [classifier.classify(path) for path in paths]

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in descriptors], indent=2))
    else:
        format_descriptors(descriptors)
