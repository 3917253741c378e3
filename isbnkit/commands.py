"""Flask CLI commands: ``flask isbn parse`` and ``flask isbn format``."""

import click
from flask import current_app
from flask.cli import AppGroup

from isbnkit.services.isbn import FORMATS, IsbnFormatError, parse

isbn_cli = AppGroup('isbn', help='Parse and format ISBN codes.')


@isbn_cli.command('parse')
@click.argument('code')
def parse_command(code):
    """Show the parts of CODE and whether it is valid."""
    isbn = parse(code, ranges=current_app.extensions['isbn_ranges'])

    click.echo(f"Input:       {code}")
    click.echo(f"Valid:       {'yes' if isbn.is_valid() else 'no'}")
    click.echo(f"Product:     {isbn.product or '-'}")
    click.echo(f"Group:       {isbn.group or '-'}")
    click.echo(f"Registrant:  {isbn.registrant or '-'}")
    click.echo(f"Publication: {isbn.publication or '-'}")
    click.echo(f"Agency:      {isbn.agency or '-'}")

    if not isbn.is_valid():
        for kind, message in isbn.error_messages():
            click.echo(f"Error: {kind.name}: {message}", err=True)
        raise click.exceptions.Exit(1)


@isbn_cli.command('format')
@click.argument('code')
@click.option('--format', 'fmt', type=click.Choice(FORMATS, case_sensitive=False),
              default=None, help='Output format (default: DEFAULT_FORMAT setting).')
@click.option('--prefix', type=click.IntRange(0, 9), default=None,
              help='GTIN-14 logistic indicator (default: DEFAULT_GTIN14_PREFIX setting).')
def format_command(code, fmt, prefix):
    """Print CODE in the requested format."""
    isbn = parse(code, ranges=current_app.extensions['isbn_ranges'])
    fmt = fmt or current_app.config['DEFAULT_FORMAT']
    if prefix is None:
        prefix = current_app.config['DEFAULT_GTIN14_PREFIX']

    try:
        click.echo(isbn.format(fmt, prefix))
    except IsbnFormatError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.exceptions.Exit(1)


def register_commands(app):
    """Register CLI command groups with the Flask app."""
    app.cli.add_command(isbn_cli)
