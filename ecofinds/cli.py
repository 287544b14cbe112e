import click

from .demo_data import seed_demo_products


def register_commands(app):
    @app.cli.command('seed-demo')
    def seed_demo():
        """Insert the demo listings into the database."""
        added = seed_demo_products()
        click.echo(f'Seeded {added} demo product(s).')
