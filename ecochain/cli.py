"""
Flask CLI commands:  flask --app run init-db | expire-redemptions
"""
import click

from ecochain import db


def register_commands(app):

    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("expire-redemptions")
    def expire_redemptions_command():
        """Run the voucher expiry sweep once."""
        from ecochain.services.redemptions import expire_redemptions

        count = expire_redemptions()
        click.echo(f"Expired {count} redemption(s).")
