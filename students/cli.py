import click

from students.db import ensure_indexes, mongo


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create the indexes the application relies on."""
        ensure_indexes()
        click.echo("Indexes created")

    @app.cli.command("purge")
    @click.argument("collection")
    @click.confirmation_option(prompt="This deletes every document. Continue?")
    def purge_command(collection):
        """Delete all documents in COLLECTION."""
        result = mongo.db[collection].delete_many({})
        click.echo(f"Deleted {result.deleted_count} documents")
