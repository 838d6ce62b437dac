"""
Manager module for the Flask Application
"""


from flask.cli import FlaskGroup
import serverless_wsgi
import logging

from docstore import create_app
from docstore.services.document_store_factory import DocumentStoreFactory

# Cleanup logging for proper lambda logs
root = logging.getLogger()
if root.handlers:
    for handler in root.handlers:
        root.removeHandler(handler)

# very important for the running of uwsgi to have app here
app = create_app()
cli = FlaskGroup(create_app=create_app)


@cli.command('ping')
def ping():
    """
    ping Check that the configured document store answers
    """
    result = DocumentStoreFactory.health_check()
    print(f"{result['status']}: {result['message']}")
    if result['status'] != 'healthy':
        raise SystemExit(1)


@cli.command('drop-database')
def drop_database():
    """
    drop_database Drop the configured database, used to reset test deployments
    """
    client = DocumentStoreFactory.get_client()
    client.delete_database()
    print(f"Dropped database '{client.database_name}'")


def handler(event, context):
    print("=== Starting Flask App ===")
    return serverless_wsgi.handle_request(app, event, context)


if __name__ == '__main__':
    cli()
