"""MongoDB wiring: the Flask-PyMongo handle, collection accessors and
multi-document transactions."""

import logging
from contextlib import contextmanager

import certifi
from flask import current_app
from flask_pymongo import PyMongo
from pymongo import ASCENDING

from students.errors import WriteResultNotAcknowledgedError

logger = logging.getLogger(__name__)

mongo = PyMongo()


def init_db(app):
    options = {}
    if app.config["MONGO_TLS"]:
        options["tlsCAFile"] = certifi.where()
    mongo.init_app(app, **options)


def users():
    return mongo.db[current_app.config["USERS_COLLECTION_NAME"]]


def groups():
    return mongo.db[current_app.config["GROUPS_COLLECTION_NAME"]]


def queues():
    return mongo.db[current_app.config["QUEUES_COLLECTION_NAME"]]


def ensure_indexes():
    users().create_index([("email", ASCENDING)], unique=True)
    groups().create_index([("members", ASCENDING)])
    groups().create_index([("queues", ASCENDING)])
    logger.info("Indexes are in place")


@contextmanager
def transaction():
    """Yield a session bound to a running transaction.

    Standalone servers cannot run transactions; with MONGO_TRANSACTIONS off
    the block runs without a session and ``None`` is yielded instead.
    """
    if not current_app.config["MONGO_TRANSACTIONS"]:
        yield None
        return

    with mongo.cx.start_session() as session:
        with session.start_transaction():
            yield session


def acknowledged(result):
    if not result.acknowledged:
        raise WriteResultNotAcknowledgedError()
    return result
