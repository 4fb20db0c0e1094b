"""
Dedicated PostgreSQL connection for the schema maintenance commands.

These commands run against databases that may not be managed by Django
migrations, so they open their own connection from the DB_* variables
instead of going through ``django.db.connection``.
"""
import logging
import os
from contextlib import contextmanager

import psycopg2

logger = logging.getLogger('joyeria.core.schema')

CONNECT_TIMEOUT_SECONDS = 30


def connection_params(environ=None):
    environ = os.environ if environ is None else environ
    return {
        'host': environ.get('DB_HOST'),
        'user': environ.get('DB_USER'),
        'password': environ.get('DB_PASSWORD'),
        'dbname': environ.get('DB_NAME'),
        'port': int(environ.get('DB_PORT') or 5432),
        # TLS on, certificate not verified
        'sslmode': 'require',
        'connect_timeout': CONNECT_TIMEOUT_SECONDS,
    }


@contextmanager
def maintenance_connection(environ=None):
    """
    Yield an autocommit psycopg2 connection; always closed on exit.

    Connection failures propagate to the caller like any other error raised
    inside the block.
    """
    params = connection_params(environ)
    logger.info(f"Connecting to PostgreSQL at {params['host']}:{params['port']}/{params['dbname']}...")
    conn = psycopg2.connect(**params)
    try:
        conn.autocommit = True
        logger.info("Connected to PostgreSQL")
        yield conn
    finally:
        conn.close()
        logger.info("Connection closed")


def execute_statements(conn, statements):
    """Run each (label, sql) pair in order, logging progress"""
    with conn.cursor() as cursor:
        for label, sql in statements:
            logger.info(f"Executing: {label}")
            cursor.execute(sql)
            logger.info(f"Done: {label}")
