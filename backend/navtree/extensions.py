from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from sqlalchemy import event

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def enable_sqlite_savepoints(engine):
    """
    pysqlite manages transactions on its own and breaks SAVEPOINT.
    Hand BEGIN back to SQLAlchemy so begin_nested() works the same
    on SQLite as it does on Postgres.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")
