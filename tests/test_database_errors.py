from sqlalchemy.exc import OperationalError, ProgrammingError

from app.constants.constants import DatabaseErrorType
from app.core.database import PersistenceError, classify_db_error


class FakeAsyncpgError(Exception):
    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


def test_connection_refused_is_detected_through_wrapper():
    error = OperationalError("SELECT 1", {}, ConnectionRefusedError(111, "Connection refused"))

    result = classify_db_error(error)

    assert result.error_type == DatabaseErrorType.connection_refused
    assert result.code == "ECONNREFUSED"


def test_connection_refused_in_cause_chain():
    try:
        try:
            raise ConnectionRefusedError(111, "Connection refused")
        except ConnectionRefusedError as inner:
            raise RuntimeError("could not connect") from inner
    except RuntimeError as e:
        result = classify_db_error(e)

    assert result.error_type == DatabaseErrorType.connection_refused


def test_postgres_sqlstate_missing_database():
    error = OperationalError("connect", {}, FakeAsyncpgError('database "leads" does not exist', "3D000"))

    result = classify_db_error(error)

    assert result.error_type == DatabaseErrorType.database_not_found
    assert result.code == "3D000"
    assert "DB_NAME" in result.message


def test_postgres_sqlstate_bad_password():
    error = OperationalError("connect", {}, FakeAsyncpgError("password authentication failed", "28P01"))

    result = classify_db_error(error)

    assert result.error_type == DatabaseErrorType.access_denied
    assert "password authentication" not in result.message


def test_mysql_error_number():
    error = OperationalError("connect", {}, Exception(1045, "Access denied for user 'root'@'localhost'"))

    result = classify_db_error(error)

    assert result.error_type == DatabaseErrorType.access_denied
    assert result.code == 1045


def test_sqlite_missing_table():
    error = OperationalError("INSERT", {}, Exception("no such table: form_submissions"))

    assert classify_db_error(error).error_type == DatabaseErrorType.table_not_found


def test_unknown_error_is_generic():
    error = ProgrammingError("INSERT", {}, Exception("syntax error at or near"))

    result = classify_db_error(error)

    assert result.error_type == DatabaseErrorType.database_error
    assert result.code


def test_persistence_error_passes_through():
    original = PersistenceError(DatabaseErrorType.table_not_found, "missing", "42P01")

    assert classify_db_error(original) is original
    assert original.to_dict() == {"type": "Table Not Found", "message": "missing", "code": "42P01"}
