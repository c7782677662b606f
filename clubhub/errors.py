"""
Error kinds shared by every handler and their translation to HTTP responses.

Handlers raise ``ApiError`` tagged with an ``ErrorKind``; storage and
validation exceptions are classified into the same kinds here, so the
response status is always looked up in one table.
"""
import enum
from contextlib import contextmanager

from flask import jsonify, request
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from . import db


class ErrorKind(enum.Enum):
    INVALID_INPUT = 'invalid_input'
    CONFLICT = 'conflict'
    NOT_FOUND = 'not_found'
    UNAUTHENTICATED = 'unauthenticated'
    FORBIDDEN = 'forbidden'
    INVALID_CREDENTIALS = 'invalid_credentials'
    INTERNAL = 'internal'


# Role failures answer 401, same as authentication failures.
STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 401,
    ErrorKind.INVALID_CREDENTIALS: 400,
    ErrorKind.INTERNAL: 500,
}

INTERNAL_ERROR_MESSAGE = 'Internal server error'

# SQLSTATE codes reported by PostgreSQL drivers
UNIQUE_VIOLATION = '23505'
FOREIGN_KEY_VIOLATION = '23503'

# MySQL error numbers (PyMySQL puts them in args[0])
MYSQL_DUPLICATE_ENTRY = 1062
MYSQL_FOREIGN_KEY_CODES = (1216, 1451, 1452)


class ApiError(Exception):
    """An error with a known kind and a message safe to show to clients."""

    def __init__(self, kind, message, issues=None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.issues = issues

    @property
    def status_code(self):
        return STATUS_CODES[self.kind]

    def to_dict(self):
        body = {'error': self.message}
        if self.issues is not None:
            body['issues'] = self.issues
        return body

    def __repr__(self):
        return f'<ApiError {self.kind.name}: {self.message}>'


def invalid_input(message, issues=None):
    return ApiError(ErrorKind.INVALID_INPUT, message, issues)


def conflict(message):
    return ApiError(ErrorKind.CONFLICT, message)


def not_found(message):
    return ApiError(ErrorKind.NOT_FOUND, message)


def unauthenticated(message='Authentication required'):
    return ApiError(ErrorKind.UNAUTHENTICATED, message)


def forbidden(message):
    return ApiError(ErrorKind.FORBIDDEN, message)


def invalid_credentials(message='Incorrect email or password'):
    return ApiError(ErrorKind.INVALID_CREDENTIALS, message)


def validation_issues(error):
    """Flatten a pydantic ValidationError into field-level issues."""
    return [
        {
            'path': [str(part) for part in err['loc']],
            'message': err['msg'],
            'code': err['type'],
        }
        for err in error.errors()
    ]


def integrity_violation(error):
    """
    Classify an IntegrityError.

    Returns:
        str: 'unique', 'foreign_key' or None when the category is unknown
    """
    orig = error.orig
    code = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
    if code == UNIQUE_VIOLATION:
        return 'unique'
    if code == FOREIGN_KEY_VIOLATION:
        return 'foreign_key'

    args = getattr(orig, 'args', ())
    if args and args[0] == MYSQL_DUPLICATE_ENTRY:
        return 'unique'
    if args and args[0] in MYSQL_FOREIGN_KEY_CODES:
        return 'foreign_key'

    text = str(orig).lower()
    if 'unique' in text or 'duplicate' in text:
        return 'unique'
    if 'foreign key' in text:
        return 'foreign_key'
    return None


@contextmanager
def translate_integrity_errors(unique=None, foreign_key=None):
    """
    Roll back and re-raise constraint violations as CONFLICT errors.

    Usage:
        with translate_integrity_errors(unique='Email is already being used'):
            db.session.commit()
    """
    try:
        yield
    except IntegrityError as e:
        db.session.rollback()
        violation = integrity_violation(e)
        if violation == 'unique' and unique:
            raise conflict(unique) from e
        if violation == 'foreign_key' and foreign_key:
            raise conflict(foreign_key) from e
        raise


def to_api_error(error):
    """Map any exception onto an ApiError."""
    if isinstance(error, ApiError):
        return error
    if isinstance(error, ValidationError):
        return invalid_input('Invalid data provided', validation_issues(error))
    if isinstance(error, IntegrityError):
        violation = integrity_violation(error)
        if violation == 'foreign_key':
            return conflict('Referenced record does not exist')
        return conflict('Conflicting data')
    return ApiError(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)


def error_response(error):
    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        app.logger.debug('%s on %s', repr(error), _describe_request())
        return error_response(error)

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return error_response(to_api_error(error))

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        app.logger.warning('Unhandled constraint violation: %s', error.orig)
        return error_response(to_api_error(error))

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code == 400:
            return error_response(invalid_input(error.description))
        if error.code == 404:
            return error_response(not_found('Not found'))
        if error.code == 401:
            return error_response(unauthenticated())
        return jsonify({'error': error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled error on %s', _describe_request())
        return error_response(to_api_error(error))


def _describe_request():
    return f'{request.method} {request.path}'
