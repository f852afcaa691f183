'''
A list of all Exception specific to curlup library.
'''
import json


__all__ = ['CurlupException',
           'ImproperlyConfigured',
           'InvalidArgument',
           'ParseError',
           # transport exceptions
           'TransportError',
           'PoolTimeout',
           #
           # CouchDB exceptions
           'CouchDbError',
           'ResourceNotFound',
           'ResourceConflict',
           'PreconditionFailed',
           'Unauthorized',
           'couch_db_error']


class CurlupException(Exception):
    '''Base class of all curlup exceptions.'''


class ImproperlyConfigured(CurlupException):
    '''A :class:`CurlupException` raised when an inconsistent configuration
    has occured.
    '''


class InvalidArgument(CurlupException, ValueError):
    '''Raised by the endpoint builders when a required argument is missing
    or has the wrong shape.

    Always raised before any network activity.
    '''


class ParseError(CurlupException):
    '''A :class:`CurlupException` raised when a raw response, or the error
    envelope it carries, cannot be parsed.
    '''


# #################################################################### CURL
class TransportError(CurlupException, IOError):
    '''libcurl failed to complete a transfer.

    .. attribute:: code

        The curl (or curl multi) error code, ``-1`` for a failed
        readiness wait and ``0`` for a pool timeout.

    .. attribute:: request

        The :class:`.Request` which failed, if known.
    '''
    def __init__(self, msg='', code=0, request=None):
        super().__init__(msg)
        self.code = code
        self.request = request


class PoolTimeout(TransportError):
    '''No transfer in a :class:`.RequestPool` made progress within the
    pool timeout.'''


# ################################################################# COUCHDB
class CouchDbError(CurlupException):
    '''The CouchDB server answered with a status code between 400 and 599.

    The error body, a JSON envelope such as
    ``{"error": "not_found", "reason": "missing"}``, is decoded at
    construction.

    .. attribute:: error

        Short machine code reported by CouchDB, for example ``not_found``.

    .. attribute:: reason

        Human readable reason, for example ``missing``.

    .. attribute:: status

        The HTTP status code, also available as ``code``.
    '''
    def __init__(self, body, status=0, error=None, reason=None):
        if error is None and reason is None:
            error, reason = decode_envelope(body)
        self.body = body
        self.status = status
        self.code = status
        self.error = error
        self.reason = reason
        super().__init__(reason)

    def __str__(self):
        return '%s: %s (%s)' % (self.status, self.error, self.reason)


class ResourceNotFound(CouchDbError):
    '''Raised when a document, database or view does not exist'''


class ResourceConflict(CouchDbError):
    '''Raised when a conflict occured'''


class PreconditionFailed(CouchDbError):
    '''Precondition failed error'''


class Unauthorized(CouchDbError):
    '''Raised when not authorized to access CouchDB'''


error_classes = {'not_found': ResourceNotFound,
                 'conflict': ResourceConflict,
                 'file_exists': PreconditionFailed,
                 'precondition_failed': PreconditionFailed,
                 'unauthorized': Unauthorized,
                 'forbidden': Unauthorized}


def decode_envelope(body):
    '''Decode a CouchDB error ``body`` into an ``(error, reason)`` pair.

    Raises :class:`ParseError` when ``body`` is not a JSON object with
    string ``error`` and ``reason`` fields.
    '''
    if isinstance(body, bytes):
        body = body.decode('utf-8', 'replace')
    try:
        data = json.loads(body)
        error, reason = data['error'], data['reason']
    except (ValueError, KeyError, TypeError) as exc:
        raise ParseError('Invalid CouchDB error body %r' % body) from exc
    if not isinstance(error, str) or not isinstance(reason, str):
        raise ParseError('Invalid CouchDB error body %r' % body)
    return error, reason


def couch_db_error(body, status):
    '''Build the :class:`CouchDbError` matching the error in ``body``.
    '''
    error, reason = decode_envelope(body)
    error_class = error_classes.get(error, CouchDbError)
    return error_class(body, status, error, reason)
