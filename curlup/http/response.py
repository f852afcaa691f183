from multidict import CIMultiDictProxy

from ..utils.config import coerce_bool
from ..utils.exceptions import ParseError, couch_db_error
from ..utils.string import to_bytes
from .message import Message, message_property


CRLF = b'\r\n'
HEADER_BOUNDARY = b'\r\n\r\n'
CHARSET = 'iso-8859-1'


def is_error(code):
    return 400 <= code <= 599


def split_status_line(line):
    '''Split a status line into version, code and reason phrase.'''
    bits = line.split(' ', 2)
    if len(bits) < 2:
        raise ParseError('Invalid status line %r' % line)
    version, code = bits[0], bits[1]
    reason = bits[2] if len(bits) == 3 else ''
    try:
        code = int(code)
    except ValueError:
        raise ParseError('Invalid status code in %r' % line) from None
    if not 100 <= code <= 599:
        raise ParseError('Status code out of range in %r' % line)
    return version, code, reason


def split_message(raw):
    '''Split ``raw`` into the header lines and the body of the final
    response.

    When following redirects (or receiving ``100 Continue``) curl echoes
    every intermediate header block, those blocks are skipped.
    '''
    while True:
        head, sep, body = raw.partition(HEADER_BOUNDARY)
        if not sep:
            raise ParseError('No header/body boundary in response')
        lines = head.decode(CHARSET).split('\r\n')
        version, code, reason = split_status_line(lines[0])
        if (code < 200 or 300 <= code < 400) and body.startswith(b'HTTP/'):
            raw = body
            continue
        return (version, code, reason), lines[1:], body


class Response:
    """A parsed HTTP response, read-only after construction.

    Instances are created by :meth:`factory` from the raw bytes returned
    by libcurl, headers included.

    .. attribute:: message

        The :class:`.Message` holding status, headers and body.
    """
    _throws_exceptions = True

    body = message_property('body', True)
    http_version = message_property('http_version', True)
    response_code = message_property('response_code', True)
    response_status = message_property('response_status', True)

    def __init__(self, message):
        self.message = message

    def __repr__(self):
        return '<%s %s %s>' % (self.__class__.__name__, self.response_code,
                               self.response_status)
    __str__ = __repr__

    @property
    def headers(self):
        return CIMultiDictProxy(self.message.headers)

    def get_json_decoded_body(self, **kwargs):
        return self.message.get_json_decoded_body(**kwargs)

    @classmethod
    def factory(cls, raw, throws_exceptions=None):
        '''Parse ``raw``, a full HTTP response, into a :class:`Response`.

        :param raw: bytes with status line, headers, a blank line and
            the body.
        :param throws_exceptions: if true (the default is the process-wide
            flag, see :meth:`set_throws_exceptions`) a status code between
            400 and 599 raises a :class:`.CouchDbError` built from the body
            rather than returning a response.
        :raise ParseError: when ``raw`` is not a valid response.
        '''
        status, lines, body = split_message(to_bytes(raw))
        version, code, reason = status
        if throws_exceptions is None:
            throws_exceptions = cls.get_throws_exceptions()

        if throws_exceptions and is_error(code):
            raise couch_db_error(body, code)

        message = Message(body=body, http_version=version,
                          response_code=code, response_status=reason)
        for line in lines:
            if not line:
                continue
            name, _, value = line.partition(':')
            message.add_header(name.strip(), value.lstrip())
        return cls(message)

    @staticmethod
    def get_throws_exceptions():
        '''Process-wide default for :meth:`factory` ``throws_exceptions``
        '''
        return Response._throws_exceptions

    @staticmethod
    def set_throws_exceptions(flag):
        Response._throws_exceptions = coerce_bool(flag)
