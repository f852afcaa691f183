import json

from multidict import CIMultiDict

from ..utils.config import coerce_pos_int
from ..utils.string import to_bytes


HTTP_METHOD_COPY = 'COPY'
HTTP_METHOD_DELETE = 'DELETE'
HTTP_METHOD_GET = 'GET'
HTTP_METHOD_HEAD = 'HEAD'
HTTP_METHOD_POST = 'POST'
HTTP_METHOD_PUT = 'PUT'

HTTP_METHODS = frozenset((HTTP_METHOD_COPY, HTTP_METHOD_DELETE,
                          HTTP_METHOD_GET, HTTP_METHOD_HEAD,
                          HTTP_METHOD_POST, HTTP_METHOD_PUT))

JSON_CONTENT_TYPE = 'application/json;charset=UTF-8'


def encode_object(obj):
    '''``default`` hook for :func:`json.dumps`, objects are encoded
    via their attribute dictionary.'''
    try:
        return vars(obj)
    except TypeError:
        raise TypeError('%r is not JSON serializable' % (obj,)) from None


def message_property(name, readonly=False):
    '''A property delegating attribute ``name`` to the ``message``
    of the owner.'''
    def fget(self):
        return getattr(self.message, name)

    if readonly:
        return property(fget)

    def fset(self, value):
        setattr(self.message, name, value)

    return property(fget, fset)


class Message:
    """Payload of an HTTP message.

    Holds the body, the headers and the HTTP version shared by
    :class:`.Request` and :class:`.Response`, together with the status
    code and status line of a response.

    .. attribute:: http_version

        HTTP version, usually ``HTTP/1.1``

    .. attribute:: response_status

        Reason phrase of a response status line
    """
    OPTIONS = ('body', 'headers', 'http_version', 'response_code',
               'response_status')
    """Options recognised by :meth:`set_options`."""

    def __init__(self, **options):
        self._body = b''
        self._headers = CIMultiDict()
        self._response_code = 0
        self.http_version = None
        self.response_status = None
        self.set_options(options)

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, self.http_version or '')
    __str__ = __repr__

    @property
    def body(self):
        '''Raw body as bytes'''
        return self._body

    @body.setter
    def body(self, body):
        self._body = to_bytes(body)

    @property
    def headers(self):
        '''Case-insensitive mapping of header names to values'''
        return self._headers

    @headers.setter
    def headers(self, headers):
        self._headers = CIMultiDict()
        for name, value in dict(headers or ()).items():
            self.add_header(name, value)

    @property
    def response_code(self):
        return self._response_code

    @response_code.setter
    def response_code(self, code):
        self._response_code = coerce_pos_int(code)

    def add_header(self, header, value):
        '''Set ``header`` to ``value``, replacing any existing value
        regardless of the header name case.'''
        self._headers[header] = value
        return self

    def set_json_decoded_body(self, body, **kwargs):
        '''Serialise ``body`` to JSON and use it as the message body.

        The ``Content-Type`` header is set to
        ``application/json;charset=UTF-8``. ``kwargs`` are passed to
        :func:`json.dumps`.
        '''
        kwargs.setdefault('default', encode_object)
        data = json.dumps(body, **kwargs)
        self.add_header('Content-Type', JSON_CONTENT_TYPE)
        self.body = data
        return self

    def get_json_decoded_body(self, **kwargs):
        '''Decode the body as JSON, ``kwargs`` are passed to
        :func:`json.loads`.'''
        return json.loads(self._body, **kwargs)

    def set_options(self, options):
        '''Apply the recognised :attr:`OPTIONS` found in ``options``.

        Unknown keys are ignored.
        '''
        for key in self.OPTIONS:
            if key in options:
                setattr(self, key, options[key])
        return self
