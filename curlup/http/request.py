import logging
from io import BytesIO
from urllib.parse import urlencode

import certifi
import pycurl

from .. import __version__
from ..utils.config import coerce_pos_int
from ..utils.exceptions import InvalidArgument, TransportError
from .message import (
    Message, message_property, HTTP_METHODS, HTTP_METHOD_HEAD
)
from .response import Response


LOGGER = logging.getLogger('curlup.http')

DEFAULT_TIMEOUT = 10
DEFAULT_MAX_REDIRECTS = 3
USER_AGENT = 'curlup/%s' % __version__


def query_value(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return value


def header_line(name, value):
    # an empty value removes a header curl would add by itself
    if value == '' or value is None:
        return '%s:' % name
    return '%s: %s' % (name, value)


class Request:
    """A single deferred HTTP call executed by libcurl.

    Nothing is sent until :meth:`send` is called, or until the request is
    executed as part of a :class:`.RequestPool`. Each request owns one
    ``pycurl.Curl`` handle, created the first time it is needed.

    :param options: any of the :attr:`OPTIONS`, applied via
        :meth:`set_options`.

    .. attribute:: message

        The :class:`.Message` holding body and headers.

    .. attribute:: uri

        Absolute url, without the query string.

    .. attribute:: max_redirects

        Maximum number of redirects to follow, default 3.

    .. attribute:: throws_exceptions

        Passed to :meth:`.Response.factory` when parsing the response.
        ``None`` uses the process-wide default.
    """
    OPTIONS = Message.OPTIONS[:3] + ('method', 'uri', 'query_data', 'timeout',
                                     'max_redirects', 'user_agent',
                                     'throws_exceptions')
    """Options recognised by :meth:`set_options`."""

    body = message_property('body')
    headers = message_property('headers')
    http_version = message_property('http_version')

    def __init__(self, **options):
        self.message = Message()
        self.message.add_header('Expect', '')
        self.uri = None
        self.max_redirects = DEFAULT_MAX_REDIRECTS
        self.user_agent = USER_AGENT
        self.throws_exceptions = None
        self._method = None
        self._query_data = {}
        self._timeout = DEFAULT_TIMEOUT
        self._handle = None
        self._buffer = None
        self.set_options(options)

    def __repr__(self):
        return '%s %s' % (self._method, self.full_uri)
    __str__ = __repr__

    @property
    def method(self):
        '''The request method, one of ``GET``, ``HEAD``, ``POST``, ``PUT``,
        ``DELETE`` or ``COPY``'''
        return self._method

    @method.setter
    def method(self, method):
        if method is not None:
            method = method.upper()
            if method not in HTTP_METHODS:
                raise InvalidArgument('unsupported method %s' % method)
        self._method = method

    @property
    def query_data(self):
        return self._query_data

    @query_data.setter
    def query_data(self, query_data):
        self._query_data = dict(query_data or ())

    @property
    def timeout(self):
        '''Connect and transfer timeout in seconds, 0 for no timeout'''
        return self._timeout

    @timeout.setter
    def timeout(self, timeout):
        self._timeout = coerce_pos_int(timeout)

    @property
    def full_uri(self):
        '''The :attr:`uri` with the url-encoded :attr:`query_data`'''
        uri = self.uri or ''
        if self._query_data:
            query = ((key, query_value(value))
                     for key, value in self._query_data.items())
            uri = '%s?%s' % (uri, urlencode(list(query)))
        return uri

    @property
    def handle(self):
        '''The ``pycurl.Curl`` handle of this request'''
        if self._handle is None:
            self._handle = pycurl.Curl()
        return self._handle

    def add_header(self, header, value):
        self.message.add_header(header, value)
        return self

    def add_query_data(self, key, value):
        self._query_data[key] = value
        return self

    def set_json_decoded_body(self, body, **kwargs):
        self.message.set_json_decoded_body(body, **kwargs)
        return self

    def get_json_decoded_body(self, **kwargs):
        return self.message.get_json_decoded_body(**kwargs)

    def set_options(self, options):
        '''Apply the recognised :attr:`OPTIONS` found in ``options``.

        Unknown keys are ignored.
        '''
        for key in self.OPTIONS:
            if key in options:
                setattr(self, key, options[key])
        return self

    def curl_options(self):
        '''Dictionary of ``pycurl`` options for this request.'''
        if not self.uri:
            raise InvalidArgument('request uri must be set before sending')
        if not self._method:
            raise InvalidArgument('request method must be set before sending')
        options = {
            pycurl.CONNECTTIMEOUT: self._timeout,
            pycurl.FOLLOWLOCATION: 1,
            pycurl.HEADER: 1,
            pycurl.HTTP_VERSION: pycurl.CURL_HTTP_VERSION_1_1,
            pycurl.MAXREDIRS: self.max_redirects,
            pycurl.NOSIGNAL: 1,
            pycurl.TIMEOUT: self._timeout,
            pycurl.URL: self.full_uri,
            pycurl.USERAGENT: self.user_agent,
            pycurl.CAINFO: certifi.where()
        }
        if self._method == HTTP_METHOD_HEAD:
            options[pycurl.NOBODY] = 1
        else:
            options[pycurl.CUSTOMREQUEST] = self._method

        headers = self.message.headers
        if headers:
            options[pycurl.HTTPHEADER] = [header_line(name, value)
                                          for name, value in headers.items()]

        body = self.message.body
        if len(body) > 0:
            options[pycurl.POSTFIELDS] = body

        return options

    def prepare(self):
        '''Reset the curl :attr:`handle` and load it with this request
        options and a fresh response buffer.
        '''
        options = self.curl_options()
        handle = self.handle
        handle.reset()
        self._buffer = BytesIO()
        for option, value in options.items():
            handle.setopt(option, value)
        handle.setopt(pycurl.WRITEDATA, self._buffer)
        return handle

    def content(self):
        '''Raw bytes, headers included, received by the last transfer.'''
        return self._buffer.getvalue() if self._buffer is not None else b''

    def get_response(self):
        '''Parse :meth:`content` into a :class:`.Response`.'''
        return Response.factory(self.content(),
                                throws_exceptions=self.throws_exceptions)

    def send(self):
        '''Execute this request and wait for the response.

        :raise TransportError: when libcurl fails to complete the
            transfer.
        :return: a :class:`.Response`
        '''
        handle = self.prepare()
        LOGGER.debug('%s', self)
        try:
            handle.perform()
        except pycurl.error as exc:
            code, message = exc.args[:2]
            raise TransportError(message, code, request=self) from exc
        LOGGER.debug('%s completed in %.3f seconds', self,
                     handle.getinfo(pycurl.TOTAL_TIME))
        return self.get_response()

    def send_and_decode(self, **kwargs):
        '''Convenience method for sending a request and decoding the
        response.

        ``kwargs`` are passed to :meth:`.Response.get_json_decoded_body`.
        '''
        return self.send().get_json_decoded_body(**kwargs)

    def close(self):
        '''Release the curl :attr:`handle`.'''
        if self._handle is not None:
            self._handle.close()
            self._handle = None
