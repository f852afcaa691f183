'''CouchDB_ server level endpoints::

    couch = CouchDb(uri='http://localhost:5984')
    couch.all_dbs().send_and_decode()


Every method builds and returns an unsent :class:`.Request`. Call
:meth:`.Request.send` or attach the request to a :class:`.RequestPool`
to execute it.

CouchDb
=================

.. autoclass:: CouchDb
   :members:
   :member-order: bysource


.. _CouchDB: http://couchdb.apache.org/
'''
from ..http import Request, RequestPool, JSON_CONTENT_TYPE
from ..http.message import (
    HTTP_METHOD_DELETE, HTTP_METHOD_GET, HTTP_METHOD_POST, HTTP_METHOD_PUT
)
from ..utils.config import Config, validate_uri, coerce_pos_int
from ..utils.exceptions import InvalidArgument
from .database import Database
from .paths import quote_segment, required


class CouchDb:
    '''Factory of requests for a CouchDB server.

    :param uri: base uri of the server, default from the
        ``couchdb_uri`` setting.
    :param timeout: timeout in seconds of created requests and pools,
        default from the ``timeout`` setting.
    :param throws_exceptions: passed to every created :class:`.Request`,
        ``None`` defers to :meth:`.Response.get_throws_exceptions`.
    :param cfg: optional :class:`.Config`.
    '''
    def __init__(self, uri=None, timeout=None, throws_exceptions=None,
                 cfg=None):
        self.cfg = cfg or Config()
        self.uri = uri if uri is not None else self.cfg.couchdb_uri
        self.timeout = timeout if timeout is not None else self.cfg.timeout
        if throws_exceptions is None:
            throws_exceptions = self.cfg.throws_exceptions
        self.throws_exceptions = throws_exceptions
        if self.cfg.log_level:
            self.cfg.configured_logger()

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, self._uri)
    __str__ = __repr__

    @property
    def uri(self):
        '''Base CouchDB uri'''
        return self._uri

    @uri.setter
    def uri(self, uri):
        try:
            self._uri = validate_uri(uri)
        except (TypeError, ValueError) as exc:
            raise InvalidArgument('Invalid CouchDB uri: %s' % exc) from exc

    @property
    def timeout(self):
        '''Timeout for requests created from this object'''
        return self._timeout

    @timeout.setter
    def timeout(self, timeout):
        self._timeout = coerce_pos_int(timeout)

    def create_request(self, path, method):
        '''Generate a new request

        Requests should be generated using this method, the options of this
        :class:`CouchDb` are passed along.

        :param path: uri path (requires leading slash if you want one)
        :param method: request method
        :return: a :class:`.Request`
        '''
        return Request(method=method,
                       timeout=self._timeout,
                       uri=self._uri + path,
                       max_redirects=self.cfg.max_redirects,
                       user_agent=self.cfg.user_agent,
                       throws_exceptions=self.throws_exceptions)

    def create_request_pool(self):
        '''Generate a new :class:`.RequestPool` with the timeout of this
        :class:`CouchDb`.'''
        return RequestPool(timeout=self._timeout)

    def database(self, name):
        '''A :class:`.Database` builder for database ``name``.'''
        return Database(self, name)

    # SERVER API
    def root(self):
        '''``GET /``, welcome message and version'''
        return self.create_request('/', HTTP_METHOD_GET)

    def all_dbs(self):
        '''``GET /_all_dbs``, list of all databases'''
        return self.create_request('/_all_dbs', HTTP_METHOD_GET)

    def active_tasks(self):
        return self.create_request('/_active_tasks', HTTP_METHOD_GET)

    def log(self):
        return self.create_request('/_log', HTTP_METHOD_GET)

    def replicate(self, body):
        '''``POST /_replicate``

        :param body: replication document, for example
            ``{'source': 'a', 'target': 'b'}``.
        '''
        return self.create_request(
            '/_replicate', HTTP_METHOD_POST).set_json_decoded_body(body)

    def restart(self):
        return self.create_request(
            '/_restart', HTTP_METHOD_POST).add_header('Content-Type',
                                                      JSON_CONTENT_TYPE)

    def stats(self, name=()):
        '''``GET /_stats`` or, for a ``(group, key)`` pair,
        ``GET /_stats/{group}/{key}``.

        :raise InvalidArgument: when ``name`` is neither empty nor a pair.
        '''
        uri = '/_stats'
        if isinstance(name, str):
            name = (name,)
        name = tuple(name or ())
        if len(name) == 2:
            uri = '%s/%s/%s' % (uri, quote_segment(name[0]),
                                quote_segment(name[1]))
        elif len(name) != 0:
            raise InvalidArgument('name must contain exactly 2 values for '
                                  'specific statistic retrieval')
        return self.create_request(uri, HTTP_METHOD_GET)

    def uuids(self, count=None):
        request = self.create_request('/_uuids', HTTP_METHOD_GET)
        if count is not None:
            request.add_query_data('count', count)
        return request

    # DATABASE API
    def create_db(self, name):
        '''``PUT /{db}``, create database ``name``'''
        name = required(name, 'database name')
        return self.create_request('/%s' % quote_segment(name),
                                   HTTP_METHOD_PUT)

    def delete_db(self, name):
        '''``DELETE /{db}``, delete database ``name``'''
        name = required(name, 'database name')
        return self.create_request('/%s' % quote_segment(name),
                                   HTTP_METHOD_DELETE)
