'''Full text search through couchdb-lucene_, reached via the ``_fti``
handler of the CouchDB server::

    lucene = db.lucene()
    q = 'title:%s' % Lucene.escape('C++ (3rd edition)')
    result = lucene.query(q, 'search', 'by_title', limit=10).send_and_decode()


Lucene
=================

.. autoclass:: Lucene
   :members:
   :member-order: bysource


.. _couchdb-lucene: https://github.com/rnewson/couchdb-lucene
'''
import re

from ..http.message import HTTP_METHOD_GET
from .paths import quote_segment, required


special_chars = re.compile(r'([\\+\-()^\[\]{}*?|~":!&;\s])', re.ASCII)


class Lucene:
    '''Factory of search requests for the indexes of a :class:`.Database`.

    :param database: the :class:`.Database` whose design documents define
        the indexes.
    :param key: name of the couchdb-lucene instance as configured in the
        CouchDB ``_fti`` section, default ``local``.
    '''
    def __init__(self, database, key='local'):
        self.database = database
        self.key = required(key, 'lucene key')

    def __repr__(self):
        return '%s(%s, %s)' % (self.__class__.__name__, self.key,
                               self.database.name)
    __str__ = __repr__

    def design_view(self, ddoc, view):
        '''``GET /_fti/{key}/{db}/_design/{ddoc}/{view}``'''
        ddoc = required(ddoc, 'view design document')
        view = required(view, 'view function')
        path = '/_fti/%s/%s/_design/%s/%s' % tuple(
            quote_segment(s) for s in (self.key, self.database.name, ddoc,
                                       view))
        return self.database.couchdb.create_request(path, HTTP_METHOD_GET)

    def query(self, query, ddoc, view, **params):
        '''Search the index ``view`` of design document ``ddoc``.

        :param query: the lucene query, pass user input through
            :meth:`escape` first.
        :param params: additional query parameters, for example
            ``limit`` or ``include_docs``.
        '''
        query = required(query, 'query')
        request = self.design_view(ddoc, view).add_query_data('q', query)
        for key, value in params.items():
            request.add_query_data(key, value)
        return request

    @staticmethod
    def escape(query):
        '''Backslash escape the lucene special characters in ``query``.

        Escaping twice escapes the backslashes added the first time.
        '''
        return special_chars.sub(r'\\\1', query)
