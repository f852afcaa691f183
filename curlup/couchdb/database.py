'''Database level endpoints of CouchDB_::

    db = CouchDb().database('books')
    db.save_document({'_id': 'dune', 'author': 'Herbert'}).send()
    doc = db.fetch_document('dune').send_and_decode()


Database
=================

.. autoclass:: Database
   :members:
   :member-order: bysource


.. _CouchDB: http://couchdb.apache.org/
'''
from collections.abc import Mapping

from ..http import JSON_CONTENT_TYPE
from ..http.message import (
    HTTP_METHOD_DELETE, HTTP_METHOD_GET, HTTP_METHOD_POST, HTTP_METHOD_PUT
)
from .paths import db_path, required
from .search import Lucene


def document_id(doc):
    '''The ``_id`` of ``doc``, a mapping or an object with an ``_id``
    attribute, ``None`` when missing or empty.'''
    if isinstance(doc, Mapping):
        doc_id = doc.get('_id')
    else:
        doc_id = getattr(doc, '_id', None)
    return doc_id or None


class Database:
    '''Factory of requests for the database ``name`` of a
    :class:`.CouchDb` server.

    .. attribute:: couchdb

        The :class:`.CouchDb` creating the requests.

    .. attribute:: name

        The database name.
    '''
    def __init__(self, couchdb, name):
        self.couchdb = couchdb
        self.name = required(name, 'database name')

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, self.name)
    __str__ = __repr__

    def create_request(self, method, *segments):
        '''Create a request for the path made of ``segments`` inside
        this database.'''
        return self.couchdb.create_request(db_path(self.name, *segments),
                                           method)

    def lucene(self, key='local'):
        '''A :class:`.Lucene` builder for the full text indexes of this
        database.'''
        return Lucene(self, key)

    # DOCUMENTS
    def all_docs(self):
        return self.create_request(HTTP_METHOD_GET, '_all_docs')

    def all_docs_multi_key(self, keys):
        '''``POST /{db}/_all_docs`` restricted to ``keys``'''
        return self.create_request(
            HTTP_METHOD_POST, '_all_docs').set_json_decoded_body(
                {'keys': list(keys)})

    def bulk_docs(self, docs, all_or_nothing=False):
        '''``POST /{db}/_bulk_docs``

        :param docs: list of documents to create, update or delete.
        :param all_or_nothing: ask CouchDB to commit either all or none
            of ``docs``.
        '''
        body = {'all_or_nothing': bool(all_or_nothing), 'docs': list(docs)}
        return self.create_request(
            HTTP_METHOD_POST, '_bulk_docs').set_json_decoded_body(body)

    def changes(self):
        return self.create_request(HTTP_METHOD_GET, '_changes')

    def delete_document(self, doc_id, rev):
        '''``DELETE /{db}/{doc_id}?rev={rev}``'''
        doc_id = required(doc_id, 'document ID')
        rev = required(rev, 'revision')
        return self.create_request(HTTP_METHOD_DELETE,
                                   doc_id).add_query_data('rev', rev)

    def fetch_document(self, doc_id):
        doc_id = required(doc_id, 'document ID')
        return self.create_request(HTTP_METHOD_GET, doc_id)

    def save_document(self, doc):
        '''Create or update ``doc``.

        ``doc`` is either a mapping or an object whose attributes are the
        document fields. When it carries a non empty ``_id`` the document
        is ``PUT`` at ``/{db}/{_id}``, otherwise it is ``POST`` to
        ``/{db}/`` and CouchDB assigns the id.
        '''
        doc_id = document_id(doc)
        if doc_id:
            request = self.create_request(HTTP_METHOD_PUT, doc_id)
        else:
            request = self.create_request(HTTP_METHOD_POST, '')
        return request.set_json_decoded_body(doc)

    def post_raw_document(self, doc):
        '''``POST /{db}/`` with ``doc``, an already encoded JSON document,
        as body.'''
        return self.create_request(HTTP_METHOD_POST, '').add_header(
            'Content-Type', JSON_CONTENT_TYPE).set_options({'body': doc})

    def put_raw_document(self, doc, doc_id):
        doc_id = required(doc_id, 'document ID')
        return self.create_request(HTTP_METHOD_PUT, doc_id).add_header(
            'Content-Type', JSON_CONTENT_TYPE).set_options({'body': doc})

    # ATTACHMENTS
    def fetch_attachment(self, doc_id, attachment_id):
        doc_id = required(doc_id, 'document ID')
        attachment_id = required(attachment_id, 'attachment ID')
        return self.create_request(HTTP_METHOD_GET, doc_id, attachment_id)

    def save_attachment(self, body, doc_id, attachment_id, rev,
                        content_type=None):
        '''``PUT /{db}/{doc_id}/{attachment_id}?rev={rev}``

        :param body: attachment bytes.
        :param content_type: optional ``Content-Type`` of the attachment.
        '''
        doc_id = required(doc_id, 'document ID')
        attachment_id = required(attachment_id, 'attachment ID')
        rev = required(rev, 'revision')
        request = self.create_request(HTTP_METHOD_PUT, doc_id, attachment_id)
        request.add_query_data('rev', rev).set_options({'body': body})
        if content_type:
            request.add_header('Content-Type', content_type)
        return request

    # DESIGN DOCUMENTS
    def design_list(self, list_name, list_ddoc, view, view_ddoc=''):
        '''``GET /{db}/_design/{list_ddoc}/_list/{list_name}/{view}``

        When ``view_ddoc`` is given the view is taken from that design
        document, ``.../_list/{list_name}/{view_ddoc}/{view}``.
        '''
        list_name = required(list_name, 'list function')
        list_ddoc = required(list_ddoc, 'list design document')
        view = required(view, 'list view')
        segments = ['_design', list_ddoc, '_list', list_name]
        if view_ddoc:
            segments.append(view_ddoc)
        segments.append(view)
        return self.create_request(HTTP_METHOD_GET, *segments)

    def design_list_multi_key(self, keys, list_name, list_ddoc, view,
                              view_ddoc=''):
        request = self.design_list(list_name, list_ddoc, view, view_ddoc)
        request.method = HTTP_METHOD_POST
        return request.set_json_decoded_body({'keys': list(keys)})

    def design_show(self, show, show_ddoc, doc_id):
        '''``GET /{db}/_design/{show_ddoc}/_show/{show}/{doc_id}``'''
        show = required(show, 'show function')
        show_ddoc = required(show_ddoc, 'show design document')
        doc_id = required(doc_id, 'document ID')
        return self.create_request(HTTP_METHOD_GET, '_design', show_ddoc,
                                   '_show', show, doc_id)

    def design_view(self, ddoc, view):
        '''``GET /{db}/_design/{ddoc}/_view/{view}``, pass view options
        with :meth:`.Request.add_query_data`.'''
        ddoc = required(ddoc, 'view design document')
        view = required(view, 'view function')
        return self.create_request(HTTP_METHOD_GET, '_design', ddoc,
                                   '_view', view)

    def design_view_multi_key(self, keys, ddoc, view):
        request = self.design_view(ddoc, view)
        request.method = HTTP_METHOD_POST
        return request.set_json_decoded_body({'keys': list(keys)})

    def temp_view(self, view_function):
        '''``POST /{db}/_temp_view``

        :param view_function: mapping with ``map`` (and optionally
            ``reduce``) javascript source.
        '''
        return self.create_request(
            HTTP_METHOD_POST, '_temp_view').set_json_decoded_body(
                view_function)

    # MAINTENANCE
    def compact(self):
        return self.create_request(HTTP_METHOD_POST, '_compact').add_header(
            'Content-Type', JSON_CONTENT_TYPE)

    def compact_views(self, ddoc):
        '''``POST /{db}/_compact/{ddoc}``, compact the view indexes of
        design document ``ddoc``.'''
        ddoc = required(ddoc, 'design document')
        return self.create_request(HTTP_METHOD_POST, '_compact',
                                   ddoc).add_header('Content-Type',
                                                    JSON_CONTENT_TYPE)

    def ensure_full_commit(self):
        return self.create_request(
            HTTP_METHOD_POST, '_ensure_full_commit').add_header(
                'Content-Type', JSON_CONTENT_TYPE)

    def view_cleanup(self):
        return self.create_request(
            HTTP_METHOD_POST, '_view_cleanup').add_header('Content-Type',
                                                          JSON_CONTENT_TYPE)