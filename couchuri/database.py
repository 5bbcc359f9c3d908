# -*- coding: utf-8 -
#
# This file is part of couchuri released under the MIT license.
# See the NOTICE for more information.

"""
couchuri.database
~~~~~~~~~~~~~~~~~

URIs of a CouchDB database: documents, design and local documents,
attachments, changes, views and the other database endpoints.

Example:

    >>> helper = DatabaseURIHelper("http://127.0.0.1:5984", "couchuri_test")
    >>> helper.document_uri("_design/blog", rev="2-b")
    'http://127.0.0.1:5984/couchuri_test/_design/blog?rev=2-b'

Like :class:`couchuri.builder.URIBase` a helper builds a single URI, create
a new one for each request.
"""
import json

import furl

from .builder import URIBase, UriAccumulator, parse_base_uri, encode_path, \
        DESIGN_PREFIX, LOCAL_PREFIX
from .exceptions import InvalidArgumentError, BuilderStateError
from .params import encode_params


def _split_design_name(name, kind):
    """ "designname/funcname" -> ("designname", "funcname") """
    if name.startswith('/'):
        name = name[1:]
    if name.startswith(DESIGN_PREFIX):
        name = name[len(DESIGN_PREFIX):]
    parts = name.split('/')
    dname = parts.pop(0)
    fname = '/'.join(parts)
    if not dname or not fname:
        raise InvalidArgumentError(
            "%s name should be 'designname/%sname', got %r" % (kind, kind, name))
    return dname, fname


class DatabaseURIHelper(object):
    """ Build an URI in a database. """

    def __init__(self, base_uri, db_name):
        """
        @param base_uri: str, uri of the server
        @param db_name: str, name of the database, encoded as one segment
        """
        if not db_name:
            raise InvalidArgumentError("database name is missing")
        self._init(URIBase(base_uri).path(db_name).build())

    @classmethod
    def from_database_uri(cls, uri):
        """ helper for an uri already containing the database """
        helper = cls.__new__(cls)
        helper._init(parse_base_uri(uri))
        return helper

    def _init(self, database_uri):
        self._database_uri = database_uri
        self._acc = UriAccumulator(database_uri)
        self._built = False

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self._database_uri)

    @property
    def database_uri(self):
        return self._database_uri

    @property
    def db_name(self):
        """ decoded name of the database, the last segment of its uri """
        segments = furl.furl(self._database_uri).path.segments
        if not segments:
            return ''
        return segments[-1]

    def _accumulator(self):
        if self._built:
            raise BuilderStateError("%s already built" % self.__class__.__name__)
        return self._acc

    def encode_id(self, docid):
        """ encoded document or attachment id, "a/document" becomes
        "a%2Fdocument" """
        return encode_path(docid)

    def path(self, segment):
        self._accumulator().append_path(segment)
        return self

    def query(self, name, value, replace=True):
        self._accumulator().add_query(name, value, replace)
        return self

    def query_all(self, query):
        self._accumulator().add_queries(query)
        return self

    def merge_params(self, params):
        self._accumulator().merge(params)
        return self

    def raw_query(self, query):
        self._accumulator().set_raw_query(query)
        return self

    def document_id(self, docid):
        """ append a document id. Design document ids are split in two
        segments so the "/" after `_design` stays unencoded. """
        if not docid:
            raise InvalidArgumentError("document id is missing")

        if docid.startswith(DESIGN_PREFIX):
            name = docid[len(DESIGN_PREFIX):]
            if not name:
                raise InvalidArgumentError("design document name is missing")
            return self.path("_design").path(name)
        if docid.startswith(LOCAL_PREFIX) and not docid[len(LOCAL_PREFIX):]:
            raise InvalidArgumentError("local document name is missing")
        return self.path(docid)

    def attachment_id(self, attachment_id):
        if not attachment_id:
            raise InvalidArgumentError("attachment id is missing")
        return self.path(attachment_id)

    def rev_id(self, rev):
        return self.query("rev", rev)

    def build(self):
        uri = self._accumulator().build()
        self._built = True
        return uri

    def document_uri(self, docid, rev=None, params=None, **query):
        """ uri of a document

        @param docid: str, document id
        @param rev: str, revision of the document
        @param params: `couchuri.params.Params` to add to the query
        @param query: other query parameters
        """
        self.document_id(docid).rev_id(rev).merge_params(params)
        return self.query_all(query).build()

    def attachment_uri(self, docid, attachment_id, rev=None):
        return self.document_id(docid).rev_id(rev) \
                .attachment_id(attachment_id).build()

    def changes_uri(self, query=None, **params):
        """ uri of the changes feed. A `since` sequence that isn't a string
        is sent as json. """
        query = dict(query or {}, **params)
        since = query.get('since')
        if since is not None and not isinstance(since, str):
            query['since'] = json.dumps(since)
        return self.path("_changes").query_all(query).build()

    def bulk_docs_uri(self):
        return self.path("_bulk_docs").build()

    def revs_diff_uri(self):
        return self.path("_revs_diff").build()

    def bulk_uri(self, write_quorum=None):
        """ `_bulk_docs` with an optional write quorum `w` """
        return self.path("_bulk_docs").query("w", write_quorum).build()

    def create_document_uri(self, write_quorum=None):
        """ uri to POST a new document to """
        return self.query("w", write_quorum).build()

    def all_docs_uri(self, **params):
        return self.view_uri('_all_docs', **params)

    def view_uri(self, view_name, **params):
        """ uri of a view. `view_name` is '_all_docs' or
        'designname/viewname'. `key`, `keys`, `startkey` and `endkey` are
        always json encoded. """
        if view_name.startswith('/'):
            view_name = view_name[1:]
        if view_name == '_all_docs':
            self.path(view_name)
        else:
            dname, vname = _split_design_name(view_name, 'view')
            self.path("_design").path(dname).path("_view").path(vname)
        return self.merge_params(encode_params(params)).build()

    def list_uri(self, list_name, view_name, **params):
        """
        @param list_name: should be 'designname/listname'
        @param view_name: name of the view to run through the list
        """
        dname, lname = _split_design_name(list_name, 'list')
        self.path("_design").path(dname).path("_list").path(lname)
        for segment in view_name.split('/'):
            self.path(segment)
        return self.merge_params(encode_params(params)).build()

    def show_uri(self, show_name, docid=None, **params):
        """
        @param show_name: should be 'designname/showname'
        @param docid: id of the document to pass into the show function
        """
        dname, sname = _split_design_name(show_name, 'show')
        self.path("_design").path(dname).path("_show").path(sname)
        if docid is not None:
            self.path(docid)
        return self.query_all(params).build()

    def update_uri(self, update_name, docid=None, **params):
        """
        @param update_name: should be 'designname/updatename'
        @param docid: id of the document to pass into the update function
        """
        dname, uname = _split_design_name(update_name, 'update')
        self.path("_design").path(dname).path("_update").path(uname)
        if docid is not None:
            self.path(docid)
        return self.query_all(params).build()

    def search_uri(self, index_name, **params):
        """ uri of a Cloudant search index, 'designname/indexname' """
        dname, iname = _split_design_name(index_name, 'index')
        self.path("_design").path(dname).path("_search").path(iname)
        return self.merge_params(encode_params(params)).build()

    def find_uri(self):
        return self.path("_find").build()

    def index_uri(self):
        return self.path("_index").build()

    def delete_index_uri(self, design_doc, name, index_type="json"):
        if not design_doc or not name:
            raise InvalidArgumentError("design document and index name are required")
        if not design_doc.startswith(DESIGN_PREFIX):
            design_doc = DESIGN_PREFIX + design_doc
        return self.path("_index").path(design_doc).path(index_type) \
                .path(name).build()

    def shards_uri(self, docid=None):
        self.path("_shards")
        if docid is not None:
            self.path(docid)
        return self.build()

    def compact_uri(self, design_doc=None):
        """ compact the database or the views of `design_doc` """
        self.path("_compact")
        if design_doc is not None:
            if design_doc.startswith(DESIGN_PREFIX):
                design_doc = design_doc[len(DESIGN_PREFIX):]
            self.path(design_doc)
        return self.build()

    def view_cleanup_uri(self):
        return self.path("_view_cleanup").build()

    def ensure_full_commit_uri(self):
        return self.path("_ensure_full_commit").build()

    def security_uri(self):
        return self.path("_security").build()
