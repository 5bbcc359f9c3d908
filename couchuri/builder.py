# -*- coding: utf-8 -
#
# This file is part of couchuri released under the MIT license.
# See the NOTICE for more information.

"""
couchuri.builder
~~~~~~~~~~~~~~~~

Build URIs for a CouchDB server (account level). Path segments and query
parameters are encoded as they are added, the final URI is checked when
built:

    >>> URIBase("http://127.0.0.1:5984").path("_uuids").query("count", 10).build()
    'http://127.0.0.1:5984/_uuids?count=10'

A builder is used for one URI only, it can't be changed once built. For
database URIs see :mod:`couchuri.database`.
"""
import re

import furl

from .components import ComponentType, is_uri_char
from .encoding import encode_uri_component, is_valid_encoded, re_escape
from .exceptions import InvalidArgumentError, InvalidUriError, \
        BuilderStateError
from .logging import error_logger
from .params import Params

DEFAULT_URI = 'http://127.0.0.1:5984'

DESIGN_PREFIX = '_design/'
LOCAL_PREFIX = '_local/'

_DESIGN_PREFIX_ENCODED = '_design%2F'
_LOCAL_PREFIX_ENCODED = '_local%2F'

re_scheme = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*$')
re_host = re.compile(r'^[A-Za-z0-9._~\-]+$')


def encode_path(segment):
    """ encode one path segment, "a/document" becomes "a%2Fdocument".

    The slash following a `_design` or `_local` prefix is kept, couchdb
    routes those documents on it.
    """
    encoded = encode_uri_component(segment, ComponentType.PATH_SEGMENT)
    if encoded.startswith(_DESIGN_PREFIX_ENCODED) or \
            encoded.startswith(_LOCAL_PREFIX_ENCODED):
        return encoded.replace('%2F', '/', 1)
    return encoded


def check_uri(uri):
    """ raise `InvalidUriError` unless `uri` is an absolute URI with a host """
    for c in uri:
        if c != '%' and not is_uri_char(c):
            raise InvalidUriError(uri, "invalid character %r" % c)
    if re_escape.search(uri):
        raise InvalidUriError(uri, "malformed percent escape")
    try:
        parsed = furl.furl(uri)
    except ValueError as e:
        raise InvalidUriError(uri, str(e)) from e
    if not parsed.scheme or not re_scheme.match(parsed.scheme):
        raise InvalidUriError(uri, "scheme is missing")
    if not parsed.host:
        raise InvalidUriError(uri, "host is missing")
    return parsed


def parse_base_uri(uri):
    """ validate the uri of a server or a database, the trailing slash is
    removed """
    if not uri:
        raise InvalidArgumentError("uri is missing")

    uri = uri.rstrip('/')
    if '?' in uri or '#' in uri:
        raise InvalidUriError(uri, "base uri can't have a query or a fragment")
    check_uri(uri)
    return uri


def compose_base_uri(scheme, host, port=None, user_info=None, path=None):
    """ build a base uri from its parts, each one encoded for its place in
    the uri """
    if not scheme or not re_scheme.match(scheme):
        raise InvalidArgumentError("invalid scheme: %r" % (scheme,))
    if not host:
        raise InvalidArgumentError("host is missing")

    authority = ''
    if user_info:
        authority = encode_uri_component(user_info, ComponentType.USER_INFO) + '@'

    if host.startswith('[') or ':' in host:
        if not host.startswith('['):
            host = '[%s]' % host
        authority += encode_uri_component(host, ComponentType.HOST_IPV6)
    else:
        # furl only parses hosts made of unreserved characters
        if not re_host.match(host):
            raise InvalidArgumentError("invalid host: %r" % (host,))
        authority += encode_uri_component(host, ComponentType.HOST_IPV4)

    if port is not None:
        try:
            port = int(port)
        except (TypeError, ValueError):
            raise InvalidArgumentError("invalid port: %r" % (port,))
        if not 0 <= port <= 65535:
            raise InvalidArgumentError("invalid port: %r" % (port,))
        authority += ':' + encode_uri_component(str(port), ComponentType.PORT)

    uri = "%s://%s" % (scheme.lower(), authority)
    if path and path.strip('/'):
        uri += '/' + encode_uri_component(path.strip('/'), ComponentType.PATH)
    return parse_base_uri(uri)


def split_database_path(base_uri, path):
    """ (database, path) of an uri, used for logging """
    url_parts = (base_uri + path).split('/', 4)
    len_parts = len(url_parts)
    if len_parts == 5:
        database, path = url_parts[3:]
    elif len_parts == 4:
        database = url_parts[3]
        path = '/'
    else:
        database = '<unknown>'
        path = '<n/a>'
    return database, path


class UriAccumulator(object):
    """ Parts of an URI being built: the base uri, the encoded path, the
    query parameters and an optional raw query string. Not thread-safe, an
    accumulator belongs to one builder. """

    def __init__(self, base_uri):
        self.base_uri = base_uri
        self.path = ''
        self.params = Params()
        self.raw_query = ''

    def append_path(self, segment):
        if segment is None:
            raise InvalidArgumentError("path segment is missing")
        if segment:
            self.path += '/' + encode_path(segment)

    def add_query(self, name, value, replace=True):
        if name is None or value is None:
            return
        if replace:
            self.params.replace_or_add(name, value)
        else:
            self.params.add_param(name, value)

    def add_queries(self, query):
        if query:
            for name, value in query.items():
                self.add_query(name, value)

    def merge(self, params):
        if params is not None:
            self.params.merge(params)

    def set_raw_query(self, query):
        query = query or ''
        if query.startswith('?'):
            query = query[1:]
        self.raw_query = query

    def build(self):
        uri = self.base_uri + self.path
        query = [q for q in (self.params.serialize(), self.raw_query) if q]
        if query:
            uri = "%s?%s" % (uri, "&".join(query))

        try:
            if self.raw_query and \
                    not is_valid_encoded(self.raw_query, ComponentType.QUERY):
                raise InvalidUriError(uri, "invalid query %r" % self.raw_query)
            check_uri(uri)
        except InvalidUriError as e:
            logging_context = dict(
                method='build',
                uri=uri,
                error=e.reason,
            )
            error_logger.error("build error", extra=logging_context)
            raise
        return uri


class URIBase(object):
    """ Build an URI on a CouchDB server (the account). """

    def __init__(self, base_uri=DEFAULT_URI):
        """
        @param base_uri: str, uri of the server, eg "http://127.0.0.1:5984"
        """
        self._base_uri = parse_base_uri(base_uri)
        self._acc = UriAccumulator(self._base_uri)
        self._built = False

    @classmethod
    def from_components(cls, scheme, host, port=None, user_info=None,
            path=None):
        return cls(compose_base_uri(scheme, host, port=port,
            user_info=user_info, path=path))

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self._base_uri)

    @property
    def uri(self):
        """ uri of the server """
        return self._base_uri

    def _accumulator(self):
        if self._built:
            raise BuilderStateError("%s already built" % self.__class__.__name__)
        return self._acc

    def path(self, segment):
        """ append an encoded path segment, a "/" in `segment` is encoded """
        self._accumulator().append_path(segment)
        return self

    def query(self, name, value, replace=True):
        """ add a query parameter. Nothing is added if name or value is None.

        @param replace: if True an existing parameter with the same name
        is removed first.
        """
        self._accumulator().add_query(name, value, replace)
        return self

    def query_all(self, query):
        """ add each item of the mapping `query` """
        self._accumulator().add_queries(query)
        return self

    def merge_params(self, params):
        self._accumulator().merge(params)
        return self

    def raw_query(self, query):
        """ already encoded query string added after the other parameters """
        self._accumulator().set_raw_query(query)
        return self

    def build(self):
        uri = self._accumulator().build()
        self._built = True
        return uri

    def all_dbs_uri(self):
        return self.path("_all_dbs").build()

    def uuids_uri(self, count=None):
        return self.path("_uuids").query("count", count).build()

    def session_uri(self):
        return self.path("_session").build()

    def active_tasks_uri(self):
        return self.path("_active_tasks").build()

    def membership_uri(self):
        return self.path("_membership").build()

    def api_keys_uri(self):
        return self.path("_api").path("v2").path("api_keys").build()

    def replicate_uri(self):
        return self.path("_replicate").build()

    def scheduler_jobs_uri(self, limit=None, skip=None):
        return self.path("_scheduler").path("jobs") \
                .query("limit", limit).query("skip", skip).build()

    def scheduler_docs_uri(self):
        return self.path("_scheduler").path("docs").build()

    def scheduler_doc_uri(self, doc_id, replicator_db="_replicator"):
        """ state of a replication document as seen by the scheduler """
        if not doc_id:
            raise InvalidArgumentError("document id is missing")
        return self.path("_scheduler").path("docs").path(replicator_db) \
                .path(doc_id).build()

    def database_uri(self, db_name):
        if not db_name:
            raise InvalidArgumentError("database name is missing")
        return self.path(db_name).build()

    def database_security_uri(self, db_name):
        """ Cloudant security api for the database `db_name` """
        if not db_name:
            raise InvalidArgumentError("database name is missing")
        return self.path("_api").path("v2").path("db").path(db_name) \
                .path("_security").build()
