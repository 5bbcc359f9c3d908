# -*- coding: utf-8 -
#
# This file is part of couchuri released under the MIT license.
# See the NOTICE for more information.

"""
couchuri.params
~~~~~~~~~~~~~~~

Query parameters appended to an URI. Order is kept and a name may appear
more than once:

    >>> params = Params().rev("1-abc").conflicts()
    >>> params.serialize()
    'rev=1-abc&conflicts=true'

"""
from collections import namedtuple
import json

from .components import ComponentType
from .encoding import encode_uri_component, to_query_value
from .exceptions import InvalidArgumentError

# view parameters always sent as json, even when given as strings
JSON_PARAMS = ('key', 'keys', 'startkey', 'endkey', 'start_key', 'end_key')


def encode_params(params):
    """ encode parameters in json if needed """
    _params = []
    if params:
        for name, value in params.items():
            if name in JSON_PARAMS:
                value = json.dumps(value)
            elif value is None:
                continue
            else:
                value = to_query_value(value)
            _params.append((name, value))
    return _params


class Param(namedtuple('Param', 'name value')):
    """ a name=value pair of the query string """

    __slots__ = ()

    def to_url_encoded(self):
        name = encode_uri_component(self.name, ComponentType.QUERY_PARAM)
        if not self.value:
            return "%s=" % name
        return "%s=%s" % (name,
                encode_uri_component(self.value, ComponentType.QUERY_PARAM))


class Params(object):
    """ Ordered list of query parameters.

    Values are stored as text: strings are kept, other values go through
    `to_query_value` (`True` becomes ``true``, numbers and lists are sent as
    json).
    """

    def __init__(self, params=None):
        self._params = []
        if params is not None:
            self.merge(params)

    def add_param(self, name, value):
        """ append a parameter, even if one with the same name exists """
        if name is None:
            raise InvalidArgumentError("parameter name is missing")
        self._params.append(Param(name, to_query_value(value)))
        return self

    def replace_or_add(self, name, value):
        """ remove the first parameter named `name` if any then append the
        new one at the end """
        if name is None:
            raise InvalidArgumentError("parameter name is missing")
        for i, param in enumerate(self._params):
            if param.name == name:
                del self._params[i]
                break
        return self.add_param(name, value)

    def merge(self, other):
        """ append all parameters from another `Params`, a mapping or a list
        of (name, value) pairs """
        if hasattr(other, 'items') and not isinstance(other, Params):
            other = other.items()
        for name, value in list(other):
            self.add_param(name, value)
        return self

    def serialize(self, skip_empty=False):
        """ url encoded query string, without the leading '?' """
        parts = []
        for param in self._params:
            if skip_empty and not param.value:
                continue
            parts.append(param.to_url_encoded())
        return "&".join(parts)

    # shortcuts for the usual document parameters

    def rev(self, rev):
        return self.add_param("rev", rev)

    def revs_info(self):
        return self.add_param("revs_info", True)

    def attachments(self):
        return self.add_param("attachments", True)

    def revisions(self):
        return self.add_param("revs", True)

    def conflicts(self):
        return self.add_param("conflicts", True)

    def local_seq(self):
        return self.add_param("local_seq", True)

    def read_quorum(self, quorum):
        return self.add_param("r", int(quorum))

    def get(self, name, default=None):
        """ value of the first parameter named `name` """
        for param in self._params:
            if param.name == name:
                return param.value
        return default

    def getall(self, name):
        return [param.value for param in self._params if param.name == name]

    def names(self):
        return [param.name for param in self._params]

    def copy(self):
        return Params(self)

    def __iter__(self):
        return iter(self._params)

    def __len__(self):
        return len(self._params)

    def __bool__(self):
        return len(self._params) > 0

    def __contains__(self, name):
        return any(param.name == name for param in self._params)

    def __eq__(self, other):
        if not isinstance(other, Params):
            return NotImplemented
        return self._params == other._params

    def __str__(self):
        return self.serialize()

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self._params)
