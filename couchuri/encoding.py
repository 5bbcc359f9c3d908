# -*- coding: utf-8 -
#
# This file is part of couchuri released under the MIT license.
# See the NOTICE for more information.

"""
couchuri.encoding
~~~~~~~~~~~~~~~~~

Percent-encoding of URI components (RFC 3986, section 2.1). Strings are
always encoded to UTF-8 first, each byte not allowed in the target component
is then replaced by ``%XX``:

    >>> encode_uri_component("café noir", ComponentType.PATH_SEGMENT)
    'caf%C3%A9%20noir'

"""
import json
import re

from .components import ComponentType
from .exceptions import EncodingError

CHARSET = 'utf-8'

re_escape = re.compile(r'%(?![0-9A-Fa-f]{2})')


def encode_uri_component(source, component_type):
    """ encode `source` so it can be used as `component_type` in an URI

    @param source: str, the raw value
    @param component_type: ComponentType, where the value will be placed

    @return: str, ASCII only
    """
    if not isinstance(component_type, ComponentType):
        raise EncodingError("invalid component type: %r" % (component_type,))
    if source is None or source == '':
        raise EncodingError("can't encode an empty value")
    if not isinstance(source, str):
        raise EncodingError("%s isn't a string" % type(source).__name__)

    try:
        data = source.encode(CHARSET)
    except UnicodeEncodeError as e:
        raise EncodingError("can't encode %r to %s: %s" % (source, CHARSET, e)) from e

    allowed = component_type.allowed
    out = []
    for b in bytearray(data):
        if b in allowed:
            out.append(chr(b))
        else:
            out.append('%%%02X' % b)
    return ''.join(out)


def is_valid_encoded(text, component_type):
    """ check that an already encoded string only contains characters
    allowed in `component_type` or well formed percent escapes """
    if re_escape.search(text):
        return False
    for c in text:
        if c == '%':
            continue
        if not component_type.is_allowed(c):
            return False
    return True


def to_query_value(value):
    """ text used for `value` in a query string. Strings are kept as is,
    anything else is sent as json like couchdb expects it """
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return json.dumps(value)
