# -*- coding: utf-8 -
#
# This file is part of couchuri released under the MIT license.
# See the NOTICE for more information.

"""
couchuri.components
~~~~~~~~~~~~~~~~~~~

Characters allowed unencoded in each part of an URI. The character classes
are the ones from RFC 3986, appendix A:

    >>> ComponentType.PATH_SEGMENT.is_allowed(ord('@'))
    True
    >>> ComponentType.QUERY_PARAM.is_allowed('&')
    False

"""
from enum import Enum


def is_alpha(c):
    return ord('a') <= c <= ord('z') or ord('A') <= c <= ord('Z')


def is_digit(c):
    return ord('0') <= c <= ord('9')


def is_generic_delimiter(c):
    return chr(c) in ":/?#[]@"


def is_sub_delimiter(c):
    return chr(c) in "!$&'()*+,;="


def is_reserved(c):
    return is_generic_delimiter(c) or is_sub_delimiter(c)


def is_unreserved(c):
    return is_alpha(c) or is_digit(c) or chr(c) in "-._~"


def is_pchar(c):
    return is_unreserved(c) or is_sub_delimiter(c) or chr(c) in ":@"


def _query(c):
    return is_pchar(c) or chr(c) in "/?"


def _query_param(c):
    # the query string is read as application/x-www-form-urlencoded pairs by
    # the server: '+' would become a space, '=' splits name and value, '&'
    # and ';' split pairs.
    if chr(c) in "=+&;":
        return False
    return _query(c)


_RULES = {
    # scheme and port can't be made valid by escaping, unreserved characters
    # go through untouched like in every other component.
    'SCHEME': lambda c: is_unreserved(c) or chr(c) in "+-.",
    'AUTHORITY': lambda c: is_unreserved(c) or is_sub_delimiter(c) or chr(c) in ":@",
    'USER_INFO': lambda c: is_unreserved(c) or is_sub_delimiter(c) or chr(c) == ":",
    'HOST_IPV4': lambda c: is_unreserved(c) or is_sub_delimiter(c),
    'HOST_IPV6': lambda c: is_unreserved(c) or is_sub_delimiter(c) or chr(c) in "[]:",
    'PORT': is_unreserved,
    'PATH': lambda c: is_pchar(c) or chr(c) == "/",
    'PATH_SEGMENT': is_pchar,
    'QUERY': _query,
    'QUERY_PARAM': _query_param,
    'FRAGMENT': _query,
    'URI': is_unreserved,
}


class ComponentType(Enum):
    """ The parts of an URI, each one with its own set of characters that
    can be left unencoded. """

    SCHEME = 'scheme'
    AUTHORITY = 'authority'
    USER_INFO = 'user_info'
    HOST_IPV4 = 'host_ipv4'
    HOST_IPV6 = 'host_ipv6'
    PORT = 'port'
    PATH = 'path'
    PATH_SEGMENT = 'path_segment'
    QUERY = 'query'
    QUERY_PARAM = 'query_param'
    FRAGMENT = 'fragment'
    URI = 'uri'

    def is_allowed(self, c):
        """ True if the byte `c` (an int or a one character string) may
        appear unencoded in this component """
        if isinstance(c, str):
            c = ord(c)
        return c in _ALLOWED[self]

    @property
    def allowed(self):
        return _ALLOWED[self]


# only ASCII bytes are ever allowed, anything above 0x7F is escaped
_ALLOWED = dict(
    (ctype, frozenset(c for c in range(128) if _RULES[ctype.name](c)))
    for ctype in ComponentType
)


def is_uri_char(c):
    """ True if `c` may appear anywhere in an URI outside a percent escape """
    if isinstance(c, str):
        c = ord(c)
    return c < 128 and (is_reserved(c) or is_unreserved(c))
