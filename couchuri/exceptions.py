# -*- coding: utf-8 -
#
# This file is part of couchuri released under the MIT license.
# See the NOTICE for more information.

"""
All exceptions used in couchuri.
"""


class CouchUriError(Exception):
    """ base exception for couchuri """


class InvalidArgumentError(CouchUriError, ValueError):
    """ raised when a required identifier is None or empty """


class EncodingError(CouchUriError, ValueError):
    """ raised when a value can't be percent-encoded """


class InvalidUriError(CouchUriError, ValueError):
    """ raised when the built string doesn't parse as an URI """

    def __init__(self, uri, reason):
        self.uri = uri
        self.reason = reason
        super(InvalidUriError, self).__init__("%s: %r" % (reason, uri))


class BuilderStateError(CouchUriError, RuntimeError):
    """ raised when a builder is used again after build() """
