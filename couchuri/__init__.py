# -*- coding: utf-8 -
#
# This file is part of couchuri released under the MIT license.
# See the NOTICE for more information.

from .version import version_info, __version__

from .exceptions import CouchUriError, InvalidArgumentError, EncodingError, \
InvalidUriError, BuilderStateError

from .components import ComponentType
from .encoding import encode_uri_component, to_query_value
from .params import Param, Params, encode_params
from .builder import URIBase, encode_path, DEFAULT_URI, DESIGN_PREFIX, \
LOCAL_PREFIX
from .database import DatabaseURIHelper

from .logging import (LOG_LEVELS, set_logging, logger)
