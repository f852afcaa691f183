# -*- coding: utf-8 -
"""CouchDB request builders executed over libcurl"""
from .utils.version import get_version


VERSION = (0, 1, 0, 'final', 0)

__version__ = version = get_version(VERSION)

from .utils.exceptions import *     # noqa
from .utils.config import Config    # noqa
from .http import (                 # noqa
    Message, Request, Response, RequestPool
)
from .couchdb import CouchDb, Database, Lucene     # noqa
