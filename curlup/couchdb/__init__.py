from .server import CouchDb
from .database import Database
from .search import Lucene


__all__ = ['CouchDb', 'Database', 'Lucene']
