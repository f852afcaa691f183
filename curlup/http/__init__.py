from .message import Message, JSON_CONTENT_TYPE
from .request import Request
from .response import Response
from .pool import RequestPool


__all__ = [
    'Message',
    'Request',
    'Response',
    'RequestPool',
    #
    'JSON_CONTENT_TYPE'
]
