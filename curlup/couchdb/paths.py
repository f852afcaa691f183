from urllib.parse import quote

from ..utils.exceptions import InvalidArgument


def quote_segment(segment):
    '''Percent-encode one url path ``segment``, slashes included.'''
    return quote('%s' % segment, safe='')


def required(value, what):
    '''Return ``value`` as a string, raise :class:`.InvalidArgument` if it
    is empty.'''
    value = '' if value is None else '%s' % value
    if not value:
        raise InvalidArgument('supplied %s must not be empty' % what)
    return value


def db_path(name, *segments):
    '''Path of ``segments`` inside database ``name``, each segment is
    percent-encoded.'''
    bits = [quote_segment(name)]
    bits.extend(quote_segment(s) for s in segments)
    return '/' + '/'.join(bits)
