"""Configuration utilities which provide curlup with default parameters
which can be overridden by keyword arguments or read from the process
environment.

Config
~~~~~~~~~~

.. autoclass:: Config
   :members:
   :member-order: bysource

Setting
~~~~~~~~~~

.. autoclass:: Setting
   :members:
   :member-order: bysource
"""
import os
import textwrap
import logging
from urllib.parse import urlparse

from .. import __version__
from .string import camel_to_dash
from .log import configured_logger
from .exceptions import ImproperlyConfigured


__all__ = ['Config',
           'Setting',
           'ordered_settings',
           'validate_string',
           'validate_bool',
           'validate_list',
           'validate_pos_int',
           'coerce_pos_int',
           'coerce_bool']

LOGGER = logging.getLogger('curlup.config')

ENVIRON_PREFIX = 'CURLUP'
KNOWN_SETTINGS = {}
KNOWN_SETTINGS_ORDER = []

TRUE_VALUES = ('1', 'true', 'on', 'yes')


def wrap_method(func):
    def _wrapped(instance, *args, **kwargs):
        return func(*args, **kwargs)
    return _wrapped


def ordered_settings():
    for name in KNOWN_SETTINGS_ORDER:
        yield KNOWN_SETTINGS[name]


class Config:
    """A dictionary-like container of :class:`Setting` parameters.

    It provides easy access to :attr:`Setting.value`
    attribute by exposing the :attr:`Setting.name` as attribute::

        cfg = Config(timeout=30)
        cfg.timeout             # 30
        cfg.couchdb_uri         # 'http://127.0.0.1:5984'

    .. attribute:: settings

        Dictionary of all :class:`Setting` instances available in this
        :class:`Config` container.

        Keys are given by the :attr:`Setting.name` attribute.
    """
    def __init__(self, **params):
        self.settings = {}
        for setting_class in ordered_settings():
            setting = setting_class()
            self.settings[setting.name] = setting
        self.update(params)

    def __getattr__(self, name):
        try:
            return self._get(name)
        except KeyError as exc:
            raise AttributeError("'%s' object has no attribute '%s'." %
                                 (self.__class__.__name__, name)) from exc

    def __setattr__(self, name, value):
        if name != "settings" and name in self.settings:
            raise AttributeError("Invalid access!")
        super().__setattr__(name, value)

    def update(self, data):
        """Update this :attr:`Config` with ``data``.

        :param data: a ``Mapping`` like object exposing the ``items``
            method for iterating through key-value pairs.
        """
        for name, value in data.items():
            if value is not None:
                self.set(name, value)

    def get(self, name, default=None):
        """The value of the setting ``name``, ``default`` if there is no
        such setting."""
        try:
            return self._get(name)
        except KeyError:
            return default

    def set(self, name, value):
        """Set the :class:`Setting` at ``name`` with a new ``value``.

        :raise ImproperlyConfigured: when ``name`` is not a setting.
        """
        if name not in self.settings:
            raise ImproperlyConfigured("unknown setting '%s'" % name)
        self.settings[name].set(value)

    def update_from_environ(self, environ=None):
        """Read settings from the process environment.

        A setting named ``timeout`` is read from ``CURLUP_TIMEOUT``.
        Returns the list of setting names which were updated.
        """
        environ = os.environ if environ is None else environ
        updated = []
        for name, setting in self.settings.items():
            value = environ.get(setting.env_name())
            if value is not None:
                setting.set(value)
                updated.append(name)
        if updated:
            LOGGER.debug('settings %s read from environment',
                         ', '.join(updated))
        return updated

    def configured_logger(self, name=None):
        """Logger for ``name`` (default ``curlup``) configured with the
        :ref:`log_level <setting-log_level>` and ``log_handlers`` settings.
        """
        return configured_logger(name or 'curlup',
                                 level=self.log_level,
                                 handlers=self.log_handlers)

    ########################################################################
    #    INTERNALS
    def _get(self, name):
        if name not in self.settings:
            raise KeyError("'%s'" % name)
        return self.settings[name].get()


class SettingMeta(type):
    """A metaclass which collects all setting classes and put them
    in the global ``KNOWN_SETTINGS`` dictionary.
    """
    def __new__(cls, name, bases, attrs):
        super_new = super().__new__
        val = attrs.get("validator")
        attrs["validator"] = wrap_method(val) if val else None
        if attrs.pop('virtual', False):
            return super_new(cls, name, bases, attrs)
        new_class = super_new(cls, name, bases, attrs)
        new_class.fmt_desc(attrs.get('desc') or '')
        if not new_class.name:
            new_class.name = camel_to_dash(new_class.__name__)
        if new_class.name not in KNOWN_SETTINGS_ORDER:
            KNOWN_SETTINGS_ORDER.append(new_class.name)
        KNOWN_SETTINGS[new_class.name] = new_class
        return new_class

    def fmt_desc(cls, desc):
        desc = textwrap.dedent(desc).strip()
        setattr(cls, "desc", desc)
        lines = desc.split('\n\n')
        setattr(cls, "short", '' if not lines else lines[0])


class Setting(metaclass=SettingMeta):
    """Class for creating curlup settings.
    """
    virtual = True
    """If set to ``True`` the settings won't be loaded.

    It can be only used as base class for other settings."""
    name = None
    """The key to access this setting in a :class:`Config` container."""
    validator = None
    """A validating function for this setting.

    It provided it must be a function accepting one positional argument,
    the value to validate."""
    value = None
    """The actual value for this setting."""
    default = None
    """The default value for this setting."""
    desc = None
    """Description string"""

    def __init__(self, default=None):
        self.default = default if default is not None else self.default
        if self.default is not None:
            self.set(self.default)

    def __str__(self):
        return '{0} ({1})'.format(self.name, self.value)
    __repr__ = __str__

    def env_name(self):
        """Name of the environment variable for this setting."""
        return '%s_%s' % (ENVIRON_PREFIX, self.name.upper())

    def get(self):
        """Returns :attr:`value`"""
        return self.value

    def set(self, val):
        """Set ``val`` as the :attr:`value` for this :class:`Setting`.
        """
        if hasattr(self.validator, '__call__'):
            try:
                val = self.validator(val)
            except (TypeError, ValueError) as exc:
                raise ImproperlyConfigured('%s: %s' % (self.name, exc)) from exc
        self.value = val


def validate_bool(val):
    if isinstance(val, bool):
        return val
    if isinstance(val, int):
        return bool(val)
    if not isinstance(val, str):
        raise TypeError("Invalid type for casting: %s" % val)
    if val.lower().strip() in TRUE_VALUES:
        return True
    elif val.lower().strip() in ('0', 'false', 'off', 'no', ''):
        return False
    else:
        raise ValueError("Invalid boolean: %s" % val)


def validate_pos_int(val):
    if not isinstance(val, int):
        val = int(val, 0)
    else:
        # Booleans are ints!
        val = int(val)
    if val < 0:
        raise ValueError("Value must be positive: %s" % val)
    return val


def validate_string(val):
    if val is None:
        return None
    if not isinstance(val, str):
        raise TypeError("Not a string: %s" % val)
    return val.strip()


def validate_list(val):
    if isinstance(val, str):
        val = val.split()
    if val and not isinstance(val, (list, tuple)):
        raise TypeError("Not a list: %s" % val)
    return list(val or ())


def coerce_pos_int(val, default=0):
    '''Coerce ``val`` into a non-negative integer.

    Integers, integral floats and strings holding a base 10 integer are
    accepted, anything else (or a negative result) gives ``default``.
    Never raises.
    '''
    if isinstance(val, bool):
        val = int(val)
    elif isinstance(val, float):
        val = int(val) if val.is_integer() else None
    elif isinstance(val, (str, bytes)):
        try:
            val = int(val.strip(), 10)
        except ValueError:
            val = None
    elif not isinstance(val, int):
        val = None
    if val is None or val < 0:
        return default
    return val


def coerce_bool(val):
    '''Coerce ``val`` into a boolean. Only ``True``, non zero numbers and
    the strings ``1``, ``true``, ``on`` and ``yes`` are true. Never raises.
    '''
    if isinstance(val, bytes):
        val = val.decode('utf-8', 'replace')
    if isinstance(val, str):
        return val.lower().strip() in TRUE_VALUES
    if isinstance(val, (bool, int, float)):
        return bool(val)
    return False


def validate_uri(val):
    val = validate_string(val)
    if not val:
        raise ValueError('uri must not be empty')
    p = urlparse(val)
    if p.scheme not in ('http', 'https') or not p.netloc:
        raise ValueError('Invalid uri "%s"' % val)
    return val


############################################################################
#    Curlup Settings
class CouchDbUri(Setting):
    name = 'couchdb_uri'
    validator = validate_uri
    default = 'http://127.0.0.1:5984'
    desc = """\
        Base uri of the CouchDB server, without trailing slash.
        """


class Timeout(Setting):
    name = 'timeout'
    validator = validate_pos_int
    default = 10
    desc = """\
        Connect and transfer timeout, in seconds, of requests created by
        a :class:`.CouchDb` builder.

        0 means no timeout.
        """


class ThrowsExceptions(Setting):
    name = 'throws_exceptions'
    validator = validate_bool
    desc = """\
        Raise :class:`.CouchDbError` for responses with a 4xx or 5xx status
        code instead of returning them.

        When not set requests defer to the process-wide default, see
        :meth:`.Response.set_throws_exceptions`.
        """


class MaxRedirects(Setting):
    name = 'max_redirects'
    validator = validate_pos_int
    default = 3
    desc = """Maximum number of redirects followed by a request."""


class UserAgent(Setting):
    name = 'user_agent'
    validator = validate_string
    default = 'curlup/%s' % __version__
    desc = """User agent sent with every request."""


class LogLevel(Setting):
    name = 'log_level'
    validator = validate_string
    desc = """
        The granularity of log outputs for the ``curlup`` loggers.

        Valid level names are:

        * debug
        * info
        * warning
        * error
        * critical
        """


class LogHandlers(Setting):
    name = 'log_handlers'
    validator = validate_list
    default = ['console']
    desc = """Log handlers for the ``curlup`` loggers"""
