'''
Module containing utilities for configuring the ``curlup`` loggers.
'''
import logging
from logging.config import dictConfig
from copy import deepcopy, copy
from threading import Lock


LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': ('%(asctime)s [p=%(process)s, t=%(thread)s,'
                       ' %(levelname)s, %(name)s] %(message)s'),
            'datefmt': '%H:%M:%S'
        },
        'simple': {
            'format': '%(asctime)s %(levelname)s %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'name_level_message': {
            'format': '%(name)s.%(levelname)s - %(message)s'
        },
        'message': {'format': '%(message)s'}
    },
    'handlers': {
        'silent': {
            'class': 'curlup.utils.log.Silence',
        },
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose'
        },
        'console_message': {
            'class': 'logging.StreamHandler',
            'formatter': 'message'
        },
        'console_name_level_message': {
            'class': 'logging.StreamHandler',
            'formatter': 'name_level_message'
        }
    },
    'filters': {},
    'loggers': {},
    'root': {}
}

_lock = Lock()
_config_logging = None


class Silence(logging.Handler):
    def emit(self, record):
        pass


def clear_logger():
    global _config_logging
    with _lock:
        _config_logging = None


def configured_logger(name=None, config=None, level=None, handlers=None):
    '''Configured logger.

    The first call builds the logging configuration from ``config``
    (or :data:`LOGGING_CONFIG`), later calls for an already configured
    ``name`` simply return the logger. When ``level`` cannot be resolved
    the logger is attached to the ``silent`` handler.
    '''
    global _config_logging
    name = name or ''
    with _lock:
        logconfig = _config_logging
        if not logconfig:
            logconfig = deepcopy(config or LOGGING_CONFIG)
            logconfig['configured'] = set()
            _config_logging = logconfig
        elif name in logconfig['configured']:
            return logging.getLogger(name)

        level = get_level(level)
        if level == logging.NOTSET:
            handlers = ['silent']

        level = logging.getLevelName(level)
        cfg = {'level': level, 'propagate': False}
        if handlers:
            cfg['handlers'] = handlers

        config = copy(logconfig)
        configured = config.pop('configured')
        configured.add(name)

        if name:
            config.pop('root', None)
            loggers = config.pop('loggers', {})
            if name in loggers:
                loggers[name].update(cfg)
                cfg = loggers[name]
            config['loggers'] = {name: cfg}
        else:
            if 'root' in config:
                config['root'].update(cfg)
                cfg = config['root']
            if 'handlers' not in cfg:
                cfg['handlers'] = ['console']
            config['root'] = cfg
        #
        dictConfig(config)
        return logging.getLogger(name)


def get_level(level):
    try:
        return int(level)
    except TypeError:
        return logging.NOTSET
    except ValueError:
        lv = str(level).upper()
        value = logging.getLevelName(lv)
        return value if isinstance(value, int) else logging.NOTSET
