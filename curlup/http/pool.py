import time
import logging

import pycurl

from ..utils.config import coerce_pos_int
from ..utils.exceptions import TransportError, PoolTimeout


LOGGER = logging.getLogger('curlup.pool')

DEFAULT_TIMEOUT = 10
SELECT_SLICE = 1.0
IDLE_WAIT = 0.01


class RequestPool:
    """Execute many :class:`.Request` concurrently over one
    ``pycurl.CurlMulti`` multiplexer.

    Requests are attached by identity, attaching the same request twice
    has no effect::

        pool = RequestPool(timeout=5)
        pool.attach(db.fetch_document('a')).attach(db.fetch_document('b'))
        responses = pool.send()

    :meth:`send` runs on the calling thread and returns once every transfer
    completed. A single failing transfer aborts the whole batch. No locking
    is performed, a pool must not be used by more than one thread at once.

    .. attribute:: responses

        List of :class:`.Response` of the last successful :meth:`send`,
        in the order the requests were attached.
    """
    def __init__(self, timeout=None):
        self._multi = None
        self._requests = {}
        self._responses = {}
        self._timeout = DEFAULT_TIMEOUT
        if timeout is not None:
            self.timeout = timeout

    def __repr__(self):
        return '%s(%d)' % (self.__class__.__name__, len(self))
    __str__ = __repr__

    def __len__(self):
        return len(self._requests)

    def __iter__(self):
        return iter(self._requests)

    def __contains__(self, request):
        return request in self._requests

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()

    @property
    def timeout(self):
        '''Seconds to wait for progress of any transfer, 0 waits forever'''
        return self._timeout

    @timeout.setter
    def timeout(self, timeout):
        self._timeout = coerce_pos_int(timeout)

    @property
    def multi(self):
        '''The ``pycurl.CurlMulti`` driving the transfers, created the
        first time it is needed.'''
        if self._multi is None:
            self._multi = pycurl.CurlMulti()
        return self._multi

    @property
    def requests(self):
        return list(self._requests)

    @property
    def responses(self):
        return list(self._responses.values())

    def response_for(self, request):
        '''The :class:`.Response` obtained for ``request`` by the last
        :meth:`send`, ``None`` if there is none.'''
        return self._responses.get(request)

    def attach(self, request):
        self._requests[request] = None
        return self

    def detach(self, request):
        self._requests.pop(request, None)
        return self

    def clear(self):
        self._requests.clear()
        return self

    def send(self):
        '''Execute all attached requests and wait for their completion.

        :raise TransportError: when a transfer fails, when waiting on the
            sockets fails or when the multiplexer reports an error.
        :raise PoolTimeout: when no transfer made any progress for
            :attr:`timeout` seconds.
        :return: the list of :attr:`responses`.
        '''
        multi = self.multi
        requests = list(self._requests)
        self._responses = {}
        failures = {}
        start = time.monotonic()
        added = []
        LOGGER.debug('sending %d requests', len(requests))
        try:
            for request in requests:
                handle = request.prepare()
                multi.add_handle(handle)
                added.append(handle)
            active = self._perform(failures)
            idle_since = time.monotonic()
            while active:
                ready = multi.select(self._wait_time(idle_since))
                if ready == -1:
                    raise TransportError('select on the pool sockets failed',
                                         -1)
                elif ready == 0:
                    if (self._timeout and
                            time.monotonic() - idle_since >= self._timeout):
                        raise PoolTimeout(
                            'no progress in %s seconds' % self._timeout, 0)
                    time.sleep(IDLE_WAIT)
                else:
                    idle_since = time.monotonic()
                active = self._perform(failures)
        finally:
            for handle in added:
                multi.remove_handle(handle)

        responses = {}
        for request in requests:
            failure = failures.get(request.handle)
            if failure:
                code, message = failure
                raise TransportError('%s: %s' % (request, message), code,
                                     request=request)
            responses[request] = request.get_response()
        self._responses = responses
        LOGGER.debug('%d requests completed in %.3f seconds',
                     len(requests), time.monotonic() - start)
        return self.responses

    def close(self):
        '''Release the curl multiplexer, a later :meth:`send` creates a
        new one.'''
        if self._multi is not None:
            self._multi.close()
            self._multi = None

    # INTERNALS
    def _wait_time(self, idle_since):
        if not self._timeout:
            return SELECT_SLICE
        left = self._timeout - (time.monotonic() - idle_since)
        return max(min(left, SELECT_SLICE), 0)

    def _perform(self, failures):
        '''Run all runnable transfers and collect the failed ones.

        Return the number of transfers still active.
        '''
        multi = self._multi
        while True:
            try:
                ret, active = multi.perform()
            except pycurl.error as exc:
                code, message = exc.args[:2]
                raise TransportError(message, code) from exc
            if ret != pycurl.E_CALL_MULTI_PERFORM:
                break
        while True:
            queued, _, failed = multi.info_read()
            for handle, code, message in failed:
                failures[handle] = (code, message)
            if not queued:
                break
        return active
