'''Tests the Request against the fake CouchDB server'''
import pycurl

from curlup import Request, Response, InvalidArgument, TransportError
from curlup import ResourceNotFound, ParseError
from curlup.http import JSON_CONTENT_TYPE

from tests.fakecouch import FakeCouchTestCase, SLOW_DELAY


class TestRequestOptions(FakeCouchTestCase):

    def test_defaults(self):
        request = Request()
        self.assertEqual(request.method, None)
        self.assertEqual(request.uri, None)
        self.assertEqual(request.timeout, 10)
        self.assertEqual(request.query_data, {})
        self.assertEqual(request.max_redirects, 3)
        self.assertEqual(request.headers['Expect'], '')

    def test_options(self):
        request = Request(method='post', uri='http://a.com/b',
                          body='x', timeout='20', bla=3)
        self.assertEqual(request.method, 'POST')
        self.assertEqual(request.uri, 'http://a.com/b')
        self.assertEqual(request.body, b'x')
        self.assertEqual(request.timeout, 20)

    def test_invalid_method(self):
        self.assertRaises(InvalidArgument, Request, method='PATCH')

    def test_timeout_coercion(self):
        request = Request()
        for bad in (-5, 'abc', None, 1.5):
            request.timeout = bad
            self.assertEqual(request.timeout, 0)
        request.timeout = 3.0
        self.assertEqual(request.timeout, 3)

    def test_full_uri(self):
        request = Request(uri='http://a.com/b')
        self.assertEqual(request.full_uri, 'http://a.com/b')
        request.add_query_data('key', '"x y"').add_query_data('stale', True)
        self.assertEqual(request.full_uri,
                         'http://a.com/b?key=%22x+y%22&stale=true')

    def test_fluent(self):
        request = Request(method='PUT', uri='http://a.com/')
        self.assertEqual(request.add_header('X-A', '1'), request)
        self.assertEqual(request.set_json_decoded_body([1]), request)
        self.assertEqual(request.headers['content-type'], JSON_CONTENT_TYPE)
        self.assertEqual(request.get_json_decoded_body(), [1])

    def test_curl_options(self):
        request = Request(method='HEAD', uri='http://a.com/')
        options = request.curl_options()
        self.assertEqual(options[pycurl.NOBODY], 1)
        self.assertNotIn(pycurl.CUSTOMREQUEST, options)
        self.assertNotIn(pycurl.POSTFIELDS, options)
        self.assertIn('Expect:', options[pycurl.HTTPHEADER])
        self.assertEqual(options[pycurl.MAXREDIRS], 3)
        request = Request(method='POST', uri='http://a.com/', body='a=1')
        options = request.curl_options()
        self.assertEqual(options[pycurl.CUSTOMREQUEST], 'POST')
        self.assertEqual(options[pycurl.POSTFIELDS], b'a=1')

    def test_empty_body_not_sent(self):
        request = Request(method='POST', uri='http://a.com/')
        self.assertNotIn(pycurl.POSTFIELDS, request.curl_options())

    def test_missing_uri_or_method(self):
        self.assertRaises(InvalidArgument, Request(method='GET').send)
        self.assertRaises(InvalidArgument, Request(uri=self.uri).send)


class TestRequestSend(FakeCouchTestCase):

    def test_send(self):
        request = Request(method='GET', uri=self.uri + '/_all_dbs')
        response = request.send()
        self.assertIsInstance(response, Response)
        self.assertEqual(response.response_code, 200)
        self.assertEqual(response.response_status, 'OK')
        self.assertEqual(response.http_version, 'HTTP/1.1')
        self.assertEqual(response.headers['x-couch-fake'], 'yes')
        self.assertEqual(response.get_json_decoded_body(),
                         ['_users', 'books'])
        request.close()

    def test_send_and_decode(self):
        request = Request(method='GET', uri=self.uri + '/')
        self.assertEqual(request.send_and_decode()['couchdb'], 'Welcome')

    def test_send_twice(self):
        request = Request(method='GET', uri=self.uri + '/_uuids')
        request.add_query_data('count', 2)
        first = request.send_and_decode()
        second = request.send_and_decode()
        self.assertEqual(first, second)
        self.assertEqual(len(first['uuids']), 2)

    def test_echo(self):
        request = Request(method='PUT', uri=self.uri + '/echo/doc')
        request.add_query_data('rev', '1-abc')
        request.set_json_decoded_body({'title': 'Dune'})
        data = request.send_and_decode()
        self.assertEqual(data['method'], 'PUT')
        self.assertEqual(data['path'], '/echo/doc')
        self.assertEqual(data['query'], {'rev': '1-abc'})
        self.assertEqual(data['body'], '{"title": "Dune"}')
        headers = dict((k.lower(), v) for k, v in data['headers'].items())
        self.assertEqual(headers['content-type'], JSON_CONTENT_TYPE)
        self.assertNotIn('expect', headers)

    def test_head(self):
        response = Request(method='HEAD', uri=self.uri + '/').send()
        self.assertEqual(response.response_code, 200)
        self.assertEqual(response.body, b'')

    def test_copy(self):
        data = Request(method='COPY', uri=self.uri + '/echo/a').add_header(
            'Destination', 'b').send_and_decode()
        self.assertEqual(data['method'], 'COPY')

    def test_follow_redirect(self):
        response = Request(method='GET', uri=self.uri + '/redirect').send()
        self.assertEqual(response.response_code, 200)
        self.assertEqual(response.get_json_decoded_body(),
                         ['_users', 'books'])

    def test_couchdb_error(self):
        request = Request(method='GET', uri=self.uri + '/missing',
                          throws_exceptions=True)
        with self.assertRaises(ResourceNotFound) as cm:
            request.send()
        self.assertEqual(cm.exception.status, 404)
        self.assertEqual(cm.exception.error, 'not_found')
        self.assertEqual(cm.exception.reason, 'missing')

    def test_couchdb_error_not_raised(self):
        request = Request(method='GET', uri=self.uri + '/missing',
                          throws_exceptions=False)
        response = request.send()
        self.assertEqual(response.response_code, 404)
        self.assertEqual(response.get_json_decoded_body()['error'],
                         'not_found')

    def test_connection_refused(self):
        request = Request(method='GET', uri='http://127.0.0.1:1/')
        with self.assertRaises(TransportError) as cm:
            request.send()
        self.assertEqual(cm.exception.code, pycurl.E_COULDNT_CONNECT)
        self.assertEqual(cm.exception.request, request)

    def test_timeout(self):
        request = Request(method='GET', uri=self.uri + '/slow', timeout=1)
        self.assertTrue(SLOW_DELAY > 1)
        with self.assertRaises(TransportError) as cm:
            request.send()
        self.assertEqual(cm.exception.code, pycurl.E_OPERATION_TIMEDOUT)

    def test_error_body_not_json(self):
        request = Request(method='GET', uri=self.uri + '/broken',
                          throws_exceptions=True)
        self.assertRaises(ParseError, request.send)
        request.throws_exceptions = False
        response = request.send()
        self.assertEqual(response.response_code, 500)
        self.assertEqual(response.body, b'<html>Internal error</html>')
