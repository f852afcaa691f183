'''Tests parsing raw responses'''
import unittest

from curlup import (
    Response, ParseError, CouchDbError, ResourceNotFound, ResourceConflict,
    Unauthorized
)


NOT_FOUND = (b'HTTP/1.1 404 Object Not Found\r\n'
             b'Content-Type: application/json\r\n\r\n'
             b'{"error":"not_found","reason":"missing"}')


class TestResponse(unittest.TestCase):

    def setUp(self):
        self.throws = Response.get_throws_exceptions()

    def tearDown(self):
        Response.set_throws_exceptions(self.throws)

    def test_factory(self):
        r = Response.factory(b'HTTP/1.1 200 OK\r\nFoo: bar\r\n\r\nHELLO')
        self.assertEqual(r.http_version, 'HTTP/1.1')
        self.assertEqual(r.response_code, 200)
        self.assertEqual(r.response_status, 'OK')
        self.assertEqual(len(r.headers), 1)
        self.assertEqual(r.headers['foo'], 'bar')
        self.assertEqual(r.body, b'HELLO')

    def test_factory_string(self):
        r = Response.factory('HTTP/1.0 201 Created\r\n\r\n{"ok":true}')
        self.assertEqual(r.response_code, 201)
        self.assertEqual(r.get_json_decoded_body(), {'ok': True})

    def test_status_with_spaces(self):
        r = Response.factory(NOT_FOUND, throws_exceptions=False)
        self.assertEqual(r.response_status, 'Object Not Found')

    def test_status_without_reason(self):
        r = Response.factory(b'HTTP/1.1 204\r\n\r\n')
        self.assertEqual(r.response_code, 204)
        self.assertEqual(r.response_status, '')
        self.assertEqual(r.body, b'')

    def test_body_keeps_boundaries(self):
        raw = b'HTTP/1.1 200 OK\r\nA: 1\r\n\r\nline1\r\n\r\nline2'
        r = Response.factory(raw)
        self.assertEqual(r.body, b'line1\r\n\r\nline2')

    def test_header_values(self):
        raw = (b'HTTP/1.1 200 OK\r\nETag: "1-abc"\r\n'
               b'Location: http://h:5984/db/doc\r\netag: "2-def"\r\n\r\n')
        r = Response.factory(raw)
        self.assertEqual(r.headers['Location'], 'http://h:5984/db/doc')
        self.assertEqual(r.headers['ETAG'], '"2-def"')

    def test_headers_read_only(self):
        r = Response.factory(b'HTTP/1.1 200 OK\r\nFoo: bar\r\n\r\n')

        def _():
            r.headers['Foo'] = 'x'
        self.assertRaises(TypeError, _)
        self.assertRaises(AttributeError, setattr, r, 'body', b'x')
        self.assertRaises(AttributeError, setattr, r, 'response_code', 500)

    def test_skip_interim_responses(self):
        raw = (b'HTTP/1.1 100 Continue\r\n\r\n'
               b'HTTP/1.1 301 Moved Permanently\r\nLocation: /b\r\n\r\n'
               b'HTTP/1.1 200 OK\r\nFoo: final\r\n\r\nbody')
        r = Response.factory(raw)
        self.assertEqual(r.response_code, 200)
        self.assertEqual(r.headers['foo'], 'final')
        self.assertNotIn('location', r.headers)
        self.assertEqual(r.body, b'body')

    def test_redirect_not_followed(self):
        raw = b'HTTP/1.1 302 Found\r\nLocation: /b\r\n\r\nmoved'
        r = Response.factory(raw)
        self.assertEqual(r.response_code, 302)
        self.assertEqual(r.body, b'moved')

    def test_no_boundary(self):
        self.assertRaises(ParseError, Response.factory,
                          b'HTTP/1.1 200 OK\r\nFoo: bar\r\n')
        self.assertRaises(ParseError, Response.factory, b'')

    def test_bad_status_line(self):
        self.assertRaises(ParseError, Response.factory, b'HTTP/1.1\r\n\r\n')
        self.assertRaises(ParseError, Response.factory,
                          b'HTTP/1.1 abc OK\r\n\r\n')
        self.assertRaises(ParseError, Response.factory,
                          b'HTTP/1.1 600 Weird\r\n\r\n')

    def test_error_raised(self):
        Response.set_throws_exceptions(True)
        with self.assertRaises(CouchDbError) as cm:
            Response.factory(NOT_FOUND)
        exc = cm.exception
        self.assertIsInstance(exc, ResourceNotFound)
        self.assertEqual(exc.error, 'not_found')
        self.assertEqual(exc.reason, 'missing')
        self.assertEqual(exc.code, 404)
        self.assertEqual(str(exc), '404: not_found (missing)')

    def test_error_not_raised(self):
        Response.set_throws_exceptions(False)
        self.assertFalse(Response.get_throws_exceptions())
        r = Response.factory(NOT_FOUND)
        self.assertEqual(r.response_code, 404)
        self.assertEqual(r.get_json_decoded_body()['reason'], 'missing')

    def test_explicit_flag_wins(self):
        Response.set_throws_exceptions(False)
        self.assertRaises(ResourceNotFound, Response.factory, NOT_FOUND,
                          throws_exceptions=True)
        Response.set_throws_exceptions(True)
        r = Response.factory(NOT_FOUND, throws_exceptions=False)
        self.assertEqual(r.response_code, 404)

    def test_set_throws_exceptions_coercion(self):
        Response.set_throws_exceptions('off')
        self.assertFalse(Response.get_throws_exceptions())
        Response.set_throws_exceptions('yes')
        self.assertTrue(Response.get_throws_exceptions())

    def test_error_classes(self):
        raw = (b'HTTP/1.1 409 Conflict\r\n\r\n'
               b'{"error":"conflict","reason":"Document update conflict."}')
        self.assertRaises(ResourceConflict, Response.factory, raw, True)
        raw = (b'HTTP/1.1 401 Unauthorized\r\n\r\n'
               b'{"error":"unauthorized","reason":"Name or password"}')
        self.assertRaises(Unauthorized, Response.factory, raw, True)
        raw = (b'HTTP/1.1 500 Internal Server Error\r\n\r\n'
               b'{"error":"os_process_error","reason":"timeout"}')
        with self.assertRaises(CouchDbError) as cm:
            Response.factory(raw, True)
        self.assertEqual(type(cm.exception), CouchDbError)

    def test_error_body_not_json(self):
        raw = b'HTTP/1.1 500 Internal Server Error\r\n\r\n<html></html>'
        with self.assertRaises(ParseError) as cm:
            Response.factory(raw, True)
        self.assertIsInstance(cm.exception.__cause__, ValueError)
        raw = b'HTTP/1.1 500 Internal Server Error\r\n\r\n{"ok":false}'
        with self.assertRaises(ParseError) as cm:
            Response.factory(raw, True)
        self.assertIsInstance(cm.exception.__cause__, KeyError)
        for envelope in (b'{"error":["x"],"reason":"y"}',
                         b'{"error":"x","reason":{"a":1}}',
                         b'{"error":null,"reason":"y"}',
                         b'["error", "reason"]'):
            raw = b'HTTP/1.1 500 Internal Server Error\r\n\r\n' + envelope
            self.assertRaises(ParseError, Response.factory, raw, True)

    def test_success_ignores_flag(self):
        Response.set_throws_exceptions(True)
        r = Response.factory(b'HTTP/1.1 304 Not Modified\r\n\r\n')
        self.assertEqual(r.response_code, 304)

    def test_couchdb_error_from_body(self):
        exc = CouchDbError(b'{"error":"bad_request","reason":"Bad"}', 400)
        self.assertEqual((exc.error, exc.reason, exc.code), ('bad_request',
                                                             'Bad', 400))
        self.assertEqual(exc.body, b'{"error":"bad_request","reason":"Bad"}')
        self.assertRaises(ParseError, CouchDbError, 'oops', 500)
