import unittest


class Test_serve(unittest.TestCase):
    def _callFUT(self, authenticator, **kw):
        from jailftp import serve
        return serve(authenticator, **kw)

    def test_it(self):
        server = DummyServerFactory()
        authenticator = object()
        result = self._callFUT(authenticator, _server=server, _quiet=True,
                               port='2121')
        self.assertEqual(result, None)
        self.assertEqual(server.ran, True)
        self.assertTrue(server.authenticator is authenticator)
        self.assertEqual(server.kw, {'port': '2121'})


class DummyServerFactory(object):
    ran = False

    def __call__(self, authenticator, **kw):
        self.authenticator = authenticator
        self.kw = kw
        return self

    def run(self):
        self.ran = True
