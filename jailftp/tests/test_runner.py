import contextlib
import json
import os
import sys
import tempfile
import unittest

from jailftp import runner


class Test_run(unittest.TestCase):
    def match_output(self, argv, code, regex, **kw):
        argv = ['jailftp-serve'] + argv
        with capture() as captured:
            self.assertEqual(runner.run(argv=argv, **kw), code)
        self.assertRegex(captured.getvalue(), regex)
        captured.close()

    def _write_config(self, data):
        fd, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(fd, 'w') as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        self.addCleanup(os.remove, path)
        return path

    def test_bad(self):
        self.match_output(['--bad-opt'], 1,
                          '^Error: option --bad-opt not recognized')

    def test_help(self):
        self.match_output(['--help'], 0, '^Usage:\n\n    jailftp-serve')

    def test_unexpected_argument(self):
        self.match_output(['extra'], 1, '^Error: Unexpected argument')

    def test_simple_call(self):
        def check_server(authenticator, **kw):
            self.assertTrue(authenticator.lookup('anonymous') is not None)
            self.assertDictEqual(kw, {'port': '2121', 'root': '/srv'})

        argv = ['jailftp-serve', '--port=2121', '--root=/srv']
        self.assertEqual(runner.run(argv=argv, _serve=check_server), 0)

    def test_config(self):
        path = self._write_config({
            'port': 2121,
            'timeout': 10,
            'users': [{'name': 'bob'}],
            })

        def check_server(authenticator, **kw):
            self.assertTrue(authenticator.lookup('bob') is not None)
            self.assertTrue(authenticator.lookup('anonymous') is None)
            self.assertDictEqual(kw, {'port': '21', 'channel_timeout': 10})

        argv = ['jailftp-serve', '--config=%s' % path, '--port=21']
        self.assertEqual(runner.run(argv=argv, _serve=check_server), 0)

    def test_config_without_users(self):
        path = self._write_config({'threads': 2})

        def check_server(authenticator, **kw):
            self.assertEqual(len(authenticator), 1)
            self.assertDictEqual(kw, {'threads': 2})

        argv = ['jailftp-serve', '--config=%s' % path]
        self.assertEqual(runner.run(argv=argv, _serve=check_server), 0)

    def test_config_missing(self):
        self.match_output(['--config=/nonexistent/ftp.json'], 1, '^Error: ')

    def test_config_bad_json(self):
        path = self._write_config('{nope')
        self.match_output(['--config=%s' % path], 1, '^Error: ')

    def test_config_unknown_key(self):
        path = self._write_config({'bogus': 1})
        self.match_output(['--config=%s' % path], 1,
                          "^Error: Unknown configuration key 'bogus'")

    def test_config_duplicate_user(self):
        path = self._write_config({'users': [{'name': 'a'}, {'name': 'a'}]})
        self.match_output(['--config=%s' % path], 1,
                          "^Error: Duplicate user 'a'")

    def test_make_user(self):
        def getpass(prompt):
            self.assertEqual(prompt, 'Password for bob: ')
            return 'secret'

        with capture() as captured:
            result = runner.run(argv=['jailftp-serve', '--make-user=bob'],
                                _getpass=getpass)
        self.assertEqual(result, 0)
        record = json.loads(captured.getvalue())
        from jailftp.config import user_from_record
        user = user_from_record(record)
        self.assertEqual(user.name, 'bob')
        self.assertTrue(user.check_password('secret'))

    def test_make_user_without_password(self):
        with capture() as captured:
            result = runner.run(argv=['jailftp-serve', '--make-user=anon'],
                                _getpass=lambda prompt: '')
        self.assertEqual(result, 0)
        self.assertEqual(json.loads(captured.getvalue()), {'name': 'anon'})


@contextlib.contextmanager
def capture():
    from io import StringIO

    fd = StringIO()
    old_stdout, old_stderr = sys.stdout, sys.stderr
    sys.stdout = fd
    sys.stderr = fd
    try:
        yield fd
    finally:
        sys.stdout, sys.stderr = old_stdout, old_stderr
