import unittest


class Test_make_reply(unittest.TestCase):
    def _callFUT(self, key, *args):
        from jailftp.replies import make_reply
        return make_reply(key, *args)

    def test_without_args(self):
        reply = self._callFUT('GOODBYE')
        self.assertEqual(reply.code, 221)
        self.assertEqual(str(reply), '221 Goodbye.')

    def test_with_args(self):
        reply = self._callFUT('ERR_RENAME', '/a', '/b', 'File exists')
        self.assertEqual(reply.code, 550)
        self.assertEqual(reply.message,
                         'Could not rename "/a" to "/b": File exists')

    def test_preliminary(self):
        self.assertTrue(self._callFUT('OPEN_CONN', 'Binary', '/a').preliminary)
        self.assertFalse(self._callFUT('TRANS_SUCCESS').preliminary)

    def test_every_single_line_status_is_well_formed(self):
        from jailftp.replies import split_status
        from jailftp.replies import status_messages
        for key, text in status_messages.items():
            if key in ('FEAT_START', 'HELP_START'):
                self.assertEqual(text[3], '-')
                continue
            code, message = split_status(text)
            self.assertTrue(100 <= code < 600, key)


class TestFTPError(unittest.TestCase):
    def _getTargetClass(self):
        from jailftp.replies import FTPError
        return FTPError

    def test_from_status(self):
        inst = self._getTargetClass().from_status('ERR_ARGC', '1')
        self.assertEqual(inst.code, 501)
        self.assertEqual(str(inst), '501 This command requires 1 argument(s).')

    def test_reply(self):
        from jailftp.replies import Reply
        inst = self._getTargetClass()(425, 'nope')
        self.assertEqual(inst.reply, Reply(425, 'nope'))
