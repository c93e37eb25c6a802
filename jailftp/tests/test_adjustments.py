import os
import unittest


class Test_asbool(unittest.TestCase):
    def _callFUT(self, s):
        from jailftp.adjustments import asbool
        return asbool(s)

    def test_s_is_None(self):
        self.assertEqual(self._callFUT(None), False)

    def test_s_is_True(self):
        self.assertEqual(self._callFUT(True), True)

    def test_s_is_false(self):
        self.assertEqual(self._callFUT('False'), False)

    def test_s_is_yes(self):
        self.assertEqual(self._callFUT('yes'), True)

    def test_s_is_1(self):
        self.assertEqual(self._callFUT(1), True)


class Test_asports(unittest.TestCase):
    def _callFUT(self, value):
        from jailftp.adjustments import asports
        return asports(value)

    def test_int(self):
        self.assertEqual(self._callFUT(2121), [2121])

    def test_string_with_range(self):
        self.assertEqual(self._callFUT('50000-50002, 50010'),
                         [50000, 50001, 50002, 50010])

    def test_list_keeps_order(self):
        self.assertEqual(self._callFUT([3, 1, '2']), [3, 1, 2])

    def test_empty(self):
        self.assertRaises(ValueError, self._callFUT, '')

    def test_out_of_range(self):
        self.assertRaises(ValueError, self._callFUT, '70000')
        self.assertRaises(ValueError, self._callFUT, [0])

    def test_reversed_range(self):
        self.assertRaises(ValueError, self._callFUT, '10-5')

    def test_garbage(self):
        self.assertRaises(ValueError, self._callFUT, 'abc')


class TestAdjustments(unittest.TestCase):
    def _makeOne(self, **kw):
        from jailftp.adjustments import Adjustments
        return Adjustments(**kw)

    def test_defaults(self):
        inst = self._makeOne()
        self.assertEqual(inst.port, 21)
        self.assertEqual(inst.threads, 5)
        self.assertEqual(inst.passive_ports, list(range(50000, 50010)))
        self.assertEqual(inst.root, os.path.abspath(os.curdir))
        self.assertEqual(inst.ident, 'jailftp')
        self.assertTrue(inst.log_socket_errors)
        self.assertFalse(inst.permit_foreign_addresses)

    def test_goodvars(self):
        inst = self._makeOne(
            host='127.0.0.1',
            port='2121',
            passive_ports='6000-6001',
            root='/srv/ftp/../ftp',
            threads='3',
            channel_timeout='20',
            data_timeout='5',
            backlog='10',
            transfer_bytes='1024',
            ident='myftp',
            log_socket_errors='false',
            permit_foreign_addresses='yes',
            )
        self.assertEqual(inst.host, '127.0.0.1')
        self.assertEqual(inst.port, 2121)
        self.assertEqual(inst.passive_ports, [6000, 6001])
        self.assertEqual(inst.root, os.path.abspath('/srv/ftp'))
        self.assertEqual(inst.threads, 3)
        self.assertEqual(inst.channel_timeout, 20)
        self.assertEqual(inst.data_timeout, 5)
        self.assertEqual(inst.backlog, 10)
        self.assertEqual(inst.transfer_bytes, 1024)
        self.assertEqual(inst.ident, 'myftp')
        self.assertEqual(inst.log_socket_errors, False)
        self.assertEqual(inst.permit_foreign_addresses, True)

    def test_badvar(self):
        self.assertRaises(ValueError, self._makeOne, nope=True)

    def test_bad_value(self):
        self.assertRaises(ValueError, self._makeOne, threads='many')


class TestCLI(unittest.TestCase):
    def parse(self, argv):
        from jailftp.adjustments import Adjustments
        return Adjustments.parse_args(argv)

    def test_noargs(self):
        opts, args = self.parse([])
        self.assertDictEqual(
            opts, {'help': False, 'config': None, 'make_user': None})
        self.assertSequenceEqual(args, [])

    def test_help(self):
        opts, args = self.parse(['--help'])
        self.assertTrue(opts['help'])

    def test_positive_boolean(self):
        opts, args = self.parse(['--log-socket-errors'])
        self.assertEqual(opts['log_socket_errors'], 'true')

    def test_negative_boolean(self):
        opts, args = self.parse(['--no-log-socket-errors'])
        self.assertEqual(opts['log_socket_errors'], 'false')

    def test_foreign_addresses_flag(self):
        opts, args = self.parse(['--permit-foreign-addresses'])
        self.assertEqual(opts['permit_foreign_addresses'], 'true')
        opts, args = self.parse(['--no-permit-foreign-addresses'])
        self.assertEqual(opts['permit_foreign_addresses'], 'false')

    def test_values(self):
        opts, args = self.parse([
            '--port=2121', '--passive-ports=1-2', '--root=/srv',
            '--config=ftp.json', '--make-user=bob', 'extra'])
        self.assertEqual(opts['port'], '2121')
        self.assertEqual(opts['passive_ports'], '1-2')
        self.assertEqual(opts['root'], '/srv')
        self.assertEqual(opts['config'], 'ftp.json')
        self.assertEqual(opts['make_user'], 'bob')
        self.assertSequenceEqual(args, ['extra'])

    def test_bad_option(self):
        import getopt
        self.assertRaises(getopt.GetoptError, self.parse, ['--bad'])
