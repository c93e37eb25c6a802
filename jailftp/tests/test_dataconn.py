import socket
import unittest

from jailftp.tests.support import LOCALHOST
from jailftp.tests.support import free_port
from jailftp.tests.support import occupy_ports


class Test_parse_port(unittest.TestCase):
    def _callFUT(self, arg):
        from jailftp.dataconn import parse_port
        return parse_port(arg)

    def test_good(self):
        self.assertEqual(self._callFUT('127,0,0,1,195,80'),
                         ('127.0.0.1', 50000))

    def test_too_few_fields(self):
        self.assertRaises(ValueError, self._callFUT, '127,0,0,1,195')

    def test_out_of_range(self):
        self.assertRaises(ValueError, self._callFUT, '127,0,0,256,1,1')

    def test_not_numbers(self):
        self.assertRaises(ValueError, self._callFUT, 'a,b,c,d,e,f')

    def test_port_zero(self):
        self.assertRaises(ValueError, self._callFUT, '127,0,0,1,0,0')


class Test_parse_eprt(unittest.TestCase):
    def _callFUT(self, arg):
        from jailftp.dataconn import parse_eprt
        return parse_eprt(arg)

    def test_ipv4(self):
        self.assertEqual(self._callFUT('|1|10.0.0.2|6275|'),
                         ('1', '10.0.0.2', 6275))

    def test_other_delimiter(self):
        self.assertEqual(self._callFUT('!1!10.0.0.2!21!'),
                         ('1', '10.0.0.2', 21))

    def test_other_family_returned(self):
        self.assertEqual(self._callFUT('|2|::1|21|'), ('2', '::1', 21))

    def test_bad_ipv4(self):
        self.assertRaises(ValueError, self._callFUT, '|1|10.0.2|21|')

    def test_bad_shape(self):
        self.assertRaises(ValueError, self._callFUT, '|1|10.0.0.2|21')
        self.assertRaises(ValueError, self._callFUT, '|')

    def test_bad_port(self):
        self.assertRaises(ValueError, self._callFUT, '|1|10.0.0.2|0|')
        self.assertRaises(ValueError, self._callFUT, '|1|10.0.0.2|x|')


class Test_format_pasv(unittest.TestCase):
    def test_it(self):
        from jailftp.dataconn import format_pasv
        self.assertEqual(format_pasv('127.0.0.1', 50000),
                         '127,0,0,1,195,80')
        self.assertEqual(format_pasv('10.1.2.3', 21), '10,1,2,3,0,21')


class TestDataChannel(unittest.TestCase):
    def _makeOne(self, sock, timeout=None):
        from jailftp.dataconn import DataChannel
        return DataChannel(sock, timeout)

    def test_verify_interface(self):
        from zope.interface.verify import verifyObject
        from jailftp.interfaces import IDataChannel
        self.assertTrue(verifyObject(IDataChannel,
                                     self._makeOne(DummySock())))

    def test_timeout(self):
        sock = DummySock()
        self._makeOne(sock, 7)
        self.assertEqual(sock.timeout, 7)

    def test_close_closes_files_and_socket(self):
        sock = DummySock()
        inst = self._makeOne(sock)
        reader = inst.reader()
        writer = inst.writer()
        inst.close()
        self.assertTrue(inst.closed)
        self.assertTrue(reader.closed)
        self.assertTrue(writer.closed)
        self.assertTrue(sock.closed)
        self.assertEqual(inst.files, [])

    def test_close_twice(self):
        sock = DummySock()
        inst = self._makeOne(sock)
        inst.close()
        sock.closed = False
        inst.close()
        self.assertFalse(sock.closed)


class TestDataConnector(unittest.TestCase):
    def setUp(self):
        self.socks = []

    def tearDown(self):
        for sock in self.socks:
            sock.close()

    def _makeOne(self, passive_ports=(), data_timeout=5):
        from jailftp.dataconn import DataConnector
        adj = DummyAdj()
        adj.passive_ports = list(passive_ports)
        adj.data_timeout = data_timeout
        return DataConnector(adj, LOCALHOST)

    def _occupy(self, count):
        socks = occupy_ports(count)
        self.socks.extend(socks)
        return [sock.getsockname()[1] for sock in socks]

    def _connect_on_announce(self, announced):
        def announce(port):
            announced.append(port)
            self.socks.append(socket.create_connection((LOCALHOST, port), 5))
        return announce

    def test_passive_skips_busy_ports(self):
        for busy in (0, 1, 3):
            taken = self._occupy(busy)
            port = free_port()
            inst = self._makeOne(taken + [port])
            announced = []
            channel = inst.passive(self._connect_on_announce(announced))
            self.assertNotEqual(channel, None)
            self.assertEqual(announced, [port])
            channel.close()

    def test_passive_all_ports_busy(self):
        inst = self._makeOne(self._occupy(3))
        announced = []
        self.assertEqual(inst.passive(announced.append), None)
        self.assertEqual(announced, [])

    def test_passive_times_out(self):
        inst = self._makeOne([free_port()], data_timeout=0.2)
        announced = []
        self.assertRaises(socket.timeout, inst.passive, announced.append)
        self.assertEqual(len(announced), 1)

    def test_passive_carries_data(self):
        inst = self._makeOne([free_port()])
        channel = inst.passive(self._connect_on_announce([]))
        client = self.socks[-1]
        client.sendall(b'hello')
        client.shutdown(socket.SHUT_WR)
        self.assertEqual(channel.reader().read(), b'hello')
        channel.close()

    def test_active(self):
        listener = occupy_ports(1)[0]
        self.socks.append(listener)
        host, port = listener.getsockname()
        inst = self._makeOne()
        channel = inst.active(host, port)
        conn, addr = listener.accept()
        self.socks.append(conn)
        writer = channel.writer()
        writer.write(b'data')
        writer.flush()
        channel.close()
        self.assertEqual(conn.recv(10), b'data')

    def test_active_refused(self):
        inst = self._makeOne()
        self.assertRaises(socket.error, inst.active, LOCALHOST, free_port())


class DummyAdj(object):
    passive_ports = ()
    data_timeout = 5


class DummyFile(object):
    closed = False

    def close(self):
        self.closed = True


class DummySock(object):
    closed = False
    timeout = None

    def settimeout(self, timeout):
        self.timeout = timeout

    def makefile(self, mode):
        return DummyFile()

    def close(self):
        self.closed = True
