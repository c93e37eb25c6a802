import contextlib
import os
import shutil
import socket
import tempfile

LOCALHOST = '127.0.0.1'


def tcp_pair():
    """Return two connected TCP sockets on the loopback interface.

    ``socket.socketpair`` gives AF_UNIX sockets on Linux, which have no
    address for passive listeners to bind to.
    """
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    with contextlib.closing(listener):
        listener.bind((LOCALHOST, 0))
        listener.listen(1)
        client = socket.create_connection(listener.getsockname(), 5)
        server, addr = listener.accept()
    server.settimeout(5)
    return server, client


def occupy_ports(count):
    """Bind and listen on ``count`` ephemeral loopback ports."""
    socks = []
    for n in range(count):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.bind((LOCALHOST, 0))
        sock.listen(1)
        socks.append(sock)
    return socks


def free_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    with contextlib.closing(sock):
        sock.bind((LOCALHOST, 0))
        return sock.getsockname()[1]


class TempRoot(object):
    """A scratch directory tree used as the server root."""

    def __init__(self):
        self.path = tempfile.mkdtemp()

    def write(self, name, data=b''):
        path = os.path.join(self.path, *name.split('/'))
        parent = os.path.dirname(path)
        if not os.path.isdir(parent):
            os.makedirs(parent)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def mkdir(self, name):
        path = os.path.join(self.path, *name.split('/'))
        os.makedirs(path)
        return path

    def read(self, name):
        with open(os.path.join(self.path, *name.split('/')), 'rb') as f:
            return f.read()

    def exists(self, name):
        return os.path.lexists(os.path.join(self.path, *name.split('/')))

    def cleanup(self):
        shutil.rmtree(self.path, ignore_errors=True)
