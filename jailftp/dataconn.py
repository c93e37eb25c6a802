##############################################################################
#
# Copyright (c) 2013 Zope Foundation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################
"""Data connection negotiation.

The server either listens for the client (passive mode, PASV/EPSV) or
connects to an endpoint the client names (active mode, PORT/EPRT).  Either
way the result is a DataChannel carrying exactly one transfer.
"""
import contextlib
import socket

from zope.interface import implementer

from jailftp.interfaces import IDataChannel
from jailftp.utilities import logger


@implementer(IDataChannel)
class DataChannel(object):
    """One established data connection."""

    closed = False

    def __init__(self, sock, timeout=None):
        self.socket = sock
        if timeout is not None:
            sock.settimeout(timeout)
        self.files = []

    def reader(self):
        f = self.socket.makefile('rb')
        self.files.append(f)
        return f

    def writer(self):
        f = self.socket.makefile('wb')
        self.files.append(f)
        return f

    def close(self):
        if self.closed:
            return
        self.closed = True
        try:
            for f in self.files:
                try:
                    f.close()
                except socket.error as e:
                    logger.debug('error closing data stream: %s', e)
        finally:
            self.files = []
            self.socket.close()


class DataConnector(object):
    """Opens data connections for one control connection.

    ``host`` is the local address of the control connection; passive
    listeners bind to it so the client reaches them on the same interface.
    """

    socketmod = socket  # test shim
    logger = logger

    def __init__(self, adj, host):
        self.adj = adj
        self.host = host

    def bind_passive(self):
        """Bind a listener on the first free whitelisted port.

        Other sessions race for the same ports, so a failed bind just moves
        on to the next candidate.  Returns ``(sock, port)``, or
        ``(None, None)`` when every port is taken.
        """
        for port in self.adj.passive_ports:
            sock = self.socketmod.socket(socket.AF_INET, socket.SOCK_STREAM)
            try:
                sock.bind((self.host, port))
            except socket.error as e:
                sock.close()
                self.logger.debug('passive port %d unavailable: %s', port, e)
                continue
            return sock, port
        return None, None

    def passive(self, announce):
        """Listen for one inbound data connection.

        ``announce(port)`` is called once the listener is bound, before
        blocking in accept(); it tells the client where to connect.  Returns
        the DataChannel, or None if no whitelisted port could be bound.
        Raises socket.error (including socket.timeout) if the client never
        connects.
        """
        sock, port = self.bind_passive()
        if sock is None:
            return None
        with contextlib.closing(sock):
            sock.listen(1)
            sock.settimeout(self.adj.data_timeout)
            announce(port)
            conn, addr = sock.accept()
        self.logger.debug('passive data connection from %s:%d', *addr[:2])
        return DataChannel(conn, self.adj.data_timeout)

    def active(self, host, port):
        """Connect to the client's data port.  Raises socket.error."""
        sock = self.socketmod.create_connection(
            (host, port), self.adj.data_timeout)
        return DataChannel(sock, self.adj.data_timeout)


def parse_port(arg):
    """Parse a PORT argument ``h1,h2,h3,h4,p1,p2`` into ``(host, port)``.

    Raises ValueError if it is ill-formed.
    """
    fields = [int(x) for x in arg.strip().split(',')]
    if len(fields) != 6:
        raise ValueError('PORT needs six fields: %r' % arg)
    for x in fields:
        if not 0 <= x <= 255:
            raise ValueError('PORT field out of range: %r' % arg)
    host = '%d.%d.%d.%d' % tuple(fields[:4])
    port = fields[4] * 256 + fields[5]
    if port == 0:
        raise ValueError('PORT names port zero: %r' % arg)
    return host, port


def parse_eprt(arg):
    """Parse an EPRT argument ``<d>family<d>address<d>port<d>``.

    Returns ``(family, host, port)``; the family is returned as given so the
    caller can refuse the ones it does not speak.  Raises ValueError if the
    argument is ill-formed.
    """
    arg = arg.strip()
    if len(arg) < 2:
        raise ValueError('EPRT argument too short: %r' % arg)
    delimiter = arg[0]
    fields = arg.split(delimiter)
    if len(fields) != 5 or fields[0] or fields[4]:
        raise ValueError('EPRT needs three delimited fields: %r' % arg)
    family, host, port = fields[1:4]
    port = int(port)
    if not 0 < port <= 65535:
        raise ValueError('EPRT port out of range: %r' % arg)
    if family == '1':
        octets = [int(x) for x in host.split('.')]
        if len(octets) != 4 or not all(0 <= x <= 255 for x in octets):
            raise ValueError('EPRT address is not IPv4: %r' % arg)
    return family, host, port


def format_pasv(host, port):
    """Return the ``h1,h2,h3,h4,p1,p2`` text of a PASV reply."""
    return '%s,%d,%d' % (host.replace('.', ','), port // 256, port % 256)
