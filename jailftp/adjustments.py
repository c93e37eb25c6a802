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
"""Adjustments are tunable parameters.
"""
import getopt
import os
import socket

truthy = frozenset(('t', 'true', 'y', 'yes', 'on', '1'))


def asbool(s):
    """ Return the boolean value ``True`` if the case-lowered value of string
    input ``s`` is any of ``t``, ``true``, ``y``, ``on``, or ``1``, otherwise
    return the boolean value ``False``.  If ``s`` is the value ``None``,
    return ``False``.  If ``s`` is already one of the boolean values ``True``
    or ``False``, return it."""
    if s is None:
        return False
    if isinstance(s, bool):
        return s
    s = str(s).strip()
    return s.lower() in truthy


def asport(value):
    port = int(value)
    if not 0 < port <= 65535:
        raise ValueError('Port out of range: %r' % value)
    return port


def asports(value):
    """Return a list of ports from ``value``.

    ``value`` may be a single port, an iterable of ports or a string of
    comma separated ports and inclusive ranges, e.g. ``"50000-50009,50020"``.
    Order is preserved; it is the order in which passive ports are tried.
    """
    if isinstance(value, int):
        return [asport(value)]
    if isinstance(value, str):
        items = [item.strip() for item in value.split(',')]
        value = [item for item in items if item]
    ports = []
    for item in value:
        if isinstance(item, str) and '-' in item:
            start, end = item.split('-', 1)
            start, end = asport(start), asport(end)
            if end < start:
                raise ValueError('Bad port range: %r' % item)
            ports.extend(range(start, end + 1))
        else:
            ports.append(asport(item))
    if not ports:
        raise ValueError('At least one passive port is required')
    return ports


def aspath(value):
    return os.path.abspath(os.path.expanduser(str(value)))


class Adjustments(object):
    """This class contains tunable parameters.
    """

    _params = (
        ('host', str),
        ('port', int),
        ('passive_ports', asports),
        ('root', aspath),
        ('threads', int),
        ('channel_timeout', int),
        ('data_timeout', int),
        ('backlog', int),
        ('transfer_bytes', int),
        ('ident', str),
        ('log_socket_errors', asbool),
        ('permit_foreign_addresses', asbool),
        )

    _param_map = dict(_params)

    # hostname or IP address to listen on
    host = '0.0.0.0'

    # TCP port to listen on for command connections
    port = 21

    # Ports tried, in order, when a client asks for a passive data
    # connection.  Concurrent sessions share this list; a port that is busy
    # is skipped.
    passive_ports = list(range(50000, 50010))

    # Real directory that is "/" for every client
    root = os.curdir

    # number of threads available for sessions; each session holds a thread
    # until the client disconnects
    threads = 5

    # Maximum seconds to wait for the next command line before closing the
    # connection.
    channel_timeout = 120

    # Maximum seconds to wait while opening a data connection or moving
    # data over it.
    data_timeout = 30

    # backlog is the value passed to socket.listen().
    backlog = 1024

    # Chunk size, in bytes, used when copying binary file data.
    transfer_bytes = 65536

    # server identity (sent in the welcome banner)
    ident = 'jailftp'

    # Boolean: turn off to not log command connections dying early.
    log_socket_errors = True

    # Boolean: allow PORT and EPRT to name a host other than the client's.
    # Off, the server cannot be used to bounce connections to third
    # parties.
    permit_foreign_addresses = False

    # The socket options to set on receiving a connection.  It is a list of
    # (level, optname, value) tuples.
    socket_options = [
        (socket.SOL_TCP, socket.TCP_NODELAY, 1),
        ]

    def __init__(self, **kw):
        for k, v in kw.items():
            if k not in self._param_map:
                raise ValueError('Unknown adjustment %r' % k)
            setattr(self, k, self._param_map[k](v))
        self.root = aspath(self.root)

    @classmethod
    def parse_args(cls, argv):
        """Pre-parse command line arguments for input into __init__.

        Note that this does not cast values into adjustment types, it just
        creates a dictionary suitable for passing into __init__, where __init__
        does the casting.
        """
        long_opts = ['help', 'config=', 'make-user=']
        for opt, cast in cls._params:
            opt = opt.replace('_', '-')
            if cast is asbool:
                long_opts.append(opt)
                long_opts.append('no-' + opt)
            else:
                long_opts.append(opt + '=')

        kw = {
            'help': False,
            'config': None,
            'make_user': None,
        }

        opts, args = getopt.getopt(argv, '', long_opts)
        for opt, value in opts:
            param = opt.lstrip('-').replace('-', '_')

            if param in ('config', 'make_user'):
                kw[param] = value
            elif param == 'help':
                kw['help'] = True
            elif param.startswith('no_'):
                kw[param[3:]] = 'false'
            elif cls._param_map.get(param) is asbool:
                kw[param] = 'true'
            else:
                kw[param] = value

        return kw, args
