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
import itertools
import socket

from jailftp.adjustments import Adjustments
from jailftp.channel import FTPChannel
from jailftp.signals import signals
from jailftp.task import SessionDispatcher
from jailftp.task import SessionTask
from jailftp.users import UserDirectory
from jailftp.utilities import logger


class FTPServer(object):
    """
    if __name__ == '__main__':
        server = FTPServer(UserDirectory())
        server.run()
    """

    channel_class = FTPChannel
    task_class = SessionTask
    socketmod = socket # test shim
    logger = logger

    # Seconds accept() blocks before checking whether close() was called.
    poll_interval = 0.5

    def __init__(self,
                 authenticator=None,
                 _start=True, # test shim
                 _sock=None,  # test shim
                 _dispatcher=None, # test shim
                 **kw # adjustments
                 ):

        if authenticator is None:
            authenticator = UserDirectory()
        self.authenticator = authenticator
        self.adj = Adjustments(**kw)
        if _dispatcher is None:
            _dispatcher = SessionDispatcher()
            _dispatcher.set_thread_count(self.adj.threads)
        self.task_dispatcher = _dispatcher
        if _sock is None:
            _sock = self.socketmod.socket(socket.AF_INET, socket.SOCK_STREAM)
            _sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            _sock.bind((self.adj.host, self.adj.port))
        self.socket = _sock
        self.effective_host, self.effective_port = self.getsockname()[:2]
        self.counter = itertools.count(1)
        self.accepting = False
        self.closing = False
        if _start:
            self.accept_connections()

    def getsockname(self):
        return self.socket.getsockname()

    def accept_connections(self):
        self.accepting = True
        self.socket.listen(self.adj.backlog)
        self.socket.settimeout(self.poll_interval)

    def make_channel(self, conn, addr, name):
        return self.channel_class(conn, addr, self.adj, self.authenticator,
                                  name=name)

    def add_task(self, task):
        self.task_dispatcher.add_task(task)

    def handle_accept(self):
        """Accept one connection and queue a session for it.

        Returns False once the listening socket has been closed.
        """
        try:
            conn, addr = self.socket.accept()
        except socket.timeout:
            return not self.closing
        except socket.error:
            if self.closing:
                return False
            # Linux: On rare occasions we get a bogus socket back from
            # accept.  We don't want the whole server to shut down because
            # of this.
            if self.adj.log_socket_errors:
                self.logger.warning('server accept() threw an exception',
                                    exc_info=True)
            return True
        conn.settimeout(self.adj.channel_timeout)
        for (level, optname, value) in self.adj.socket_options:
            conn.setsockopt(level, optname, value)
        name = 'client #%d' % next(self.counter)
        self.logger.info('%s connected from %s:%d', name, *addr[:2])
        self.add_task(self.task_class(self, conn, addr, name))
        return True

    def run(self):
        signals.send('server_started', self)
        try:
            while self.accepting and self.handle_accept():
                pass
        except (SystemExit, KeyboardInterrupt):
            pass
        finally:
            self.close()
            signals.send('server_finished', self)

    def close(self):
        if self.closing:
            return
        self.closing = True
        self.accepting = False
        try:
            self.socket.close()
        finally:
            self.task_dispatcher.shutdown()
