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
import threading
import time
from queue import Empty
from queue import Queue

from zope.interface import implementer

from jailftp.interfaces import ITask
from jailftp.utilities import logger
from jailftp.utilities import queue_logger


class SessionDispatcher(object):
    """Services session tasks with a fixed pool of worker threads.

    A session keeps its worker until the client disconnects; sessions
    accepted while every worker is busy wait in the queue.  ``shutdown``
    cancels the sessions being served as well as the waiting ones.
    """
    stop_count = 0 # workers told to stop that have not exited yet
    stopping = False
    logger = logger
    queue_logger = queue_logger

    def __init__(self):
        self.workers = {} # { worker number -> task being serviced or None }
        self.queue = Queue()
        self.lock = threading.Lock()

    def start_new_thread(self, target, args):
        t = threading.Thread(target=target, name='jailftp-%d' % args,
                             args=args)
        t.daemon = True
        t.start()

    def handler_thread(self, worker):
        try:
            while worker in self.workers:
                task = self.queue.get()
                if task is None:
                    break
                with self.lock:
                    if not self.stopping:
                        self.workers[worker] = task
                if self.workers.get(worker) is not task:
                    task.cancel()
                    continue
                try:
                    task.service()
                except Exception:
                    self.logger.exception('Exception when servicing %r', task)
                finally:
                    with self.lock:
                        if worker in self.workers:
                            self.workers[worker] = None
        finally:
            with self.lock:
                self.stop_count -= 1
                self.workers.pop(worker, None)

    def set_thread_count(self, count):
        with self.lock:
            running = len(self.workers) - self.stop_count
            worker = 0
            while running < count:
                while worker in self.workers:
                    worker += 1
                self.workers[worker] = None
                running += 1
                self.start_new_thread(self.handler_thread, (worker,))
            if running > count:
                excess = running - count
                self.stop_count += excess
                for n in range(excess):
                    self.queue.put(None)

    def active_tasks(self):
        """Return the tasks workers are servicing right now."""
        with self.lock:
            return [t for t in self.workers.values() if t is not None]

    def add_task(self, task):
        depth = self.queue.qsize()
        if depth > 0:
            self.queue_logger.warning('%d session(s) waiting for a worker',
                                      depth)
        try:
            task.defer()
            self.queue.put(task)
        except Exception:
            task.cancel()
            raise

    def cancel_queued(self):
        while True:
            try:
                task = self.queue.get_nowait()
            except Empty:
                return
            if task is not None:
                task.cancel()

    def shutdown(self, cancel_pending=True, timeout=5):
        """Stop every worker.

        With ``cancel_pending`` the sessions in progress are interrupted and
        queued ones are cancelled without being serviced; otherwise workers
        finish what they are doing first.  Returns ``cancel_pending``.
        """
        with self.lock:
            self.stopping = cancel_pending
            active = [t for t in self.workers.values() if t is not None]
        self.set_thread_count(0)
        if cancel_pending:
            for task in active:
                task.cancel()
        expiration = time.time() + timeout
        while self.workers:
            if time.time() >= expiration:
                self.logger.warning('%d worker(s) still running',
                                    len(self.workers))
                break
            time.sleep(0.05)
        if cancel_pending:
            self.cancel_queued()
            return True
        return False


@implementer(ITask)
class SessionTask(object):
    """Serves one accepted command connection in a worker thread."""

    def __init__(self, server, conn, addr, name):
        self.server = server
        self.conn = conn
        self.addr = addr
        self.name = name
        self.channel = None

    def service(self):
        self.channel = self.server.make_channel(self.conn, self.addr,
                                                self.name)
        self.channel.run()

    def cancel(self):
        """Drop the connection; a session in progress is interrupted and
        cleans up in its own worker."""
        if self.channel is not None:
            self.channel.interrupt()
        else:
            self.conn.close()

    def defer(self):
        pass

    def __repr__(self):
        return '<SessionTask %s>' % self.name
