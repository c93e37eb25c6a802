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
"""Command dispatch.

Handlers are the ``cmd_*`` methods of a channel.  The ``command`` decorator
attaches their contract: the argument counts they accept and whether the
client has to be logged in.  A handler returns a Reply, None when it has
already replied on its own, or the QUIT sentinel.
"""
from jailftp.replies import FTPError
from jailftp.replies import make_reply
from jailftp.utilities import split_args


class _Quit(object):

    def __repr__(self):
        return 'QUIT'


# Returned by the QUIT handler; ends the session after the goodbye reply.
QUIT = _Quit()


def command(*argc, login=False):
    """Declare the contract of a ``cmd_*`` handler.

    ``argc`` lists the acceptable numbers of space separated arguments; when
    empty, the argument string is passed through unchecked.
    """
    def decorate(func):
        func.argc = argc
        func.login_required = login
        return func
    return decorate


def parse_line(line):
    """Split a command line into its verb and the remaining argument string.
    """
    parts = line.split(' ', 1)
    if len(parts) == 2:
        return parts[0], parts[1]
    return parts[0], ''


def check_argc(args, argc):
    """Raise FTPError unless ``args`` holds one of the ``argc`` counts."""
    if not argc:
        return
    if len(split_args(args)) not in argc:
        raise FTPError.from_status(
            'ERR_ARGC', ', '.join([str(n) for n in argc]))


class CommandDispatcher(object):
    """Maps upper-cased verbs to the handlers of ``handler``.

    ``handler`` must provide ``authenticated``; handlers marked with
    ``login=True`` are refused until it is true.
    """

    prefix = 'cmd_'

    def __init__(self, handler):
        self.handler = handler
        self.commands = {}
        for name in dir(handler.__class__):
            if name.startswith(self.prefix):
                verb = name[len(self.prefix):].upper()
                self.commands[verb] = getattr(handler, name)

    def verbs(self):
        return sorted(self.commands)

    def lookup(self, verb):
        return self.commands.get(verb.upper())

    def dispatch(self, verb, args):
        """Run the handler for ``verb``.

        Raises FTPError when the handler or its contract rejects the call.
        """
        func = self.lookup(verb)
        if func is None:
            return make_reply('CMD_UNKNOWN', verb.upper())
        if getattr(func, 'login_required', False) and \
                not self.handler.authenticated:
            return make_reply('LOGIN_REQUIRED')
        check_argc(args, getattr(func, 'argc', ()))
        return func(args)
