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
"""Server utility functions
"""
import logging

logger = logging.getLogger('jailftp')
queue_logger = logging.getLogger('jailftp.queue')

# Arguments of these verbs never reach the log.
masked_commands = frozenset(('PASS',))


def mask_line(line):
    """Return ``line`` with the argument of a sensitive command hidden."""
    parts = line.split(' ', 1)
    if len(parts) == 2 and parts[0].upper() in masked_commands:
        return '%s ****' % parts[0]
    return line


def split_args(args):
    """Split an argument string on spaces; a blank string has no arguments.
    """
    if not args.strip():
        return []
    return args.split()


class SessionLog(object):
    """Logs the traffic of one control connection under its name."""

    def __init__(self, name, logger=logger):
        self.name = name
        self.logger = logger

    def incoming(self, line):
        self.logger.info('<--%s: %s', self.name, mask_line(line))

    def outgoing(self, line):
        self.logger.info('-->%s: %s', self.name, line)

    def warning(self, msg, *args, **kw):
        self.logger.warning('%s: ' + msg, self.name, *args, **kw)

    def exception(self, msg, *args):
        self.logger.exception('%s: ' + msg, self.name, *args)
