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
"""Per-connection session state.
"""
from jailftp.vpath import ROOT
from jailftp.vpath import VirtualPath

ASCII = 'A'
BINARY = 'I'

type_map = {ASCII: 'ASCII', BINARY: 'Binary'}


class SessionState(object):
    """Everything one client session remembers between commands.

    A state object belongs to the thread serving its connection and is
    never shared, so it needs no locking.
    """

    def __init__(self, root):
        self.root = root
        self.user = None
        self.authenticated = False
        self.cwd = ROOT
        self.transfer_type = BINARY
        self.rename_from = None
        self.data_channel = None

    @property
    def username(self):
        if self.user is None:
            return ''
        return self.user.name

    def login(self, user, authenticated):
        self.user = user
        self.authenticated = authenticated

    def logout(self):
        self.user = None
        self.authenticated = False

    def virtual_path(self, text):
        """Interpret client supplied ``text`` against the working directory.
        """
        path = VirtualPath.of(text)
        if path.absolute:
            return path
        return self.cwd.resolve(path)

    def real_path(self, path):
        """Return the filesystem path of the VirtualPath ``path``."""
        return path.to_path(self.root)

    def set_data_channel(self, channel):
        self.close_data_channel()
        self.data_channel = channel

    def has_data_channel(self):
        channel = self.data_channel
        return channel is not None and not channel.closed

    def close_data_channel(self):
        channel = self.data_channel
        self.data_channel = None
        if channel is not None:
            channel.close()
