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
"""Named signals sent by the server.

Receivers connect with ``signals.get(name).connect(receiver)``.
"""
from typing import Optional

import blinker


class SignalsRegistry:
    """Registry for signals used by jailftp."""

    def __init__(self):
        self._signals = dict()

    def create(self, name: str, doc: Optional[str] = None):
        """Create a named signal."""
        self._signals[name] = blinker.NamedSignal(name, doc=doc)

    def get(self, name: str):
        """Retrieve a signal by its name."""
        if name not in self._signals:
            raise ValueError(f"Signal named '{name}' does not exist")

        return self._signals[name]

    def send(self, name: str, *args, **kwargs):
        return self.get(name).send(*args, **kwargs)


signals = SignalsRegistry()

signals.create(
    "server_started",
    doc="""\
Sent by the accept loop when a server starts accepting connections.

Signal handlers receive:

- `server` :class:`FTPServer` being started.
""",
)

signals.create(
    "server_finished",
    doc="""\
Sent by the accept loop when a server stops accepting connections.

Signal handlers receive:

- `server` :class:`FTPServer` stopping.
""",
)

signals.create(
    "session_started",
    doc="""\
Sent by a worker thread when a client session begins.

Signal handlers receive:

- `channel` :class:`FTPChannel` serving the client.
""",
)

signals.create(
    "session_finished",
    doc="""\
Sent by a worker thread once a client session has been torn down.

Signal handlers receive:

- `channel` :class:`FTPChannel` that served the client.
""",
)

signals.create(
    "command_received",
    doc="""\
Sent by a worker thread for every command line read from a client.

Signal handlers receive:

- `channel` :class:`FTPChannel` that read the line.
- `verb` the upper-cased command verb.
- `args` the raw argument string.
""",
)
