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
"""Command line runner.
"""


import getopt
import getpass
import json
import logging
import os
import sys

from jailftp import serve
from jailftp.adjustments import Adjustments
from jailftp.config import ConfigError
from jailftp.config import load_config
from jailftp.config import user_record
from jailftp.users import User
from jailftp.users import UserDirectory
from jailftp.utilities import logger

HELP = """\
Usage:

    {0} [OPTS]

Standard options:

    --help
        Show this information.

    --config=FILE
        Read settings and users from the JSON file FILE.  Options given on
        the command line override the file.

    --make-user=NAME
        Prompt for a password and print the JSON record of user NAME, ready
        to be pasted into the "users" list of a configuration file.  An
        empty password makes a user that needs none.

    --host=ADDR
        Hostname or IP address on which to listen, default is '0.0.0.0',
        which means "all IP addresses on this host".

    --port=PORT
        TCP port on which to listen for commands, default is '21'.

    --passive-ports=LIST
        Ports offered for passive data connections, tried in order.
        Comma separated ports and ranges, default is '50000-50009'.

    --root=DIR
        Directory clients see as "/", default is the current directory.

    --ident=STR
        Server identity used in the welcome banner. Default is 'jailftp'.

Tuning options:

    --threads=INT
        Number of threads serving clients, default is 5.  Each connected
        client holds a thread; further clients wait for one to free up.

    --channel-timeout=INT
        Seconds a client may stay idle between commands, default is 120.

    --data-timeout=INT
        Seconds to wait while opening or using a data connection, default
        is 30.

    --backlog=INT
        Connection backlog for the server. Default is 1024.

    --transfer-bytes=INT
        Chunk size used when copying binary data. Default is 65536.

    --[no-]log-socket-errors
        Toggle whether dropped command connections ought to be logged. On by
        default.

    --[no-]permit-foreign-addresses
        Toggle whether PORT and EPRT may name a host other than the client's
        own. Off by default.

"""


def show_help(stream, name, error=None):  # pragma: no cover
    if error is not None:
        print(f"Error: {error}\n", file=stream)
    print(HELP.format(name), file=stream)


def make_user(name, _getpass=getpass.getpass):
    password = _getpass('Password for %s: ' % name)
    if not password:
        password = None
    return user_record(User.new(name, password))


def run(argv=sys.argv, _serve=serve, _getpass=getpass.getpass):
    """Command line runner."""
    name = os.path.basename(argv[0])

    try:
        kw, args = Adjustments.parse_args(argv[1:])
    except getopt.GetoptError as exc:
        show_help(sys.stderr, name, str(exc))
        return 1

    if kw["help"]:
        show_help(sys.stdout, name)
        return 0

    if args:
        show_help(sys.stderr, name, "Unexpected argument(s): %s" %
                  " ".join(args))
        return 1

    if kw["make_user"] is not None:
        record = make_user(kw["make_user"], _getpass)
        print(json.dumps(record, indent=4))
        return 0

    users = None
    if kw["config"] is not None:
        try:
            settings, users = load_config(kw["config"])
        except (OSError, ConfigError) as exc:
            show_help(sys.stderr, name, str(exc))
            return 1
        settings.update(kw)
        kw = settings

    # These arguments are specific to the runner, not the server itself.
    del kw["config"], kw["help"], kw["make_user"]

    try:
        authenticator = UserDirectory(users)
    except ValueError as exc:
        show_help(sys.stderr, name, str(exc))
        return 1

    # set a default level for the logger only if it hasn't been set explicitly
    # note that this level does not override any parent logger levels,
    # handlers, etc but without it no log messages are emitted by default
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)

    _serve(authenticator, **kw)
    return 0
