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
"""FTP control channel.

An FTPChannel serves one client for the lifetime of its command connection:
it reads command lines, dispatches them to the ``cmd_*`` handlers below and
writes the replies back.  File contents and listings travel over a separate
data connection negotiated with PASV, EPSV, PORT or EPRT.
"""
import os
import socket

from jailftp.dataconn import DataConnector
from jailftp.dataconn import format_pasv
from jailftp.dataconn import parse_eprt
from jailftp.dataconn import parse_port
from jailftp.dispatcher import QUIT
from jailftp.dispatcher import CommandDispatcher
from jailftp.dispatcher import command
from jailftp.dispatcher import parse_line
from jailftp.replies import FTPError
from jailftp.replies import Reply
from jailftp.replies import make_reply
from jailftp.replies import status_messages
from jailftp.session import ASCII
from jailftp.session import BINARY
from jailftp.session import SessionState
from jailftp.session import type_map
from jailftp.signals import signals
from jailftp.transfer import format_mtime
from jailftp.transfer import list_entries
from jailftp.transfer import list_names
from jailftp.transfer import receive_file
from jailftp.transfer import send_file
from jailftp.transfer import send_lines
from jailftp.utilities import SessionLog
from jailftp.utilities import split_args


class FTPChannel(object):
    """The FTP Channel represents a connection to a particular
       client. We can therefore store information here."""

    dispatcher_class = CommandDispatcher
    connector_class = DataConnector
    state_class = SessionState

    # Define the type of directory listing this server is returning
    system = ('UNIX', 'L8')

    # Advertised by FEAT
    features = ('EPSV', 'EPRT', 'SIZE', 'MDTM')

    encoding = 'ascii'

    closed = False

    def __init__(self, conn, addr, adj, authenticator, name=None):
        self.conn = conn
        self.addr = addr
        self.adj = adj
        self.authenticator = authenticator
        if name is None:
            name = '%s:%s' % tuple(addr[:2])
        self.name = name
        self.log = SessionLog(name)
        self.state = self.state_class(adj.root)
        self.dispatcher = self.dispatcher_class(self)
        self.connector = self.connector_class(adj, conn.getsockname()[0])
        self.reader = conn.makefile('rb')
        self.writer = conn.makefile('wb')

    @property
    def authenticated(self):
        return self.state.authenticated

    def write_line(self, line):
        self.writer.write(line.encode(self.encoding, 'replace') + b'\r\n')
        self.writer.flush()
        self.log.outgoing(line)

    def reply(self, code, *args):
        """Send a reply, given as a Reply or a ``status_messages`` key."""
        if not isinstance(code, Reply):
            code = make_reply(code, *args)
        self.write_line(str(code))

    def read_line(self):
        """Return the next command line, or None once the client is gone."""
        line = self.reader.readline()
        if not line:
            return None
        line = line.decode(self.encoding, 'replace')
        if line.endswith('\n'):
            line = line[:-1]
        if line.endswith('\r'):
            line = line[:-1]
        return line

    def handle_line(self, line):
        """Process one command line and return its result.

        The result is a Reply to send, None if the handler already replied,
        or QUIT.
        """
        self.log.incoming(line)
        verb, args = parse_line(line)
        signals.send('command_received', self, verb=verb.upper(), args=args)
        try:
            return self.dispatcher.dispatch(verb, args)
        except FTPError as e:
            return e.reply

    def run(self):
        """Serve the client until it quits, times out or goes away."""
        signals.send('session_started', self)
        try:
            self.reply('SERVER_READY', self.adj.ident)
            while True:
                line = self.read_line()
                if line is None:
                    break
                result = self.handle_line(line)
                if result is QUIT:
                    self.reply('GOODBYE')
                    break
                if result is not None:
                    self.reply(result)
        except socket.timeout:
            self.notify('TIMEOUT')
        except socket.error as e:
            if self.adj.log_socket_errors:
                self.log.warning('connection error: %s', e)
            self.notify('FATAL_ERROR')
        except Exception as e:
            self.log.exception('uncaptured python exception, closing channel')
            self.notify('INTERNAL_ERROR', '%s: %s' % (type(e).__name__, e))
        finally:
            self.close()
            signals.send('session_finished', self)

    def notify(self, code, *args):
        """Best-effort reply on a connection that is being dropped."""
        try:
            self.reply(code, *args)
        except socket.error as e:
            self.log.logger.debug('%s: could not send %s: %s',
                                  self.name, code, e)

    def interrupt(self):
        """Wake a worker blocked reading this connection; ``run`` then sees
        end of input and tears the session down itself."""
        try:
            self.conn.shutdown(socket.SHUT_RDWR)
        except socket.error as e:
            self.log.logger.debug('%s: shutdown failed: %s', self.name, e)

    def close(self):
        """Release the writer, the reader, the data channel and the socket,
        in that order."""
        if self.closed:
            return
        self.closed = True
        try:
            self.writer.close()
        finally:
            try:
                self.reader.close()
            finally:
                try:
                    self.state.close_data_channel()
                finally:
                    self.conn.close()

    ############################################################

    def _path(self, args):
        """Return the VirtualPath and the real path named by ``args``."""
        if not args.strip():
            raise FTPError.from_status('ERR_ARGS')
        path = self._virtual_path(args)
        return path, self.state.real_path(path)

    def _virtual_path(self, args):
        # NUL cannot appear in a filesystem name
        if '\0' in args:
            raise FTPError.from_status('ERR_ARGS')
        return self.state.virtual_path(args)

    def _data_channel(self):
        if not self.state.has_data_channel():
            raise FTPError.from_status('DATA_NOT_OPEN')
        return self.state.data_channel

    def _transfer(self, move):
        """Run ``move(data_channel)``; the data channel is spent afterwards.
        """
        channel = self.state.data_channel
        try:
            move(channel)
        except OSError as e:
            self.log.warning('transfer aborted: %s', e)
            return make_reply('TRANSFER_ABORTED')
        finally:
            self.state.close_data_channel()
        return make_reply('TRANS_SUCCESS')

    def _passive(self, announce):
        self.state.close_data_channel()
        try:
            channel = self.connector.passive(announce)
        except socket.error as e:
            self.log.warning('passive data connection failed: %s', e)
            return make_reply('NO_DATA_CONN')
        if channel is None:
            self.log.warning('no passive port available')
            return make_reply('NO_DATA_CONN')
        self.state.set_data_channel(channel)
        return None

    def _active(self, host, port):
        if host != self.addr[0] and not self.adj.permit_foreign_addresses:
            self.log.warning('refused data connection to %s:%d', host, port)
            return make_reply('ERR_FOREIGN', host, port)
        try:
            channel = self.connector.active(host, port)
        except socket.error as e:
            self.log.warning('active data connection to %s:%d failed: %s',
                             host, port, e)
            return make_reply('NO_DATA_CONN')
        self.state.set_data_channel(channel)
        return make_reply('ACTIVE_OK', host, port)

    ############################################################

    @command()
    def cmd_user(self, args):
        name = args.strip()
        if not name:
            return make_reply('ERR_ARGS')
        self.state.logout()
        user = self.authenticator.lookup(name)
        if user is None:
            return make_reply('LOGIN_UNKNOWN', name)
        if user.has_password():
            self.state.login(user, False)
            return make_reply('PASS_REQUIRED', name)
        self.state.login(user, True)
        return make_reply('LOGIN_SUCCESS', name)

    @command()
    def cmd_pass(self, args):
        user = self.state.user
        if user is None:
            return make_reply('LOGIN_NO_USER')
        if not user.check_password(args):
            self.state.authenticated = False
            return make_reply('LOGIN_MISMATCH')
        self.state.login(user, True)
        return make_reply('LOGIN_SUCCESS', user.name)

    @command(1, 2)
    def cmd_type(self, args):
        # ascii (non-print), image, local 8
        params = [p.upper() for p in split_args(args)]
        if params in (['A'], ['A', 'N']):
            transfer_type = ASCII
        elif params in (['I'], ['L', '8']):
            transfer_type = BINARY
        else:
            return make_reply('ERR_TYPE', args.strip())
        self.state.transfer_type = transfer_type
        return make_reply('TYPE_SET_OK', type_map[transfer_type])

    @command(1)
    def cmd_stru(self, args):
        if args.strip().upper() == 'F':
            return make_reply('STRU_OK')
        return make_reply('STRU_UNKNOWN')

    @command(1)
    def cmd_mode(self, args):
        if args.strip().upper() == 'S':
            return make_reply('MODE_OK')
        return make_reply('MODE_UNKNOWN')

    @command(0)
    def cmd_pwd(self, args):
        return make_reply('ALREADY_CURRENT', self.state.cwd)

    @command()
    def cmd_cwd(self, args):
        path, real = self._path(args)
        if not os.path.isdir(real):
            return make_reply('ERR_NO_DIR', path)
        self.state.cwd = path
        return make_reply('SUCCESS_250', 'CWD')

    @command(0)
    def cmd_cdup(self, args):
        parent = self.state.cwd.parent
        if parent is None:
            return make_reply('ERR_IS_ROOT', self.state.cwd)
        self.state.cwd = parent
        return make_reply('SUCCESS_250', 'CDUP')

    @command(login=True)
    def cmd_list(self, args):
        return self._list(args, list_entries)

    @command(login=True)
    def cmd_nlst(self, args):
        return self._list(args, list_names)

    def _list(self, args, lister):
        # Options meant for /bin/ls, such as "-la", are ignored.
        words = [w for w in args.split(' ') if not w.startswith('-')]
        args = ' '.join(words)
        if args.strip():
            path = self._virtual_path(args)
        else:
            path = self.state.cwd
        real = self.state.real_path(path)
        if not os.path.exists(real):
            return make_reply('ERR_NO_DIR_FILE', path)
        if not os.path.isdir(real):
            return make_reply('ERR_NO_DIR', path)
        self._data_channel()
        try:
            lines = list(lister(real))
        except OSError as e:
            return make_reply('ERR_NO_LIST', e.strerror)
        self.reply('OPEN_DATA_CONN', type_map[self.state.transfer_type])
        return self._transfer(lambda dc: send_lines(lines, dc.writer()))

    @command(login=True)
    def cmd_retr(self, args):
        path, real = self._path(args)
        self._data_channel()
        if not os.path.isfile(real):
            return make_reply('ERR_IS_NOT_FILE', path)
        try:
            f = open(real, 'rb')
        except OSError as e:
            return make_reply('ERR_OPEN_READ', e.strerror)
        transfer_type = self.state.transfer_type
        with f:
            self.reply('OPEN_CONN', type_map[transfer_type], path)
            return self._transfer(
                lambda dc: send_file(f, dc.writer(), transfer_type,
                                     self.adj.transfer_bytes))

    @command(login=True)
    def cmd_stor(self, args):
        path, real = self._path(args)
        self._data_channel()
        if os.path.isdir(real):
            return make_reply('ERR_IS_NOT_FILE', path)
        try:
            f = open(real, 'wb')
        except OSError as e:
            return make_reply('ERR_OPEN_WRITE', e.strerror)
        transfer_type = self.state.transfer_type
        with f:
            self.reply('OPEN_CONN', type_map[transfer_type], path)
            return self._transfer(
                lambda dc: receive_file(dc.reader(), f, transfer_type,
                                        self.adj.transfer_bytes))

    @command(login=True)
    def cmd_rnfr(self, args):
        path, real = self._path(args)
        if not os.path.lexists(real):
            self.state.rename_from = None
            return make_reply('ERR_NO_FILE', path)
        self.state.rename_from = path
        return make_reply('READY_FOR_DEST')

    @command(login=True)
    def cmd_rnto(self, args):
        source = self.state.rename_from
        self.state.rename_from = None
        if source is None:
            return make_reply('BAD_SEQUENCE')
        path, real = self._path(args)
        if os.path.lexists(real):
            return make_reply('ERR_RENAME', source, path, 'File exists')
        try:
            os.rename(self.state.real_path(source), real)
        except OSError as e:
            return make_reply('ERR_RENAME', source, path, e.strerror)
        return make_reply('SUCCESS_250', 'RNTO')

    @command(login=True)
    def cmd_dele(self, args):
        path, real = self._path(args)
        try:
            os.remove(real)
        except OSError as e:
            return make_reply('ERR_DELETE_FILE', e.strerror)
        return make_reply('SUCCESS_250', 'DELE')

    @command(login=True)
    def cmd_size(self, args):
        path, real = self._path(args)
        if not os.path.isfile(real):
            return make_reply('ERR_NO_FILE', path)
        try:
            size = os.path.getsize(real)
        except OSError:
            return make_reply('ERR_NO_FILE', path)
        return make_reply('FILE_SIZE', size)

    @command(login=True)
    def cmd_mdtm(self, args):
        path, real = self._path(args)
        if not os.path.isfile(real):
            return make_reply('ERR_NO_FILE', path)
        try:
            mtime = os.path.getmtime(real)
        except OSError:
            return make_reply('ERR_NO_FILE', path)
        return make_reply('FILE_DATE', format_mtime(mtime))

    @command(0)
    def cmd_pasv(self, args):
        host = self.connector.host

        def announce(port):
            self.reply('PASV_MODE_MSG', format_pasv(host, port))

        return self._passive(announce)

    @command(0, 1)
    def cmd_epsv(self, args):
        if args.strip() not in ('', '1'):
            return make_reply('NET_PROTO')

        def announce(port):
            self.reply('EPSV_MODE_MSG', port)

        return self._passive(announce)

    @command(1)
    def cmd_port(self, args):
        self.state.close_data_channel()
        try:
            host, port = parse_port(args)
        except ValueError:
            return make_reply('ERR_ADDRESS', args.strip())
        return self._active(host, port)

    @command(1)
    def cmd_eprt(self, args):
        self.state.close_data_channel()
        try:
            family, host, port = parse_eprt(args)
        except ValueError:
            return make_reply('ERR_ADDRESS', args.strip())
        if family != '1':
            return make_reply('NET_PROTO')
        return self._active(host, port)

    @command(0)
    def cmd_quit(self, args):
        return QUIT

    @command(0)
    def cmd_syst(self, args):
        return make_reply('SERVER_TYPE', *self.system)

    @command(0)
    def cmd_feat(self, args):
        self.write_line(status_messages['FEAT_START'])
        for feature in self.features:
            self.write_line(' ' + feature)
        return make_reply('FEAT_END')

    @command(0)
    def cmd_noop(self, args):
        return make_reply('SUCCESS_200', 'NOOP')

    @command()
    def cmd_help(self, args):
        self.write_line(status_messages['HELP_START'])
        self.write_line(' ' + ' '.join(self.dispatcher.verbs()))
        return make_reply('HELP_END')
