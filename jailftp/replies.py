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
"""FTP replies and protocol errors.
"""
from collections import namedtuple

status_messages = {
    'OPEN_DATA_CONN'   : '150 Opening %s mode data connection for file list.',
    'OPEN_CONN'        : '150 Opening %s mode data connection for %s.',
    'SUCCESS_200'      : '200 %s command successful.',
    'TYPE_SET_OK'      : '200 Type set to %s.',
    'STRU_OK'          : '200 STRU F Ok.',
    'MODE_OK'          : '200 MODE S Ok.',
    'ACTIVE_OK'        : '200 Connected to %s:%d, waiting for transfer.',
    'FEAT_START'       : '211-Features:',
    'FEAT_END'         : '211 End',
    'FILE_DATE'        : '213 %s',
    'FILE_SIZE'        : '213 %d',
    'HELP_START'       : '214-The following commands are recognized:',
    'HELP_END'         : '214 Help done.',
    'SERVER_TYPE'      : '215 %s Type: %s',
    'SERVER_READY'     : '220 %s FTP server ready.',
    'GOODBYE'          : '221 Goodbye.',
    'TRANS_SUCCESS'    : '226 Transfer complete, closing data connection.',
    'PASV_MODE_MSG'    : '227 Entering Passive Mode (%s).',
    'EPSV_MODE_MSG'    : '229 Entering Extended Passive Mode (|||%d|).',
    'LOGIN_SUCCESS'    : '230 Logged in as %s.',
    'SUCCESS_250'      : '250 %s command successful.',
    'ALREADY_CURRENT'  : '257 "%s" is the current directory.',
    'PASS_REQUIRED'    : '331 Password required for %s.',
    'READY_FOR_DEST'   : '350 File exists, ready for destination.',
    'TIMEOUT'          : '421 Connection timed out.',
    'FATAL_ERROR'      : '421 Fatal connection error.',
    'NO_DATA_CONN'     : "425 Can't open data connection.",
    'DATA_NOT_OPEN'    : '425 Data connection not established, use PASV '
                         'or PORT first.',
    'TRANSFER_ABORTED' : '426 Connection closed; transfer aborted.',
    'INTERNAL_ERROR'   : '500 Internal error: %s',
    'ERR_ARGS'         : '501 Bad command arguments.',
    'ERR_ARGC'         : '501 This command requires %s argument(s).',
    'ERR_TYPE'         : '501 Unrecognized type %s.',
    'ERR_ADDRESS'      : '501 Ill-formed address: %s',
    'ERR_FOREIGN'      : '501 Rejected data connection to foreign address '
                         '%s:%d.',
    'CMD_UNKNOWN'      : "502 '%s': command not implemented.",
    'BAD_SEQUENCE'     : '503 Bad sequence of commands, call RNFR first.',
    'MODE_UNKNOWN'     : '504 Unimplemented MODE type.',
    'STRU_UNKNOWN'     : '504 Unimplemented STRU type.',
    'NET_PROTO'        : '522 Network protocol not supported, use (1).',
    'LOGIN_REQUIRED'   : '530 Please log in with USER and PASS.',
    'LOGIN_UNKNOWN'    : '530 User %s is not recognized.',
    'LOGIN_NO_USER'    : '530 Use USER before PASS.',
    'LOGIN_MISMATCH'   : '530 The username and password do not match.',
    'ERR_NO_DIR'       : '550 "%s": No such directory.',
    'ERR_NO_FILE'      : '550 "%s": No such file.',
    'ERR_NO_DIR_FILE'  : '550 "%s": No such file or directory.',
    'ERR_IS_NOT_FILE'  : '550 "%s": Is not a file.',
    'ERR_IS_ROOT'      : '550 "%s": Current directory has no parent.',
    'ERR_OPEN_READ'    : '550 Could not open file for reading: %s',
    'ERR_OPEN_WRITE'   : '550 Could not open file for writing: %s',
    'ERR_NO_LIST'      : '550 Could not list directory: %s',
    'ERR_DELETE_FILE'  : '550 Error deleting file: %s',
    'ERR_RENAME'       : '550 Could not rename "%s" to "%s": %s',
    }


class Reply(namedtuple('Reply', 'code message')):
    """A reply code plus its human readable message."""

    __slots__ = ()

    @property
    def preliminary(self):
        return 100 <= self.code < 200

    def __str__(self):
        return '%d %s' % (self.code, self.message)


def split_status(text):
    code, message = text.split(' ', 1)
    return int(code), message


def make_reply(key, *args):
    """Build a reply from the ``status_messages`` entry ``key``."""
    text = status_messages[key]
    if args:
        text = text % args
    return Reply(*split_status(text))


class FTPError(Exception):
    """A protocol-level failure that ends a command, not the session.

    It is caught at the command boundary and sent back as a reply.
    """

    def __init__(self, code, message):
        Exception.__init__(self, code, message)
        self.code = code
        self.message = message

    @classmethod
    def from_status(cls, key, *args):
        return cls(*make_reply(key, *args))

    @property
    def reply(self):
        return Reply(self.code, self.message)

    def __str__(self):
        return '%d %s' % (self.code, self.message)
