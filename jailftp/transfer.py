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
"""Moving listings and file contents over a data connection.
"""
import os
import stat
import time

from jailftp.session import ASCII

CRLF = b'\r\n'

DEFAULT_CHUNK = 65536


def copy_binary(instream, outstream, chunk=DEFAULT_CHUNK):
    """Copy raw bytes until ``instream`` is exhausted.  Returns the count."""
    total = 0
    while True:
        data = instream.read(chunk)
        if not data:
            break
        outstream.write(data)
        total += len(data)
    outstream.flush()
    return total


def strip_eol(line):
    if line.endswith(b'\n'):
        line = line[:-1]
    if line.endswith(b'\r'):
        line = line[:-1]
    return line


def send_file(instream, outstream, transfer_type, chunk=DEFAULT_CHUNK):
    """Send an open file to the data connection.

    In ASCII mode every line goes out terminated by CRLF, whatever line
    ending the file uses.
    """
    if transfer_type != ASCII:
        return copy_binary(instream, outstream, chunk)
    total = 0
    for line in instream:
        data = strip_eol(line) + CRLF
        outstream.write(data)
        total += len(data)
    outstream.flush()
    return total


def receive_file(instream, outstream, transfer_type, chunk=DEFAULT_CHUNK,
                 linesep=os.linesep.encode('ascii')):
    """Store what arrives on the data connection into an open file.

    In ASCII mode every received line is rewritten with the local line
    separator.  This is not byte exact for binary payloads.
    """
    if transfer_type != ASCII:
        return copy_binary(instream, outstream, chunk)
    total = 0
    for line in instream:
        data = strip_eol(line) + linesep
        outstream.write(data)
        total += len(data)
    outstream.flush()
    return total


def format_mtime(mtime):
    """Return a timestamp as ``YYYYMMDDHHMMSS`` in UTC."""
    return time.strftime('%Y%m%d%H%M%S', time.gmtime(mtime))


def format_entry(name, st):
    """Format one listing line from a name and its stat result."""
    if stat.S_ISDIR(st.st_mode):
        kind = 'dir'
    else:
        kind = 'file'
    return 'Type=%s;Size=%d;Modify=%s;Perm=%s; %s' % (
        kind,
        st.st_size,
        format_mtime(st.st_mtime),
        stat.filemode(st.st_mode),
        name,
        )


def list_entries(path):
    """Yield a listing line for every entry of the directory ``path``.

    Entries that cannot be inspected (no permission, removed meanwhile,
    dangling or looping symlinks) are skipped.
    """
    for name in sorted(os.listdir(path)):
        try:
            st = os.stat(os.path.join(path, name))
        except OSError:
            continue
        yield format_entry(name, st)


def list_names(path):
    for name in sorted(os.listdir(path)):
        yield name


def send_lines(lines, outstream):
    """Write text lines, CRLF terminated, to the data connection."""
    total = 0
    for line in lines:
        data = line.encode('utf-8', 'replace') + CRLF
        outstream.write(data)
        total += len(data)
    outstream.flush()
    return total
