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
"""Virtual paths.

A virtual path is what an FTP client sees: a POSIX-style path whose root is
the server's configured root directory.  Normalization happens when the
path is built.  An absolute path can never climb above the root; a relative
path keeps its leading parent references so that resolving it against a
base can climb that base.
"""
import os

SEPARATOR = '/'
CURRENT = '.'
PARENT = '..'


class VirtualPath(object):
    """An immutable, normalized sequence of path segments."""

    __slots__ = ('segments', 'absolute')

    def __init__(self, segments=(), absolute=True):
        stack = []
        for segment in segments:
            if not segment or segment == CURRENT:
                continue
            if segment == PARENT:
                if stack and stack[-1] != PARENT:
                    stack.pop()
                elif not absolute:
                    stack.append(segment)
                # excess parent references of an absolute path are dropped
                continue
            stack.append(segment)
        object.__setattr__(self, 'segments', tuple(stack))
        object.__setattr__(self, 'absolute', bool(absolute))

    @classmethod
    def of(cls, text):
        """Parse ``text``; it is absolute iff it starts with a separator."""
        return cls(text.split(SEPARATOR), text.startswith(SEPARATOR))

    def __setattr__(self, name, value):
        raise AttributeError('VirtualPath is immutable')

    def resolve(self, other):
        """Append the relative path ``other`` to this one."""
        if other.absolute:
            raise ValueError('Cannot resolve absolute path %s' % other)
        return self.__class__(self.segments + other.segments, self.absolute)

    def has_parent(self):
        # True for any non-empty path, relative ones included.
        return bool(self.segments)

    @property
    def parent(self):
        if not self.has_parent():
            return None
        return self.__class__(self.segments[:-1], self.absolute)

    @property
    def name(self):
        if not self.segments:
            return ''
        return self.segments[-1]

    def to_path(self, root):
        """Return the concrete filesystem path for this virtual path.

        Absolute paths land beneath ``root``; relative ones are taken
        relative to the process' current directory.
        """
        if self.absolute:
            return os.path.join(root, *self.segments)
        return os.path.join(os.curdir, *self.segments)

    def __str__(self):
        prefix = self.absolute and SEPARATOR or ''
        return prefix + SEPARATOR.join(self.segments)

    def __repr__(self):
        return '<VirtualPath %r>' % str(self)

    def __eq__(self, other):
        if not isinstance(other, VirtualPath):
            return NotImplemented
        return (self.segments, self.absolute) == (other.segments,
                                                  other.absolute)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.segments, self.absolute))


ROOT = VirtualPath((), True)
