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
"""User directory.

Passwords are never stored: each user keeps a random salt and the SHA3-256
digest of the password followed by that salt.
"""
import hashlib
import hmac
import os

from zope.interface import implementer

from jailftp.interfaces import IAuthenticator
from jailftp.interfaces import IUser

SALT_LENGTH = 16
ANONYMOUS = 'anonymous'


def generate_salt():
    return os.urandom(SALT_LENGTH)


def hash_password(password, salt):
    if not isinstance(password, bytes):
        password = password.encode('ascii')
    return hashlib.sha3_256(password + salt).digest()


@implementer(IUser)
class User(object):
    """A login name with an optional salted password hash."""

    def __init__(self, name, salt=None, pass_hash=None):
        if (salt is None) != (pass_hash is None):
            raise ValueError('salt and pass_hash go together')
        self.name = name
        self.salt = salt
        self.pass_hash = pass_hash

    @classmethod
    def new(cls, name, password=None):
        """Create a user; a ``None`` password makes a password-less user."""
        if password is None:
            return cls(name)
        salt = generate_salt()
        return cls(name, salt, hash_password(password, salt))

    def has_password(self):
        return self.pass_hash is not None

    def check_password(self, password):
        if not self.has_password():
            return True
        try:
            candidate = hash_password(password, self.salt)
        except UnicodeError:
            return False
        return hmac.compare_digest(candidate, self.pass_hash)

    def __repr__(self):
        return '<User %s>' % self.name


@implementer(IAuthenticator)
class UserDirectory(object):
    """The set of users allowed to log in, keyed by name."""

    def __init__(self, users=None):
        if users is None:
            users = [User.new(ANONYMOUS)]
        self.users = {}
        for user in users:
            self.add(user)

    def add(self, user):
        if user.name in self.users:
            raise ValueError('Duplicate user %r' % user.name)
        self.users[user.name] = user

    def lookup(self, name):
        return self.users.get(name)

    def __len__(self):
        return len(self.users)

    def __contains__(self, name):
        return name in self.users
