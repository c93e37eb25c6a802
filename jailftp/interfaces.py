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
"""Interfaces used by the FTP server.
"""
from zope.interface import Attribute
from zope.interface import Interface


class IUser(Interface):
    """An identity that can log in."""

    name = Attribute("The login name.")

    def has_password():
        """Return True if logging in as this user requires a password."""

    def check_password(password):
        """Return True if ``password`` is accepted for this user.

        Users without a password accept any password.
        """


class IAuthenticator(Interface):
    """Provides the identities allowed to log in."""

    def lookup(name):
        """Return the IUser called ``name``, or None if there is none."""


class ITask(Interface):
    """A unit of work handed to the task dispatcher."""

    def service():
        """Called to execute the task."""

    def cancel():
        """Called when shutting down the server."""

    def defer():
        """Called when the task will be serviced in a different thread."""


class IDataChannel(Interface):
    """A negotiated data connection.

    A data channel carries exactly one listing or file transfer; it is
    closed once that transfer is over.
    """

    closed = Attribute("True once the channel has been closed.")

    def reader():
        """Return a binary file object reading from the connection."""

    def writer():
        """Return a binary file object writing to the connection."""

    def close():
        """Close the connection.  Closing twice is harmless."""
