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
"""JSON configuration files.

A configuration file looks like::

    {
        "port": 2121,
        "root": "/srv/ftp",
        "passive_ports": "50000-50009",
        "threads": 5,
        "timeout": 120,
        "users": [
            {"name": "anonymous"},
            {"name": "bob", "salt": "<hex>", "hash": "<hex>"}
        ]
    }

Every key is optional.  Fields are mapped one by one onto adjustments and
users; nothing is instantiated reflectively.
"""
import binascii
import json

from jailftp.users import User

# configuration key -> adjustment name
adjustment_keys = {
    'host': 'host',
    'port': 'port',
    'passive_ports': 'passive_ports',
    'root': 'root',
    'threads': 'threads',
    'timeout': 'channel_timeout',
    'data_timeout': 'data_timeout',
    'ident': 'ident',
    'permit_foreign_addresses': 'permit_foreign_addresses',
    }


class ConfigError(ValueError):
    pass


def user_from_record(record):
    """Build a User from its configuration object."""
    if not isinstance(record, dict):
        raise ConfigError('A user must be an object, not %r' % (record,))
    unknown = set(record) - set(('name', 'salt', 'hash'))
    if unknown:
        raise ConfigError('Unknown user field(s): %s' %
                          ', '.join(sorted(unknown)))
    name = record.get('name')
    if not isinstance(name, str) or not name:
        raise ConfigError('A user needs a name: %r' % (record,))
    salt = record.get('salt')
    pass_hash = record.get('hash')
    if (salt is None) != (pass_hash is None):
        raise ConfigError('User %r needs both salt and hash, or neither'
                          % name)
    if salt is None:
        return User(name)
    try:
        return User(name, binascii.unhexlify(salt),
                    binascii.unhexlify(pass_hash))
    except (TypeError, binascii.Error) as e:
        raise ConfigError('User %r: bad salt or hash: %s' % (name, e))


def user_record(user):
    """Return the configuration object describing ``user``."""
    record = {'name': user.name}
    if user.has_password():
        record['salt'] = binascii.hexlify(user.salt).decode('ascii')
        record['hash'] = binascii.hexlify(user.pass_hash).decode('ascii')
    return record


def parse_config(data):
    """Split a decoded configuration into ``(adjustments, users)``.

    ``adjustments`` is a dict for ``Adjustments(**kw)``; ``users`` is None
    when the configuration does not list any.
    """
    if not isinstance(data, dict):
        raise ConfigError('Configuration must be a JSON object')
    kw = {}
    users = None
    for key, value in data.items():
        if key == 'users':
            if not isinstance(value, list):
                raise ConfigError('"users" must be a list')
            users = [user_from_record(record) for record in value]
        elif key in adjustment_keys:
            kw[adjustment_keys[key]] = value
        else:
            raise ConfigError('Unknown configuration key %r' % key)
    return kw, users


def load_config(path):
    with open(path) as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise ConfigError('%s: %s' % (path, e))
    return parse_config(data)
