##############################################################################
#
# Copyright (c) 2006 Zope Foundation and Contributors.
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
import os
from setuptools import setup, find_packages

here = os.path.abspath(os.path.dirname(__file__))
try:
    README = open(os.path.join(here, 'README.rst')).read()
    CHANGES = open(os.path.join(here, 'CHANGES.txt')).read()
except OSError:
    README = CHANGES = ''

testing_extras = [
    'pytest',
    'coverage',
]

setup(
    name='jailftp',
    version='0.1.0',
    author='Zope Foundation and Contributors',
    author_email='zope-dev@zope.org',
    description='Threaded FTP server confining every client to one directory',
    long_description=README + '\n\n' + CHANGES,
    license='ZPL 2.1',
    keywords='jailftp ftp server',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Zope Public License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        "Programming Language :: Python :: Implementation :: CPython",
        'Natural Language :: English',
        'Operating System :: POSIX',
        'Topic :: Internet :: File Transfer Protocol (FTP)',
    ],
    packages=find_packages(),
    python_requires='>=3.8',
    install_requires=[
        'blinker',
        'zope.interface',
    ],
    extras_require={
        'testing': testing_extras,
    },
    include_package_data=True,
    zip_safe=False,
    entry_points="""
    [console_scripts]
    jailftp-serve = jailftp.runner:run
    """
)
