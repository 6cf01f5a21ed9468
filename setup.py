#!/usr/bin/env python
"""Stream data in and out of PostgreSQL with the COPY command

pgcopystream is a set of tools, i.e. functions and classes, built
to export and import (large amounts of) data from and into a
PostgreSQL server by using the COPY command, either in CSV or in
the binary format.
"""

from setuptools import setup

classifiers = [
        'Development Status :: 4 - Beta',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: GNU General Public License (GPL)',
        'Intended Audience :: Developers',
        'Topic :: Database']

setup (name             = 'PostgreSQLCopyStream',
       version          = '1.1',
       author           = 'Christian Kellner',
       author_email     = 'kellner@biologie.uni-muenchen.de',
       description      = __doc__.split("\n")[0],
       long_description = "\n".join(__doc__.split("\n")[2:]),
       classifiers      = classifiers,
       python_requires  = '>=3.8',
       install_requires = ['numpy', 'psycopg>=3.1'],
       extras_require   = {'test': ['pytest']},
       packages         = ['pgcopystream']
       )
