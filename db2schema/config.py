# vim: set et sw=4 sts=4:

# Copyright 2012 Dave Hughes.
#
# This file is part of db2schema.
#
# db2schema is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option)
# any later version.
#
# db2schema is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# db2schema.  If not, see <http://www.gnu.org/licenses/>.

"""Reads connection parameters from a configuration file.

Configuration files are Ini-style files with a [database] section, e.g.:

    [database]
    database=SAMPLE
    host=db2.example.com
    port=50000
    schema=db2inst1
    username=db2inst1
    password=secret

Any further sections are left for the caller; the [catalog] section, if
present, holds options for the catalog plugin (see Db2Schema).
"""

import logging
import configparser

from db2schema.plugins import Plugin, PluginConfigurationError
from db2schema.plugins.db2 import connect


DEFAULT_PORT = 56789
DEFAULT_PROTOCOL = 'TCPIP'
DEFAULT_DRIVER = '{IBM DB2 ODBC DRIVER}'


class DatabaseConfig(Plugin):
    """Holds the parameters needed to connect to a DB2 database"""

    def __init__(self, config=None):
        super(DatabaseConfig, self).__init__()
        self.add_option('database', default=None,
            doc="""The name of the database, or the local catalog alias of
            the database if no host is given""")
        self.add_option('host', default=None,
            doc="""The hostname of the server. If omitted, the database is
            assumed to be cataloged locally""")
        self.add_option('port', default=str(DEFAULT_PORT),
            convert=lambda value: self.convert_int(value, minvalue=1, maxvalue=65535),
            doc="""The TCP port the server listens on""")
        self.add_option('protocol', default=DEFAULT_PROTOCOL,
            doc="""The protocol used to reach the server""")
        self.add_option('driver', default=DEFAULT_DRIVER,
            doc="""The name of the ODBC/CLI driver""")
        self.add_option('schema', default=None,
            convert=lambda value: value.strip().upper() or None,
            doc="""The default schema. If omitted, the current schema of the
            connection is used""")
        self.add_option('username', default=None,
            doc="""The user to connect as. If omitted, the connection is
            made with the credentials of the current user""")
        self.add_option('password', default=None,
            doc="""The password of the user""")
        if config is not None:
            self.configure(config)

    def configure(self, config):
        super(DatabaseConfig, self).configure(config)
        if not self.options['database']:
            raise PluginConfigurationError('The database option must be specified')
        if self.options['username'] and self.options['password'] is None:
            raise PluginConfigurationError('A password must be given with the username option')

    def _get_dsn(self):
        if not self.options['host']:
            # A locally cataloged database is connected to by its alias
            return self.options['database']
        return ''.join(
            '%s=%s;' % (key, value)
            for (key, value) in (
                ('DRIVER', self.options['driver']),
                ('DATABASE', self.options['database']),
                ('HOSTNAME', self.options['host']),
                ('PORT', self.options['port']),
                ('PROTOCOL', self.options['protocol']),
            )
            if value
        )

    dsn = property(_get_dsn)

    def connect(self):
        """Opens a connection with this configuration.

        If a schema is configured, it becomes the current schema of the
        connection.
        """
        connection = connect(self.dsn, self.options['username'], self.options['password'])
        if self.options['schema']:
            connection.set_current_schema(self.options['schema'])
        return connection


def read_config(filename):
    """Reads and parses an Ini-style configuration file.

    Returns a dictionary mapping each section of the file to a dictionary of
    its values. Raises IOError if the file cannot be read.
    """
    parser = configparser.ConfigParser(interpolation=None)
    logging.info('Reading configuration file %s' % filename)
    if not parser.read(filename):
        raise IOError('Unable to read configuration file %s' % filename)
    if not 'database' in parser.sections():
        logging.warning('The configuration file %s has no [database] section' % filename)
    return dict(
        (section, dict(parser.items(section)))
        for section in parser.sections()
    )
