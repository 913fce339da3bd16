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

"""Connection provider and dialect detection for the db2.* input plugins.

The Connection class wraps a DB-API connection to present the three
operations the rest of the package relies upon: query() returning rows as
mappings, execute() for statements returning nothing, and scalar() for single
values. SQL may use positional (?) or named (:name) parameter markers; named
markers are rewritten to positional ones before the statement is handed to
the driver.
"""

import re
import locale
import logging
import threading
from collections.abc import Mapping

__all__ = [
    'connect', 'bind_params', 'Connection', 'DialectDetector', 'make_str',
    'make_name', 'make_int', 'make_bool',
]


def connect(dsn, username=None, password=None):
    """Create a connection to the specified database.

    This utility method connects to the database named by dsn (a catalog
    alias or a full DRIVER=...; connection string) using the (optional)
    username and password provided, via the IBM DB2 Python driver. The result
    is a Connection.
    """
    logging.info('Connecting to database "%s"' % dsn)
    try:
        import ibm_db_dbi
    except ImportError:
        raise ImportError('Unable to find the IBM DB2 driver; please install ibm-db')
    logging.info('Using IBM DB2 Python driver')
    if username is not None:
        return Connection(ibm_db_dbi.connect(dsn, username, password))
    else:
        return Connection(ibm_db_dbi.connect(dsn))


# String literals and delimited identifiers are matched first so that
# anything resembling a named marker within them is left alone
_MARKERS = re.compile(r"""('(?:[^']|'')*')|("(?:[^"]|"")*")|(?<![:\w]):([A-Za-z_]\w*)""")


def bind_params(sql, params=None):
    """Returns (sql, values) with named markers in sql made positional.

    If params is a mapping, each :name marker in sql is replaced by ? and the
    corresponding value appended to values. Keys may be given with or without
    the leading colon. Otherwise params is treated as a sequence of values for
    the ? markers already in sql.
    """
    if params is None:
        return (sql, ())
    elif isinstance(params, Mapping):
        values = []
        def subst(match):
            if match.group(3) is None:
                return match.group(0)
            name = match.group(3)
            if name in params:
                values.append(params[name])
            elif ':' + name in params:
                values.append(params[':' + name])
            else:
                raise KeyError('No value given for parameter :%s' % name)
            return '?'
        return (_MARKERS.sub(subst, sql), tuple(values))
    else:
        return (sql, tuple(params))


class Connection(object):
    """Wraps a DB-API connection with query(), execute() and scalar()"""

    def __init__(self, connection):
        super(Connection, self).__init__()
        self.connection = connection

    def _run(self, sql, params):
        (sql, values) = bind_params(sql, params)
        logging.debug('Executing: %s %r' % (' '.join(sql.split()), values))
        cursor = self.connection.cursor()
        try:
            if values:
                cursor.execute(sql, values)
            else:
                cursor.execute(sql)
        except Exception:
            cursor.close()
            raise
        return cursor

    def query(self, sql, params=None):
        """Executes the query sql and returns a list of rows.

        Each row is a dict mapping the column names of the result (as
        reported by the driver) to values, in column order.
        """
        cursor = self._run(sql, params)
        try:
            names = [desc[0] for desc in cursor.description]
            return [dict(zip(names, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def execute(self, sql, params=None):
        """Executes the statement sql, which returns no rows."""
        self._run(sql, params).close()

    def scalar(self, sql, params=None):
        """Executes the query sql and returns the first value of its first row.

        Returns None if the query returns no rows.
        """
        cursor = self._run(sql, params)
        try:
            row = cursor.fetchone()
            return None if row is None else row[0]
        finally:
            cursor.close()

    def set_current_schema(self, schema):
        """Changes the current (default) schema of the connection."""
        self.execute('SET SCHEMA ?', [schema.upper()])

    def close(self):
        self.connection.close()


# Queries a view which only exists in the DB2 for i catalog
ISERIES_PROBE = 'SELECT * FROM QSYS2.SYSTABLES FETCH FIRST 1 ROW ONLY'


class DialectDetector(object):
    """Determines which catalog dialect a connection's server uses.

    The first call to is_iseries() probes the server; the answer (including
    a negative answer caused by a failed probe) is remembered for the life of
    the detector and never probed again.
    """

    def __init__(self, connection):
        super(DialectDetector, self).__init__()
        self.connection = connection
        self._lock = threading.Lock()
        self._iseries = None

    def is_iseries(self):
        """Returns True if the server has the DB2 for i catalog."""
        if self._iseries is None:
            with self._lock:
                if self._iseries is None:
                    self._iseries = self._probe()
        return self._iseries

    def _probe(self):
        try:
            # No rows is still DB2 for i; only a failure means otherwise
            self.connection.query(ISERIES_PROBE)
        except Exception as e:
            logging.debug('DB2 for i catalog probe failed: %s' % str(e))
            logging.info('Detected DB2 for Linux/UNIX/Windows catalog')
            return False
        logging.info('Detected DB2 for i catalog')
        return True

    def _get_plugin_name(self):
        return ['db2.luw', 'db2.iseries'][self.is_iseries()]

    plugin_name = property(_get_plugin_name)


def make_str(value):
    """Converts a value returned by the driver into a str.

    If value is None, returns None. Byte strings are decoded with the encoding
    of the current locale, as the DB2 client returns data in the encoding
    given by the LANG environment variable.
    """
    if value is None:
        return None
    elif isinstance(value, str):
        return value
    elif isinstance(value, bytes):
        return value.decode(locale.getpreferredencoding(False))
    else:
        raise ValueError('Invalid string value %s' % repr(value))


def make_name(value):
    """Converts a catalog object name into a str, removing CHAR padding."""
    value = make_str(value)
    if value is None:
        return None
    return value.strip()


def make_int(value):
    """Converts a numeric value into an integer.

    If value is None, returns None. If the value is a string, refuse to
    convert it. Otherwise performs a straight int() conversion on value.
    """
    if value is None:
        return None
    elif isinstance(value, (str, bytes)):
        raise ValueError('Invalid integer value %s' % repr(value))
    else:
        return int(value)


def make_bool(value, true_value='Y', false_value='N', none_value=' ',
        unknown_error=False, unknown_result=None):
    """Converts a character-based value into a boolean value.

    If value equals true_value, false_value, or none_value return true, false,
    or None respectively. If it matches none of them and unknown_error is false
    (the default), returns unknown_result (defaults to None).  Otherwise if
    unknown_error is true, a ValueError is raised.
    """
    if isinstance(value, str):
        value = value.strip() or ' '
    try:
        return {true_value: True, false_value: False, none_value: None}[value]
    except KeyError:
        if unknown_error:
            raise ValueError('Invalid boolean value %s' % repr(value))
        else:
            return unknown_result
