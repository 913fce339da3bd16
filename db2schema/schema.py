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

"""Implements the Db2Schema class, the entry point of the package.

A Db2Schema wraps a connection (see db2schema.plugins.db2.Connection) and
provides discovery of schemas, tables and routines, caching of loaded table
and routine metadata, and the DDL and invocation statements of the
db2schema.ddl and db2schema.invoker modules. For example:

    >>> from db2schema.plugins.db2 import connect
    >>> from db2schema.schema import Db2Schema
    >>> schema = Db2Schema(connect('SAMPLE', 'db2inst1', 'secret'))
    >>> schema.list_schemas()
    ['DB2INST1', 'NULLID', 'SQLJ', 'SYSTOOLS']
    >>> table = schema.get_table('EMPLOYEE')
    >>> table.primary_key
    'EMPNO'

The dialect of the server's catalog is detected on first use, after which
every catalog query goes through the matching plugin.
"""

import re
import logging
import threading

from db2schema import ddl
from db2schema.db.routine import Procedure, Function
from db2schema.db.schema import SchemaCache
from db2schema.db.table import Table
from db2schema.db.util import qualified_name
from db2schema.invoker import invoke
from db2schema.plugins import load_plugin
from db2schema.plugins.db2 import DialectDetector
from db2schema.types import extract_simple_type, parse_value_for_set


__all__ = ['SchemaError', 'Db2Schema']


ROUTINE_KINDS = {
    'PROCEDURE': Procedure,
    'FUNCTION': Function,
}

NAME_PART = re.compile(r'\s*("(?:[^"]|"")+"|[^."\s]+)\s*(?:\.|$)')


class SchemaError(Exception):
    """Raised when a named table or routine can't be found"""
    pass


def split_name(name):
    """Splits a (possibly schema qualified) object name into its parts.

    Returns a (schema, name) tuple in which schema is None for unqualified
    names. Parts enclosed in double quotes are taken verbatim; other parts
    are folded to upper case as DB2 does.
    """
    parts = []
    pos = 0
    while pos < len(name):
        match = NAME_PART.match(name, pos)
        if match is None:
            raise SchemaError('Invalid object name "%s"' % name)
        part = match.group(1)
        if part.startswith('"'):
            parts.append(part[1:-1].replace('""', '"'))
        else:
            parts.append(part.upper())
        pos = match.end()
    if len(parts) == 1:
        return (None, parts[0])
    elif len(parts) == 2:
        return tuple(parts)
    else:
        raise SchemaError('Invalid object name "%s"' % name)


class Db2Schema(object):
    """Schema introspection and DDL synthesis for a DB2 database.

    The connection parameter provides query(), execute() and scalar(). If
    default_schema is given, it is used as the default schema; otherwise the
    current schema of the connection is asked for when first needed. The
    catalog_options parameter is a dictionary of option values for the
    catalog plugin (see InputPlugin.add_option calls).
    """

    def __init__(self, connection, default_schema=None, catalog_options=None):
        super(Db2Schema, self).__init__()
        self.connection = connection
        self.detector = DialectDetector(connection)
        self.tables = SchemaCache()
        self.routines = SchemaCache()
        self._default_schema = default_schema.upper() if default_schema else None
        self._catalog_options = catalog_options or {}
        self._catalog = None
        self._lock = threading.RLock()

    def _get_catalog(self):
        if self._catalog is None:
            with self._lock:
                if self._catalog is None:
                    catalog = load_plugin(self.detector.plugin_name)(self.connection)
                    catalog.configure(self._catalog_options)
                    logging.info('Using %s catalog plugin' % catalog.dialect)
                    self._catalog = catalog
        return self._catalog

    def _get_default_schema(self):
        if self._default_schema is None:
            with self._lock:
                if self._default_schema is None:
                    self._default_schema = self.find_default_schema()
        return self._default_schema

    catalog = property(_get_catalog)
    default_schema = property(_get_default_schema)

    def is_iseries(self):
        """Returns True if the server uses the DB2 for i catalog"""
        return self.detector.is_iseries()

    def find_default_schema(self):
        """Asks the server for the current schema of the connection"""
        return self.catalog.get_default_schema()

    def _names(self, schema, name):
        # Returns the (public name, raw name) pair for an object; only objects
        # outside the default schema have a qualified public name
        return qualified_name(schema, name, self._qualify('', schema))

    def _qualify(self, requested, schema):
        # Objects listed for a schema other than the default, and objects
        # which live outside the default schema, carry a qualified name
        default = self.default_schema
        return (bool(requested) and requested != default) or schema != default

    def list_schemas(self):
        """Returns the names of the (non-system) schemas in the database.

        The default schema is always included, even if the catalog doesn't
        list it (e.g. because it contains no objects yet).
        """
        result = self.catalog.get_schemas()
        if self.default_schema and self.default_schema not in result:
            result.append(self.default_schema)
        return result

    def list_tables(self, schema='', include_views=True):
        """Returns the tables of the database as unloaded Table stubs.

        The result is a dictionary mapping the lower-cased public name of each
        table to its stub. An empty schema lists every schema; tables outside
        the default schema are then qualified by their schema, so tables of
        the same name in different schemas are kept apart. Pass the stubs to
        load_table() to retrieve their columns and keys.
        """
        result = {}
        for row in self.catalog.get_tables(schema, include_views):
            (name, raw_name) = qualified_name(row.schema, row.name,
                self._qualify(schema, row.schema))
            result[name.lower()] = Table(
                row.schema, row.name, name, raw_name, row.type == 'V')
        return result

    def load_table(self, stub):
        """Returns a fully loaded copy of the Table stub.

        Returns None if the table doesn't exist. The stub itself is never
        modified, and the result is only returned once its columns, primary
        key and foreign keys have all been loaded.
        """
        table = stub.copy()
        schema = table.schema_name or self.default_schema
        logging.debug("Loading table %s" % table.name)
        if not table.load_columns(self.catalog.get_columns(schema, table.table_name)):
            return None
        table.load_primary_key(self.catalog.get_primary_key(schema, table.table_name))
        table.load_foreign_keys(self.catalog.get_foreign_keys(schema, table.table_name))
        return table

    def get_table(self, name, refresh=False):
        """Returns the loaded Table with the specified (public) name.

        Loaded tables are cached; pass refresh=True to reload the table from
        the catalog. Raises SchemaError if the table doesn't exist.
        """
        (schema, table_name) = split_name(name)
        schema = schema or self.default_schema
        (name, raw_name) = self._names(schema, table_name)
        if refresh:
            self.tables.invalidate(name)
        result = self.tables.get(name,
            lambda: self.load_table(Table(schema, table_name, name, raw_name)))
        if result is None:
            raise SchemaError('Table %s not found' % name)
        return result

    def list_routines(self, kind, schema=''):
        """Returns the procedures or functions of the database.

        The kind parameter is "procedure" or "function" (in any case). The
        result is a dictionary mapping the lower-cased public name of each
        routine to a Procedure or Function without parameters; use
        load_parameters() to retrieve those.
        """
        try:
            cls = ROUTINE_KINDS[kind.upper()]
        except KeyError:
            raise ValueError('Invalid routine kind %s' % kind)
        result = {}
        for row in self.catalog.get_routines(kind.upper(), schema):
            (name, raw_name) = qualified_name(row.schema, row.name,
                self._qualify(schema, row.schema))
            if row.return_type:
                return_type = extract_simple_type(row.return_type)
            else:
                return_type = None
            result[name.lower()] = cls(
                row.schema, row.specific, row.name, name, raw_name,
                return_type, row.func_type)
        return result

    def load_parameters(self, routine):
        """Returns a copy of routine with its parameters and result loaded"""
        result = routine.copy()
        result.load_parameters(self.catalog.get_routine_params(
            routine.schema_name, routine.specific_name, routine.name))
        return result

    def get_routine(self, name, refresh=False):
        """Returns the procedure or function with the specified name.

        Procedures take precedence over functions of the same name. The
        result has its parameters loaded and is cached; pass refresh=True to
        reload it. Raises SchemaError if there is no such routine.
        """
        (schema, routine_name) = split_name(name)
        schema = schema or self.default_schema
        (name, raw_name) = self._names(schema, routine_name)
        if refresh:
            self.routines.invalidate(name)

        def loader():
            for kind in ('PROCEDURE', 'FUNCTION'):
                for routine in self.list_routines(kind, schema).values():
                    if routine.name == routine_name:
                        return self.load_parameters(routine)
            return None

        result = self.routines.get(name, loader)
        if result is None:
            raise SchemaError('Routine %s not found' % name)
        return result

    def refresh(self):
        """Drops all cached tables and routines"""
        self.tables.invalidate()
        self.routines.invalidate()

    def build_column_ddl(self, spec):
        """Returns the native column definition for the ColumnSpec spec"""
        return ddl.build_column_ddl(spec)

    def truncate_statement(self, table):
        """Returns the statement emptying the named table"""
        return ddl.truncate_statement(table)

    def alter_column_statement(self, table, column, definition):
        """Returns the statement altering column of the named table.

        The current definition of the table is reloaded from the catalog
        first, as the statement depends on the column's current nullability.
        """
        return ddl.alter_column_statement(
            self.get_table(table, refresh=True), column, definition)

    def add_foreign_key_statement(self, name, table, columns, ref_table,
            ref_columns, delete=None, update=None):
        """Returns the statement adding a foreign key to the named table"""
        return ddl.add_foreign_key_statement(
            name, table, columns, ref_table, ref_columns, delete, update)

    def reset_sequence(self, table, value=None):
        """Restarts the identity primary key of table at value.

        The table parameter is a Table or the name of one. If value is None,
        the key restarts after the highest existing key. Tables without a
        single column identity primary key are left alone.
        """
        if isinstance(table, str):
            table = self.get_table(table)
        if table.sequence_name is None or not isinstance(table.primary_key, str):
            return
        if value is None:
            column = table.get_column(table.primary_key)
            value = (self.connection.scalar('SELECT MAX(%s) FROM %s' % (
                column.raw_name, table.raw_name)) or 0) + 1
        self.connection.execute(ddl.reset_sequence_statement(table, value))

    def set_integrity_checking(self, enabled=True, schema=''):
        """Turns integrity checking on or off for all tables in schema"""
        for table in self.list_tables(schema, include_views=False).values():
            self.connection.execute(ddl.set_integrity_statement(table, enabled))

    def invoke(self, routine, args=None):
        """Returns the (sql, params) pair which invokes routine with args.

        The routine parameter is a Procedure or Function with its parameters
        loaded, or the name of one. See db2schema.invoker.invoke().
        """
        if isinstance(routine, str):
            routine = self.get_routine(routine)
        return invoke(routine, args)

    def timestamp_for_set(self):
        """Returns the SQL expression used to set a timestamp to now"""
        return '(CURRENT TIMESTAMP)'

    def parse_value_for_set(self, value, column):
        """Coerces value for writing into column (a Column of a loaded table)"""
        return parse_value_for_set(value, column)
