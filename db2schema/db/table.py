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

import logging
from collections import namedtuple

from db2schema.db.field import Column
from db2schema.types import TYPE_ID, TYPE_INTEGER


ForeignKey = namedtuple('ForeignKey', (
    'column',             # The referencing column of this table
    'ref_schema',         # The schema of the referenced table
    'ref_table',          # The name of the referenced table
    'ref_column',         # The referenced column
))


class Table(object):
    """Class representing a table or view in a DB2 database.

    A Table is first built as a "stub" by the table listing, carrying only its
    names. Db2Schema.load_table() then builds a complete copy of the stub in
    two phases: load_columns() followed by load_primary_key() and
    load_foreign_keys(). Only the complete copy is ever handed to callers.
    """

    def __init__(self, schema_name, table_name, name, raw_name, is_view=False):
        super(Table, self).__init__()
        self.schema_name = schema_name
        self.table_name = table_name
        self.name = name
        self.raw_name = raw_name
        self.is_view = is_view
        self.primary_key = None
        self.sequence_name = None
        self.foreign_keys = []
        self._column_list = []
        self._columns = {}

    def __repr__(self):
        return '<Table %s>' % self.name

    def copy(self):
        """Returns a new stub with the same names as this table"""
        return Table(
            self.schema_name, self.table_name, self.name, self.raw_name,
            self.is_view)

    def add_column(self, column):
        """Adds column, replacing any existing column with the same name"""
        if column.name in self._columns:
            index = self._column_list.index(self._columns[column.name])
            self._column_list[index] = column
        else:
            self._column_list.append(column)
        self._columns[column.name] = column

    def get_column(self, name):
        """Returns the named column, or None if the table has no such column"""
        try:
            return self._columns[name]
        except KeyError:
            for column in self._column_list:
                if column.name.lower() == name.lower():
                    return column
            return None

    def load_columns(self, rows):
        """Builds the columns of the table from ColumnRow tuples.

        Returns False if rows is empty, which means the table does not exist
        (every real table has at least one column).
        """
        count = 0
        for row in rows:
            self.add_column(Column(row))
            count += 1
        return count > 0

    def load_primary_key(self, names):
        """Marks the columns named by names as the primary key.

        Auto-increment integer key columns are promoted to the id type. The
        sequence name is only set for a single column auto-increment key.
        """
        for name in names:
            column = self.get_column(name)
            if column is None:
                logging.warning("Primary key column %s not found in %s" % (name, self.name))
                continue
            column.is_primary_key = True
            if column.auto_increment and column.type == TYPE_INTEGER:
                column.type = TYPE_ID
            if self.primary_key is None:
                self.primary_key = column.name
            elif isinstance(self.primary_key, str):
                self.primary_key = [self.primary_key, column.name]
            else:
                self.primary_key.append(column.name)
        if isinstance(self.primary_key, str):
            column = self.get_column(self.primary_key)
            if column.auto_increment:
                self.sequence_name = column.raw_name

    def load_foreign_keys(self, rows):
        """Wires the referencing columns of ForeignKeyRow tuples"""
        for row in rows:
            column = self.get_column(row.column_name)
            if column is None:
                continue
            column.is_foreign_key = True
            column.ref_table = '%s.%s' % (row.ref_schema, row.ref_table)
            column.ref_field = row.ref_column
            self.foreign_keys.append(ForeignKey(
                column.name, row.ref_schema, row.ref_table, row.ref_column))

    def _get_columns(self):
        return list(self._column_list)

    def _get_column_names(self):
        return [column.name for column in self._column_list]

    def _get_primary_key_columns(self):
        if self.primary_key is None:
            return []
        elif isinstance(self.primary_key, str):
            return [self.get_column(self.primary_key)]
        else:
            return [self.get_column(name) for name in self.primary_key]

    columns = property(_get_columns)
    column_names = property(_get_column_names)
    primary_key_columns = property(_get_primary_key_columns)
