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

"""Defines all namedtuple classes used by input plugins to return catalog rows.

Catalog views differ between dialects in both the names and the letter case of
their columns. Input plugins never hand raw catalog rows upward; instead each
row is projected through a fixed field table into one of the namedtuple
classes below, so code outside the plugins never sees a catalog column name.
"""

from collections import namedtuple


__all__ = [
    'TableRow',
    'ColumnRow',
    'ForeignKeyRow',
    'RoutineRow',
    'RoutineParam',
    'NameRow',
    'project_row',
]


TableRow = namedtuple('TableRow', (
    'schema',             # The schema containing the table or view
    'name',               # The name of the table or view
    'type',               # 'T' = Table
                          # 'V' = View
))

ColumnRow = namedtuple('ColumnRow', (
    'name',               # The name of the column
    'position',           # The catalog ordinal of the column
    'type_name',          # The native type name, e.g. VARCHAR
    'default',            # The default expression as SQL text (or None)
    'nullable',           # True if the column accepts NULL (bool)
    'length',             # The length (or precision) of the column
    'scale',              # The scale of decimal columns
    'identity',           # True if the column is an identity column (bool)
))

ForeignKeyRow = namedtuple('ForeignKeyRow', (
    'table_schema',       # The schema of the referencing table
    'table_name',         # The name of the referencing table
    'column_name',        # The referencing column
    'ref_schema',         # The schema of the referenced table
    'ref_table',          # The name of the referenced table
    'ref_column',         # The referenced column
))

RoutineRow = namedtuple('RoutineRow', (
    'schema',             # The schema which contains the routine
    'specific',           # The unique name of the routine in the schema
    'name',               # The (potentially overloaded) name of the routine
    'return_type',        # The declared scalar return type name (or None)
    'func_type',          # 'C' = Column/aggregate function
                          # 'R' = Row function
                          # 'T' = Table function
                          # 'S' = Scalar function
                          # None = Procedure
))

NameRow = namedtuple('NameRow', (
    'name',               # A single name, e.g. of a schema or key column
))

RoutineParam = namedtuple('RoutineParam', (
    'name',               # The name of the parameter (may be None)
    'position',           # The ordinal of the parameter (0 = return value)
    'direction',          # 'I' = Input parameter
                          # 'O' = Output parameter
                          # 'B' = Input & output parameter
                          # 'R' = Return value/column
    'type_name',          # The native type name of the parameter
    'length',             # The length of character based types
    'precision',          # The precision of numeric types
    'scale',              # The scale of decimal types
    'default',            # The default value of the parameter (or None)
))


def project_row(cls, row, fields):
    """Projects a catalog row onto the namedtuple class cls.

    The row parameter is a mapping of catalog column names to values, as
    returned by Connection.query(). Key case is ignored. The fields parameter
    lists the catalog column names in the order of cls._fields, for example:

        >>> project_row(TableRow, {'tabschema': 'A', 'TABNAME': 'B',
        ...     'Type': 'T'}, ('TABSCHEMA', 'TABNAME', 'TYPE'))
        TableRow(schema='A', name='B', type='T')

    Catalog columns absent from the row become None. Raises ValueError if
    fields doesn't name one catalog column per field of cls.
    """
    if len(fields) != len(cls._fields):
        raise ValueError('%s has %d fields, but %d catalog columns were given' % (
            cls.__name__, len(cls._fields), len(fields)))
    upper = dict((key.upper(), value) for (key, value) in row.items())
    return cls(*(upper.get(field.upper()) for field in fields))
