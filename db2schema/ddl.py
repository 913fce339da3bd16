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

"""Builds DB2 DDL statements from abstract column specifications.

All functions in this module are pure: they return SQL text and never touch a
database. Where a statement depends on live metadata (the current nullability
of a column, the next value of a sequence) the caller passes that metadata in;
db2schema.schema.Db2Schema does this for you.
"""

import re

from db2schema.db.util import quote_str, quote_ident, quote_table_name
from db2schema.types import (
    ColumnSpec, ROW_CHANGE_TIMESTAMP, parse_bool, translate_simple_type,
    validate_column_settings,
)


__all__ = [
    'DdlError',
    'build_column_definition',
    'build_column_ddl',
    'get_column_type',
    'requires_create_index',
    'alter_column_statement',
    'add_foreign_key_statement',
    'truncate_statement',
    'reset_sequence_statement',
    'set_integrity_statement',
    'create_table_statement',
    'add_column_statement',
    'drop_column_statement',
    'create_index_statement',
]


IDENTITY_CLAUSE = 'GENERATED BY DEFAULT AS IDENTITY (START WITH 1 INCREMENT BY 1)'

# DB2 only supports NO ACTION and RESTRICT as update rules
UNSUPPORTED_UPDATE_RULES = frozenset(('CASCADE', 'SET NULL'))

NULL_CLAUSE = re.compile(r' +(not)? *null\b', re.IGNORECASE)
NOT_NULL_CLAUSE = re.compile(r'not +null', re.IGNORECASE)


class DdlError(ValueError):
    """Raised when a DDL request is invalid"""
    pass


def _table_ref(table):
    # Accepts a Table or a (possibly qualified) table name
    try:
        return table.raw_name
    except AttributeError:
        return quote_table_name(table)


def _column_list(columns):
    if isinstance(columns, str):
        columns = [column.strip() for column in columns.split(',')]
    return ', '.join(quote_ident(column) for column in columns)


def build_column_definition(spec):
    """Returns the column definition clause for the native ColumnSpec spec.

    The clause consists of the type and its extras, the null clause, the
    default clause, the unique or primary key designation and the identity
    clause, in that order. Raises DdlError if spec asks for both a unique and
    a primary key designation.
    """
    if parse_bool(spec.is_unique) and parse_bool(spec.is_primary_key):
        raise DdlError('Unique and Primary designations not allowed simultaneously.')
    definition = '%s%s' % (spec.type or '', spec.type_extras or '')
    if parse_bool(spec.allow_null):
        definition += ' NULL'
    else:
        definition += ' NOT NULL'
    if spec.default is not None:
        default = str(spec.default)
        if parse_bool(spec.quote_default):
            default = quote_str(default)
        if default.upper() == ROW_CHANGE_TIMESTAMP:
            definition += ' ' + default
        else:
            definition += ' DEFAULT ' + default
    if parse_bool(spec.is_unique):
        definition += ' UNIQUE'
    elif parse_bool(spec.is_primary_key):
        definition += ' PRIMARY KEY'
    if parse_bool(spec.auto_increment):
        definition += ' ' + IDENTITY_CLAUSE
    return definition


def build_column_ddl(spec):
    """Returns the native column definition for the abstract ColumnSpec spec"""
    return build_column_definition(validate_column_settings(translate_simple_type(spec)))


def get_column_type(spec):
    """Returns the native type (with extras) for the abstract ColumnSpec spec"""
    spec = validate_column_settings(translate_simple_type(spec))
    return '%s%s' % (spec.type or '', spec.type_extras or '')


def requires_create_index(unique=False, on_create_table=False):
    """Returns True if an index needs a separate CREATE INDEX statement.

    DB2 implicitly creates the index backing a UNIQUE constraint declared
    within CREATE TABLE; every other index must be created explicitly.
    """
    return not (unique and on_create_table)


def _parse_definition(definition):
    # Splits a textual definition like "string(50) not null" into the native
    # type and its nullability. Leading abstract type names are translated
    allow_null = not NOT_NULL_CLAUSE.search(definition)
    definition = NULL_CLAUSE.sub('', definition).strip()
    match = re.match(r'(\w+)(.*)$', definition, re.DOTALL)
    if match is None:
        raise DdlError('Invalid column definition "%s"' % definition)
    (type_name, rest) = match.groups()
    native = translate_simple_type(ColumnSpec(type=type_name))
    if rest.strip():
        return ('%s%s' % (native.type, rest), allow_null)
    return (get_column_type(native), allow_null)


def alter_column_statement(table, column_name, definition):
    """Returns the statement altering column_name of table to definition.

    The table parameter is a Table with its columns loaded; the current
    nullability of the column decides whether a SET NOT NULL or DROP NOT NULL
    clause is needed. The definition may be an abstract ColumnSpec (whose
    allow_null defaults to true, unless its type is never nullable, like id)
    or a textual definition such as "string not null". Raises DdlError if
    the table has no such column.
    """
    column = table.get_column(column_name.rstrip())
    if column is None:
        raise DdlError('Column %s not found in %s' % (column_name, table.name))
    if isinstance(definition, ColumnSpec):
        spec = validate_column_settings(translate_simple_type(definition))
        native_type = '%s%s' % (spec.type or '', spec.type_extras or '')
        allow_null = spec.allow_null is None or parse_bool(spec.allow_null)
    else:
        (native_type, allow_null) = _parse_definition(definition)
    sql = 'ALTER TABLE %s ALTER COLUMN %s SET DATA TYPE %s' % (
        table.raw_name, column.raw_name, native_type)
    if column.allow_null != allow_null:
        sql += ' ALTER COLUMN %s %s NOT NULL' % (
            column.raw_name, ['SET', 'DROP'][allow_null])
    return sql


def add_foreign_key_statement(name, table, columns, ref_table, ref_columns,
        delete=None, update=None):
    """Returns the statement adding the foreign key name to table.

    The columns and ref_columns parameters are lists of names, or strings of
    comma separated names. CASCADE and SET NULL update rules are not
    supported by DB2 and are dropped from the statement.
    """
    if update is not None and update.upper() in UNSUPPORTED_UPDATE_RULES:
        update = None
    sql = 'ALTER TABLE %s ADD CONSTRAINT %s FOREIGN KEY (%s) REFERENCES %s (%s)' % (
        _table_ref(table), quote_ident(name), _column_list(columns),
        _table_ref(ref_table), _column_list(ref_columns))
    if delete is not None:
        sql += ' ON DELETE %s' % delete.upper()
    if update is not None:
        sql += ' ON UPDATE %s' % update.upper()
    return sql


def truncate_statement(table):
    """Returns the statement emptying table"""
    return 'TRUNCATE TABLE %s IMMEDIATE' % _table_ref(table)


def reset_sequence_statement(table, value):
    """Returns the statement restarting the identity key of table at value.

    Returns None if table has no single column auto-increment primary key.
    """
    if table.sequence_name is None or not isinstance(table.primary_key, str):
        return None
    column = table.get_column(table.primary_key)
    if column is None or not column.auto_increment:
        return None
    return 'ALTER TABLE %s ALTER COLUMN %s RESTART WITH %d' % (
        table.raw_name, column.raw_name, int(value))


def set_integrity_statement(table, enabled=True):
    """Returns the statement switching integrity checking of table"""
    return 'SET INTEGRITY FOR %s ALL IMMEDIATE %s' % (
        _table_ref(table), ['UNCHECKED', 'CHECKED'][bool(enabled)])


def create_table_statement(table, columns):
    """Returns the CREATE TABLE statement for table.

    The columns parameter is a sequence of abstract ColumnSpec tuples, each
    of which must have a name.
    """
    if not columns:
        raise DdlError('Table %s must have at least one column' % table)
    definitions = []
    for spec in columns:
        if not spec.name:
            raise DdlError('Column specification without a name in %s' % table)
        definitions.append('%s %s' % (quote_ident(spec.name), build_column_ddl(spec)))
    return 'CREATE TABLE %s (\n    %s\n)' % (
        _table_ref(table), ',\n    '.join(definitions))


def add_column_statement(table, spec):
    """Returns the statement adding the abstract ColumnSpec spec to table"""
    if not spec.name:
        raise DdlError('Column specification without a name')
    return 'ALTER TABLE %s ADD COLUMN %s %s' % (
        _table_ref(table), quote_ident(spec.name), build_column_ddl(spec))


def drop_column_statement(table, column_name):
    """Returns the statement dropping column_name from table"""
    return 'ALTER TABLE %s DROP COLUMN %s' % (
        _table_ref(table), quote_ident(column_name))


def create_index_statement(name, table, columns, unique=False):
    """Returns the CREATE INDEX statement for the named index on table"""
    return 'CREATE %sINDEX %s ON %s (%s)' % (
        ['', 'UNIQUE '][bool(unique)], quote_ident(name), _table_ref(table),
        _column_list(columns))
