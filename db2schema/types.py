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

"""Translation between abstract column types and native DB2 types.

Abstract types are the portable vocabulary used by the metadata model (id,
reference, string, money, ...). Native types are DB2 type names together with
their "extras" (length, precision and scale in parentheses), identity and
default clauses.

Column requests travel as ColumnSpec tuples. A ColumnSpec is closed: passing
an unknown property raises TypeError rather than silently carrying it along.
The functions in this module never modify their argument; each returns a new
ColumnSpec.
"""

from collections import namedtuple


TYPE_ID = 'id'
TYPE_REF = 'reference'
TYPE_USER_ID = 'user_id'
TYPE_USER_ID_ON_CREATE = 'user_id_on_create'
TYPE_USER_ID_ON_UPDATE = 'user_id_on_update'
TYPE_TIMESTAMP_ON_CREATE = 'timestamp_on_create'
TYPE_TIMESTAMP_ON_UPDATE = 'timestamp_on_update'
TYPE_BOOLEAN = 'boolean'
TYPE_INTEGER = 'integer'
TYPE_BIGINT = 'bigint'
TYPE_FLOAT = 'float'
TYPE_DOUBLE = 'double'
TYPE_DECIMAL = 'decimal'
TYPE_MONEY = 'money'
TYPE_STRING = 'string'
TYPE_TEXT = 'text'
TYPE_BINARY = 'binary'
TYPE_DATE = 'date'
TYPE_TIME = 'time'
TYPE_DATETIME = 'datetime'
TYPE_TIMESTAMP = 'timestamp'

# Return shape markers for functions which don't return a scalar
TYPE_ROW = 'row'
TYPE_TABLE = 'table'
TYPE_COLUMN = 'column'

CURRENT_TIMESTAMP = 'CURRENT TIMESTAMP'
ROW_CHANGE_TIMESTAMP = 'GENERATED BY DEFAULT FOR EACH ROW ON UPDATE AS ROW CHANGE TIMESTAMP'

# Legacy "zero" datetime produced by zero-date tolerant sources
ZERO_DATETIME = '0000-00-00 00:00:00'

INTEGER_TYPES = frozenset(('smallint', 'int', 'integer', 'bigint'))
DECIMAL_TYPES = frozenset(('decimal', 'numeric', 'decfloat', 'real', 'float', 'double'))
CHARACTER_TYPES = frozenset((
    'character', 'char', 'graphic', 'binary', 'varchar', 'vargraphic',
    'varbinary', 'clob', 'dbclob', 'blob',
))
TIME_TYPES = frozenset(('time', 'timestamp', 'datetime'))


ColumnSpec = namedtuple('ColumnSpec', (
    'name',               # The name of the column
    'type',               # Abstract or native type name
    'type_extras',        # Native extras, e.g. "(19,4)"
    'length',             # Requested length (or precision)
    'size',               # Alternative spelling of length
    'precision',          # Requested precision of numeric types
    'scale',              # Requested scale of numeric types
    'decimals',           # Alternative spelling of scale
    'allow_null',         # True if the column accepts NULL
    'default',            # Default value or SQL expression
    'quote_default',      # True if default must be quoted as a literal
    'auto_increment',     # True for identity columns
    'is_primary_key',     # True if the column is the primary key
    'is_foreign_key',     # True if the column references another table
    'is_unique',          # True if the column has a unique constraint
    'fixed_length',       # True for fixed length strings / binaries
    'supports_multibyte', # True for graphic (double byte) strings
), defaults=(None,) * 17)


def column_spec(**kwargs):
    """Builds a ColumnSpec from keyword arguments.

    Values given as strings (e.g. from a configuration file or a web request)
    are accepted for the boolean properties; they are interpreted with
    parse_bool() by the functions that consume them. Unknown keywords raise
    TypeError.
    """
    return ColumnSpec(**kwargs)


def parse_bool(value):
    """Interprets value as a boolean in the permissive manner of form input.

    True, non-zero numbers and the strings "1", "true", "on" and "yes" (in any
    case) are true. Everything else, including None, is false.
    """
    if isinstance(value, bool):
        return value
    elif isinstance(value, (int, float)):
        return value != 0
    elif isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    else:
        return False


def is_numeric(value):
    """Returns True if value is a number or a string containing one."""
    if isinstance(value, bool):
        return False
    elif isinstance(value, (int, float)):
        return True
    elif isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    else:
        return False


def _intval(value):
    try:
        return int(value)
    except ValueError:
        return int(float(value))


def translate_simple_type(spec):
    """Translates the abstract type of spec into a native DB2 type.

    Returns a new ColumnSpec. Types which are not part of the abstract
    vocabulary (including native type names) are returned unchanged.
    """
    simple_type = (spec.type or '').lower()
    if simple_type in ('pk', TYPE_ID):
        return spec._replace(
            type='integer', allow_null=False, auto_increment=True,
            is_primary_key=True)
    elif simple_type in ('fk', TYPE_REF):
        # Resolving the target table is left to the caller
        return spec._replace(type='integer', is_foreign_key=True)
    elif simple_type == TYPE_TIMESTAMP_ON_CREATE:
        if spec.default is None:
            return spec._replace(type='timestamp', allow_null=False, default=CURRENT_TIMESTAMP)
        return spec._replace(type='timestamp', allow_null=False)
    elif simple_type == TYPE_TIMESTAMP_ON_UPDATE:
        if spec.default is None:
            return spec._replace(type='timestamp', allow_null=False, default=ROW_CHANGE_TIMESTAMP)
        return spec._replace(type='timestamp', allow_null=False)
    elif simple_type in (TYPE_USER_ID, TYPE_USER_ID_ON_CREATE, TYPE_USER_ID_ON_UPDATE):
        return spec._replace(type='integer')
    elif simple_type == TYPE_DATETIME:
        return spec._replace(type='TIMESTAMP')
    elif simple_type == TYPE_FLOAT:
        return spec._replace(type='REAL')
    elif simple_type == TYPE_DOUBLE:
        return spec._replace(type='DOUBLE')
    elif simple_type == TYPE_MONEY:
        return spec._replace(type='decimal', type_extras='(19,4)')
    elif simple_type == TYPE_BOOLEAN:
        if spec.default is None:
            return spec._replace(type='smallint')
        return spec._replace(type='smallint', default=int(parse_bool(spec.default)))
    elif simple_type == TYPE_STRING:
        fixed = parse_bool(spec.fixed_length)
        national = parse_bool(spec.supports_multibyte)
        if fixed:
            native = 'graphic' if national else 'character'
        elif national:
            native = 'vargraphic'
        else:
            native = 'varchar'
        return spec._replace(type=native)
    elif simple_type == TYPE_TEXT:
        return spec._replace(type='CLOB')
    elif simple_type == TYPE_BINARY:
        return spec._replace(type='binary' if parse_bool(spec.fixed_length) else 'varbinary')
    else:
        return spec


def validate_column_settings(spec):
    """Normalizes the native settings of spec.

    Derives the type extras clause from the length, precision and scale
    properties where the native type needs one, and coerces numeric defaults
    to the Python type matching the column. Returns a new ColumnSpec.
    """
    native_type = (spec.type or '').lower()
    if native_type in INTEGER_TYPES:
        if spec.default is not None and is_numeric(spec.default):
            return spec._replace(default=_intval(spec.default))
    elif native_type in DECIMAL_TYPES:
        if spec.type_extras is None:
            length = spec.length if spec.length is not None else spec.precision
            if length:
                scale = spec.decimals if spec.decimals is not None else spec.scale
                if scale:
                    spec = spec._replace(type_extras='(%s,%s)' % (length, scale))
                else:
                    spec = spec._replace(type_extras='(%s)' % length)
        if spec.default is not None and is_numeric(spec.default):
            spec = spec._replace(default=float(spec.default))
    elif native_type in CHARACTER_TYPES:
        if spec.length is not None:
            length = spec.length
        elif spec.size is not None:
            length = spec.size
        else:
            length = 255
        spec = spec._replace(type_extras='(%s)' % length)
    elif native_type in TIME_TYPES:
        if spec.default == ZERO_DATETIME:
            spec = spec._replace(default=0)
        length = spec.length if spec.length is not None else spec.size
        if length is not None:
            spec = spec._replace(type_extras='(%s)' % length)
    return spec


def extract_simple_type(db_type, size=None, scale=None):
    """Returns the abstract type corresponding to the native type db_type.

    This is the inverse of translate_simple_type(), though not an exact one:
    several native types share an abstract type, and the id type can only be
    recovered once key information is known (see Table.load).
    """
    t = (db_type or '').strip().lower()
    if 'bool' in t:
        return TYPE_BOOLEAN
    elif t in ('decimal', 'numeric', 'decfloat', 'dec', 'num'):
        return TYPE_DECIMAL
    elif 'double' in t:
        return TYPE_DOUBLE
    elif t == 'real' or 'float' in t:
        return TYPE_DOUBLE if size == 53 else TYPE_FLOAT
    elif 'bigint' in t:
        return TYPE_BIGINT
    elif t in ('smallint', 'int', 'integer'):
        return TYPE_INTEGER
    elif 'timestamp' in t or t == 'timestmp':
        return TYPE_TIMESTAMP
    elif 'datetime' in t:
        return TYPE_DATETIME
    elif t == 'date':
        return TYPE_DATE
    elif 'time' in t:
        return TYPE_TIME
    elif 'binary' in t or 'blob' in t or 'bit data' in t or t == 'varbin':
        return TYPE_BINARY
    elif 'clob' in t or 'text' in t or t in ('long varchar', 'long vargraphic', 'xml'):
        return TYPE_TEXT
    else:
        return TYPE_STRING


def extract_fixed_length(db_type):
    """Returns True if db_type is a fixed length character or binary type."""
    t = (db_type or '').lower()
    if 'var' in t or 'long' in t:
        return False
    return 'char' in t or t in ('graphic', 'binary')


def extract_multibyte_support(db_type):
    """Returns True if db_type stores double byte (graphic) data."""
    t = (db_type or '').lower()
    return (
        'graphic' in t or t == 'varg' or 'dbclob' in t or 'national' in t or
        'nchar' in t)


def typecast(simple_type, value):
    """Converts a catalog default value to the Python type of simple_type.

    Values that don't look like literals of the type (e.g. CURRENT TIMESTAMP
    on a timestamp, or an expression on an integer column) are returned as
    they are.
    """
    if value is None:
        return None
    elif simple_type in (TYPE_ID, TYPE_INTEGER, TYPE_BIGINT, TYPE_REF, TYPE_USER_ID,
            TYPE_USER_ID_ON_CREATE, TYPE_USER_ID_ON_UPDATE):
        return _intval(value) if is_numeric(value) else value
    elif simple_type in (TYPE_FLOAT, TYPE_DOUBLE, TYPE_DECIMAL, TYPE_MONEY):
        return float(value) if is_numeric(value) else value
    elif simple_type == TYPE_BOOLEAN:
        return parse_bool(value)
    else:
        return value


def parse_value_for_set(value, column):
    """Coerces value for writing into column (a db.field.Column)."""
    if value is None:
        return None
    elif column.type == TYPE_BOOLEAN:
        return 1 if parse_bool(value) else 0
    elif column.type == TYPE_INTEGER:
        return _intval(value)
    elif column.type == TYPE_DECIMAL:
        return '%.*f' % (column.scale or 0, float(value))
    elif column.type in (TYPE_DOUBLE, TYPE_FLOAT):
        return float(value)
    else:
        return value
