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

import pytest

from db2schema.types import (
    ColumnSpec, column_spec, translate_simple_type, validate_column_settings,
    extract_simple_type, extract_fixed_length, extract_multibyte_support,
    parse_bool, parse_value_for_set, typecast, CURRENT_TIMESTAMP,
    ROW_CHANGE_TIMESTAMP,
)
from db2schema.db.field import Column
from db2schema.tuples import ColumnRow


def native(**kwargs):
    return validate_column_settings(translate_simple_type(column_spec(**kwargs)))

def round_trip(**kwargs):
    spec = native(**kwargs)
    return extract_simple_type(spec.type)

def test_column_spec_is_closed():
    with pytest.raises(TypeError):
        column_spec(type='string', colour='red')
    assert column_spec(type='string').length is None

def test_translate_does_not_modify():
    spec = column_spec(type='id')
    translate_simple_type(spec)
    assert spec == ColumnSpec(type='id')

def test_translate_id():
    spec = translate_simple_type(column_spec(type='id'))
    assert spec.type == 'integer'
    assert spec.allow_null is False
    assert spec.auto_increment is True
    assert spec.is_primary_key is True
    assert translate_simple_type(column_spec(type='pk')).is_primary_key

def test_translate_reference():
    spec = translate_simple_type(column_spec(type='reference'))
    assert spec.type == 'integer'
    assert spec.is_foreign_key is True

def test_translate_timestamps():
    spec = translate_simple_type(column_spec(type='timestamp_on_create'))
    assert (spec.type, spec.allow_null, spec.default) == ('timestamp', False, CURRENT_TIMESTAMP)
    spec = translate_simple_type(column_spec(type='timestamp_on_update'))
    assert (spec.type, spec.allow_null, spec.default) == ('timestamp', False, ROW_CHANGE_TIMESTAMP)
    spec = translate_simple_type(column_spec(type='timestamp_on_update', default='0'))
    assert spec.default == '0'

def test_translate_numerics():
    assert translate_simple_type(column_spec(type='datetime')).type == 'TIMESTAMP'
    assert translate_simple_type(column_spec(type='float')).type == 'REAL'
    assert translate_simple_type(column_spec(type='double')).type == 'DOUBLE'
    spec = translate_simple_type(column_spec(type='money'))
    assert (spec.type, spec.type_extras) == ('decimal', '(19,4)')

def test_translate_boolean():
    assert translate_simple_type(column_spec(type='boolean')).type == 'smallint'
    assert translate_simple_type(column_spec(type='boolean', default='true')).default == 1
    assert translate_simple_type(column_spec(type='boolean', default='off')).default == 0
    assert translate_simple_type(column_spec(type='boolean', default=False)).default == 0

def test_translate_strings():
    assert translate_simple_type(column_spec(type='string')).type == 'varchar'
    assert translate_simple_type(column_spec(type='string', fixed_length=True)).type == 'character'
    assert translate_simple_type(column_spec(type='string', fixed_length='1', supports_multibyte='yes')).type == 'graphic'
    assert translate_simple_type(column_spec(type='string', supports_multibyte=True)).type == 'vargraphic'
    assert translate_simple_type(column_spec(type='text')).type == 'CLOB'
    assert translate_simple_type(column_spec(type='binary')).type == 'varbinary'
    assert translate_simple_type(column_spec(type='binary', fixed_length=True)).type == 'binary'

def test_translate_native_passthru():
    spec = column_spec(type='XML')
    assert translate_simple_type(spec) is spec

def test_validate_extras():
    assert native(type='string').type_extras == '(255)'
    assert native(type='string', length=50).type_extras == '(50)'
    assert native(type='string', size=20).type_extras == '(20)'
    assert native(type='decimal', precision=10, scale=2).type_extras == '(10,2)'
    assert native(type='decimal', length=8, decimals=3).type_extras == '(8,3)'
    assert native(type='decimal', length=8).type_extras == '(8)'
    assert native(type='money', length=5).type_extras == '(19,4)'
    assert native(type='integer', default='42').default == 42
    assert native(type='decimal', default='1.5').default == 1.5
    assert native(type='timestamp', default='0000-00-00 00:00:00').default == 0

def test_round_trip_families():
    assert round_trip(type='integer') == 'integer'
    # The id type is only recovered once key information is known
    assert round_trip(type='id') == 'integer'
    assert round_trip(type='reference') == 'integer'
    assert round_trip(type='bigint') == 'bigint'
    assert round_trip(type='float') == 'float'
    assert round_trip(type='double') == 'double'
    assert round_trip(type='decimal') == 'decimal'
    assert round_trip(type='money') == 'decimal'
    assert round_trip(type='string') == 'string'
    assert round_trip(type='string', fixed_length=True, supports_multibyte=True) == 'string'
    assert round_trip(type='text') == 'text'
    assert round_trip(type='binary') == 'binary'
    assert round_trip(type='date') == 'date'
    assert round_trip(type='time') == 'time'
    assert round_trip(type='datetime') == 'timestamp'
    assert round_trip(type='timestamp_on_create') == 'timestamp'
    assert round_trip(type='timestamp_on_update') == 'timestamp'
    # Booleans are stored as smallint, so come back as integers
    assert round_trip(type='boolean') == 'integer'
    assert round_trip(type='user_id') == 'integer'
    assert round_trip(type='user_id_on_create') == 'integer'
    assert round_trip(type='user_id_on_update') == 'integer'

def test_extract_simple_type():
    assert extract_simple_type('TIMESTMP') == 'timestamp'
    assert extract_simple_type('VARBIN') == 'binary'
    assert extract_simple_type('VARG') == 'string'
    assert extract_simple_type('TIMESTAMP') == 'timestamp'
    assert extract_simple_type('VARCHAR') == 'string'
    assert extract_simple_type('CHARACTER') == 'string'
    assert extract_simple_type('SMALLINT') == 'integer'
    assert extract_simple_type('BLOB') == 'binary'
    assert extract_simple_type('DBCLOB') == 'text'
    assert extract_simple_type('FLOAT', 53) == 'double'
    assert extract_simple_type(None) == 'string'

def test_extract_flags():
    assert extract_fixed_length('CHARACTER')
    assert extract_fixed_length('GRAPHIC')
    assert not extract_fixed_length('VARCHAR')
    assert not extract_fixed_length('LONG VARCHAR')
    assert extract_multibyte_support('VARGRAPHIC')
    assert extract_multibyte_support('DBCLOB')
    assert not extract_multibyte_support('VARCHAR')
    assert extract_multibyte_support('VARG')
    assert not extract_multibyte_support('VARBIN')
    assert not extract_fixed_length('VARG')
    assert not extract_fixed_length('VARBIN')

def test_parse_bool():
    for value in (True, 1, '1', 'true', 'ON', ' yes '):
        assert parse_bool(value) is True
    for value in (False, 0, '', '0', 'false', 'no', None):
        assert parse_bool(value) is False

def test_typecast():
    assert typecast('integer', '10') == 10
    assert typecast('integer', 'NEXT VALUE FOR S') == 'NEXT VALUE FOR S'
    assert typecast('decimal', '2.50') == 2.5
    assert typecast('boolean', '1') is True
    assert typecast('string', 'abc') == 'abc'
    assert typecast('string', None) is None

def test_parse_value_for_set():
    flag = Column(ColumnRow('FLAG', 0, 'BOOLEAN', None, False, 1, 0, False))
    count = Column(ColumnRow('COUNT', 1, 'INTEGER', None, False, 4, 0, False))
    amount = Column(ColumnRow('AMOUNT', 2, 'DECIMAL', None, True, 9, 2, False))
    ratio = Column(ColumnRow('RATIO', 3, 'DOUBLE', None, True, 8, 0, False))
    name = Column(ColumnRow('NAME', 4, 'VARCHAR', None, True, 50, 0, False))
    assert parse_value_for_set('yes', flag) == 1
    assert parse_value_for_set('false', flag) == 0
    assert parse_value_for_set('12', count) == 12
    assert parse_value_for_set('3.14159', amount) == '3.14'
    assert parse_value_for_set('0.5', ratio) == 0.5
    assert parse_value_for_set('x', name) == 'x'
    assert parse_value_for_set(None, count) is None
