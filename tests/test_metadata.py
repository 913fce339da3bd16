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

import time
import threading

import pytest

from db2schema.db.field import Column, strip_default
from db2schema.db.param import Parameter
from db2schema.db.routine import Procedure, Function
from db2schema.db.schema import SchemaCache
from db2schema.db.table import Table
from db2schema.db.util import quote_ident, quote_table_name, qualified_name
from db2schema.invoker import bind_arguments, invoke
from db2schema.tuples import ColumnRow, ForeignKeyRow, RoutineParam


def param(name, position, direction='I', type_name='INTEGER', default=None):
    return RoutineParam(name, position, direction, type_name, None, None, None, default)

def test_quoting():
    assert quote_ident('EMP') == '"EMP"'
    assert quote_ident('A"B') == '"A""B"'
    assert quote_table_name('S.EMP') == '"S"."EMP"'
    assert quote_table_name('"S"."EMP"') == '"S"."EMP"'
    assert qualified_name('S', 'EMP', True) == ('S.EMP', '"S"."EMP"')
    assert qualified_name('S', 'EMP', False) == ('EMP', '"EMP"')

def test_strip_default():
    assert strip_default("'abc'") == 'abc'
    assert strip_default('NULL') is None
    assert strip_default("'NULL'") is None
    assert strip_default('CURRENT TIMESTAMP') == 'CURRENT TIMESTAMP'
    assert strip_default(None) is None

def test_column():
    column = Column(ColumnRow('PRICE', 3, 'DECIMAL', '9.99', True, 7, 2, False))
    assert (column.size, column.precision, column.scale) == (7, 7, 2)
    assert column.type == 'decimal'
    assert column.default_value == 9.99
    assert column.type_str == 'DECIMAL(7,2)'
    assert column.raw_name == '"PRICE"'
    column = Column(ColumnRow('CODE', 0, 'CHARACTER', "'AB'", False, 2, 0, False))
    assert column.fixed_length and not column.supports_multibyte
    assert (column.size, column.scale) == (2, None)
    assert column.default_value == 'AB'
    assert column.type_str == 'CHARACTER(2)'
    column = Column(ColumnRow('N', 0, 'INTEGER', None, True, 4, 0, False))
    assert column.size is None
    assert column.type_str == 'INTEGER'

def test_table_columns():
    table = Table('S', 'T', 'T', '"T"')
    assert table.load_columns([]) is False
    assert table.load_columns([
        ColumnRow('A', 0, 'INTEGER', None, False, 4, 0, False),
        ColumnRow('B', 1, 'VARCHAR', None, True, 10, 0, False),
    ]) is True
    assert table.column_names == ['A', 'B']
    assert table.get_column('b') is table.get_column('B')
    assert table.get_column('C') is None
    table.load_primary_key(['A'])
    assert table.primary_key == 'A'
    assert table.sequence_name is None
    assert table.get_column('A').type == 'integer'
    assert table.primary_key_columns == [table.get_column('A')]
    table.load_foreign_keys([ForeignKeyRow('S', 'T', 'B', 'S', 'U', 'ID')])
    assert table.get_column('B').is_foreign_key
    assert table.get_column('B').ref_table == 'S.U'
    copy = table.copy()
    assert (copy.name, copy.columns, copy.primary_key) == ('T', [], None)

def test_routine_parameters():
    routine = Procedure('S', 'SQL1', 'P', 'P', '"P"')
    routine.load_parameters([param('B', 2), param(None, 1, 'O')])
    assert [p.name for p in routine.parameters] == ['P1', 'B']
    assert routine.parameters[0].param_type == 'OUT'
    assert routine.get_parameter('b').position == 2
    with pytest.raises(ValueError):
        routine.add_parameter(Parameter(param('C', 2)))

def test_function_shapes():
    assert Function('S', 'X', 'F', 'F', '"F"', func_type='R').return_type == 'row'
    assert Function('S', 'X', 'F', 'F', '"F"', func_type='T').return_type == 'table'
    assert Function('S', 'X', 'F', 'F', '"F"', func_type='C').return_type == 'column'
    assert Function('S', 'X', 'F', 'F', '"F"', func_type='S').return_type is None
    assert Function('S', 'X', 'F', 'F', '"F"', 'integer', 'S').return_type == 'integer'

def test_scalar_return_type():
    function = Function('S', 'X', 'F', 'F', '"F"', func_type='S')
    function.load_parameters([param('RESULT', 1, 'R', 'VARCHAR'), param('X', 1)])
    assert function.return_type == 'string'
    assert function.return_schema == []
    function = Function('S', 'X', 'F', 'F', '"F"', func_type='S')
    function.load_parameters([param(None, 0, 'R', 'DECIMAL')])
    assert function.return_type == 'decimal'

def test_bind_arguments():
    routine = Procedure('S', 'SQL1', 'P', 'P', '"P"')
    routine.load_parameters([
        param('A', 1), param('B', 2, 'B', default="'x'"), param('C', 3, 'O'),
    ])
    assert bind_arguments(routine) == [None, 'x', None]
    assert bind_arguments(routine, [1]) == [1, 'x', None]
    assert bind_arguments(routine, [1, 2, 3]) == [1, 2, None]
    assert bind_arguments(routine, {'b': 2}) == [None, 2, None]
    with pytest.raises(ValueError):
        bind_arguments(routine, [1, 2, 3, 4])
    with pytest.raises(ValueError):
        bind_arguments(routine, {'d': 1})

def test_invoke():
    procedure = Procedure('S', 'SQL1', 'P', 'S.P', '"S"."P"')
    procedure.load_parameters([param('A', 1)])
    assert invoke(procedure, [1]) == ('CALL "S"."P"(?)', [1])
    function = Function('S', 'SQL2', 'F', 'F', '"F"', func_type='R')
    assert invoke(function) == ('SELECT * FROM TABLE("F"())', [])
    function = Function('S', 'SQL3', 'F', 'F', '"F"', func_type='C')
    function.load_parameters([param('A', 1)])
    assert invoke(function, [2]) == ('SELECT "F"(?) AS "output" FROM SYSIBM.SYSDUMMY1', [2])

def test_cache():
    cache = SchemaCache()
    calls = []
    def loader():
        calls.append(1)
        return 'value'
    assert cache.get('A', loader) == 'value'
    assert cache.get('a', loader) == 'value'
    assert calls == [1]
    assert 'A' in cache and len(cache) == 1
    assert cache.peek('a') == 'value'
    assert cache.get('B', lambda: None) is None
    assert 'b' not in cache
    cache.invalidate('A')
    assert cache.peek('a') is None
    cache.get('A', loader)
    cache.invalidate()
    assert len(cache) == 0
    assert calls == [1, 1]

def test_cache_drops_locks():
    cache = SchemaCache()
    cache.get('A', lambda: 'value')
    cache.get('B', lambda: 'value')
    assert sorted(cache._locks) == ['a', 'b']
    cache.get('MISSING', lambda: None)
    assert 'missing' not in cache._locks
    cache.invalidate('A')
    assert sorted(cache._locks) == ['b']
    cache.invalidate()
    assert cache._locks == {}

def test_cache_single_loader():
    cache = SchemaCache()
    calls = []
    def loader():
        calls.append(1)
        time.sleep(0.05)
        return object()
    results = []
    threads = [
        threading.Thread(target=lambda: results.append(cache.get('T', loader)))
        for i in range(5)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert calls == [1]
    assert len(set(id(result) for result in results)) == 1
