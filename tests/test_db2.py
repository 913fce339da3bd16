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

import threading

import pytest

from db2schema.plugins.db2 import (
    bind_params, Connection, DialectDetector, make_str, make_name, make_int,
    make_bool,
)
from conftest import FakeConnection, PROBE


def test_bind_named():
    assert bind_params('SELECT * FROM T WHERE A = :a AND B = :b', {'a': 1, 'b': 'x'}) == (
        'SELECT * FROM T WHERE A = ? AND B = ?', (1, 'x'))
    assert bind_params('SELECT :b, :a, :b FROM T', {':a': 1, ':b': 2}) == (
        'SELECT ?, ?, ? FROM T', (2, 1, 2))

def test_bind_leaves_literals():
    assert bind_params("SELECT ':a', \"X:b\" FROM T WHERE C = :c", {'c': 3}) == (
        "SELECT ':a', \"X:b\" FROM T WHERE C = ?", (3,))
    assert bind_params("VALUES 'it''s :a'", {}) == ("VALUES 'it''s :a'", ())

def test_bind_positional():
    assert bind_params('SELECT * FROM T WHERE A = ?', [1]) == ('SELECT * FROM T WHERE A = ?', (1,))
    assert bind_params('SELECT 1 FROM T') == ('SELECT 1 FROM T', ())

def test_bind_missing():
    with pytest.raises(KeyError):
        bind_params('SELECT * FROM T WHERE A = :a', {'b': 1})

def test_connection_query():
    db = FakeConnection([('FROM T', [{'A': 1, 'B': 'x'}, {'A': 2, 'B': 'y'}])])
    conn = Connection(db)
    rows = conn.query('SELECT A, B FROM T WHERE A > :low', {'low': 0})
    assert rows == [{'A': 1, 'B': 'x'}, {'A': 2, 'B': 'y'}]
    assert list(rows[0].keys()) == ['A', 'B']
    assert db.executed == [('SELECT A, B FROM T WHERE A > ?', (0,))]
    assert conn.scalar('SELECT A FROM T') == 1
    assert conn.scalar('SELECT A FROM U') is None

def test_connection_execute():
    db = FakeConnection([('BAD', ValueError('SQL0104N'))])
    conn = Connection(db)
    conn.execute('DELETE FROM T WHERE A = ?', [1])
    conn.set_current_schema('myschema')
    assert db.executed[-1] == ('SET SCHEMA ?', ('MYSCHEMA',))
    with pytest.raises(ValueError):
        conn.execute('BAD STATEMENT')
    conn.close()
    assert db.closed

def test_detect_luw(luw_db, luw_conn):
    detector = DialectDetector(luw_conn)
    assert detector.is_iseries() is False
    assert detector.is_iseries() is False
    assert detector.plugin_name == 'db2.luw'
    assert len(luw_db.statements(PROBE)) == 1

def test_detect_iseries(iseries_db, iseries_conn):
    detector = DialectDetector(iseries_conn)
    assert detector.is_iseries() is True
    assert detector.plugin_name == 'db2.iseries'
    assert len(iseries_db.statements(PROBE)) == 1

def test_detect_once_concurrently(luw_db, luw_conn):
    detector = DialectDetector(luw_conn)
    results = []
    threads = [
        threading.Thread(target=lambda: results.append(detector.is_iseries()))
        for i in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert results == [False] * 8
    assert len(luw_db.statements(PROBE)) == 1

def test_make_values():
    assert make_str(b'abc') == 'abc'
    assert make_str(None) is None
    assert make_name('EMP     ') == 'EMP'
    assert make_name(None) is None
    assert make_int(4.0) == 4
    assert make_int(None) is None
    with pytest.raises(ValueError):
        make_int('4')
    assert make_bool('Y') is True
    assert make_bool('N ') is False
    assert make_bool(' ') is None
    assert make_bool('YES', 'YES', 'NO') is True
    assert make_bool('X') is None
    with pytest.raises(ValueError):
        make_bool('X', unknown_error=True)
