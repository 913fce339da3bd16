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

import pytest

from db2schema.plugins.db2 import Connection


class FakeCursor(object):
    def __init__(self, connection):
        self.connection = connection
        self.description = None
        self._rows = []

    def execute(self, sql, values=()):
        values = tuple(values)
        self.connection.executed.append((sql, values))
        key = ' '.join(sql.split()).upper()
        result = []
        for (fragment, answer) in self.connection.script:
            if fragment.upper() in key:
                result = answer
                break
        if callable(result):
            result = result(values)
        if isinstance(result, Exception):
            raise result
        names = list(result[0].keys()) if result else []
        self.description = [(name, None, None, None, None, None, None) for name in names]
        self._rows = [tuple(row[name] for name in names) for row in result]

    def fetchall(self):
        (rows, self._rows) = (self._rows, [])
        return rows

    def fetchone(self):
        if self._rows:
            return self._rows.pop(0)
        return None

    def close(self):
        pass


class FakeConnection(object):
    """A scripted DB-API connection.

    Each entry of script is a (fragment, answer) pair. A statement is answered
    by the first entry whose fragment appears in it (compared with whitespace
    normalized and without regard to case). An answer is a list of row dicts,
    an exception to raise, or a callable taking the bound values and
    returning either.
    """

    def __init__(self, script=None):
        self.script = list(script or [])
        self.executed = []
        self.closed = False

    def add(self, fragment, answer):
        self.script.append((fragment, answer))

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True

    def statements(self, fragment=''):
        return [
            (sql, values) for (sql, values) in self.executed
            if fragment.upper() in ' '.join(sql.split()).upper()
        ]


PROBE = 'FETCH FIRST 1 ROW ONLY'


@pytest.fixture
def luw_db():
    db = FakeConnection()
    db.add(PROBE, Exception('SQL0204N  "QSYS2.SYSTABLES" is an undefined name.'))
    db.add('VALUES CURRENT_SCHEMA', [{'1': 'MYSCHEMA  '}])
    return db


@pytest.fixture
def iseries_db():
    db = FakeConnection()
    db.add(PROBE, [])
    db.add('VALUES CURRENT_SCHEMA', [{'00001': 'MYLIB'}])
    return db


@pytest.fixture
def luw_conn(luw_db):
    return Connection(luw_db)


@pytest.fixture
def iseries_conn(iseries_db):
    return Connection(iseries_db)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if not handler in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
