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

"""Catalog plugin for DB2 for i (iSeries).

Reads the QSYS2 catalog views of a DB2 for i database. All SQL for this
dialect lives in this module.
"""

import logging
from collections import namedtuple

from db2schema.plugins import InputPlugin as BaseInputPlugin
from db2schema.plugins.db2 import make_name, make_str, make_int, make_bool
from db2schema.tuples import (
    TableRow, ColumnRow, ForeignKeyRow, RoutineRow, RoutineParam, NameRow,
)


# Maps QSYS2.SYSPARMS.PARAMETER_MODE to RoutineParam.direction
PARAMETER_MODES = {
    'IN': 'I',
    'OUT': 'O',
    'INOUT': 'B',
}


# SYSPARMS carries the parameter mode separately from the row type, so rows
# are projected onto this wider shape before conversion to RoutineParam
ParamRow = namedtuple('ParamRow', (
    'name',
    'position',
    'row_type',
    'type_name',
    'length',
    'precision',
    'scale',
    'default',
    'mode',
))


class InputPlugin(BaseInputPlugin):
    """Catalog plugin for DB2 for i."""

    dialect = 'DB2 for i'

    def get_schemas(self):
        logging.debug("Retrieving schemas")
        return [
            make_name(row.name)
            for row in self.fetch("""
                SELECT
                    RTRIM(SCHEMA_NAME) AS SCHEMANAME
                FROM
                    QSYS2.SYSSCHEMAS
                ORDER BY SCHEMANAME""", None, NameRow, ('SCHEMANAME',))
        ]

    def get_tables(self, schema=None, include_views=True):
        logging.debug("Retrieving tables")
        sql = """
            SELECT
                RTRIM(TABLE_SCHEMA) AS TABSCHEMA,
                RTRIM(TABLE_NAME)   AS TABNAME,
                TABLE_TYPE          AS TYPE
            FROM
                QSYS2.SYSTABLES
            WHERE TABLE_TYPE IN %(types)s
            AND SYSTEM_TABLE = 'N'
            %(filter)s
            ORDER BY TABNAME""" % {
                'types': ["('T')", "('T', 'V')"][bool(include_views)],
                'filter': ['', 'AND TABLE_SCHEMA = :schema'][bool(schema)],
            }
        return [
            TableRow(make_name(row.schema), make_name(row.name), make_name(row.type))
            for row in self.fetch(sql, {'schema': schema} if schema else None,
                TableRow, ('TABSCHEMA', 'TABNAME', 'TYPE'))
        ]

    def get_columns(self, schema, table):
        logging.debug("Retrieving columns of %s.%s" % (schema, table))
        return [
            ColumnRow(
                make_name(row.name),
                make_int(row.position),
                make_name(row.type_name),
                make_str(row.default),
                bool(make_bool(row.nullable)),
                make_int(row.length),
                make_int(row.scale),
                # IS_IDENTITY is YES/NO rather than Y/N in this catalog
                bool(make_bool(row.identity, 'YES', 'NO')),
            )
            for row in self.fetch("""
                SELECT
                    RTRIM(COLUMN_NAME)                      AS COLNAME,
                    ORDINAL_POSITION                        AS COLNO,
                    RTRIM(DATA_TYPE)                        AS TYPENAME,
                    CAST(COLUMN_DEFAULT AS VARCHAR(254))    AS DEFAULT,
                    IS_NULLABLE                             AS NULLS,
                    LENGTH                                  AS LENGTH,
                    NUMERIC_SCALE                           AS SCALE,
                    IS_IDENTITY                             AS IDENTITY
                FROM
                    QSYS2.SYSCOLUMNS
                WHERE TABLE_SCHEMA = :schema
                AND TABLE_NAME = :table
                ORDER BY ORDINAL_POSITION""", {'schema': schema, 'table': table},
                ColumnRow, (
                    'COLNAME', 'COLNO', 'TYPENAME', 'DEFAULT', 'NULLS',
                    'LENGTH', 'SCALE', 'IDENTITY',
                ))
        ]

    def get_primary_key(self, schema, table):
        logging.debug("Retrieving primary key of %s.%s" % (schema, table))
        # Unlike SYSCAT.INDEXES, each key column is a separate row here
        return [
            make_name(row.name)
            for row in self.fetch("""
                SELECT
                    RTRIM(K.COLUMN_NAME) AS COLNAMES
                FROM
                    QSYS2.SYSCST C
                    INNER JOIN QSYS2.SYSKEYCST K
                        ON C.CONSTRAINT_SCHEMA = K.CONSTRAINT_SCHEMA
                        AND C.CONSTRAINT_NAME = K.CONSTRAINT_NAME
                        AND C.TABLE_SCHEMA = K.TABLE_SCHEMA
                        AND C.TABLE_NAME = K.TABLE_NAME
                WHERE C.CONSTRAINT_TYPE = 'PRIMARY KEY'
                AND C.TABLE_SCHEMA = :schema
                AND C.TABLE_NAME = :table
                ORDER BY K.ORDINAL_POSITION""", {'schema': schema, 'table': table},
                NameRow, ('COLNAMES',))
        ]

    def get_foreign_keys(self, schema, table):
        logging.debug("Retrieving foreign keys of %s.%s" % (schema, table))
        return [
            ForeignKeyRow(*(make_name(value) for value in row))
            for row in self.fetch("""
                SELECT
                    RTRIM(CHILD.TABLE_SCHEMA)   AS TABLE_SCHEMA,
                    RTRIM(CHILD.TABLE_NAME)     AS TABLE_NAME,
                    RTRIM(CHILD.COLUMN_NAME)    AS COLUMN_NAME,
                    RTRIM(PARENT.TABLE_SCHEMA)  AS REFERENCED_TABLE_SCHEMA,
                    RTRIM(PARENT.TABLE_NAME)    AS REFERENCED_TABLE_NAME,
                    RTRIM(PARENT.COLUMN_NAME)   AS REFERENCED_COLUMN_NAME
                FROM
                    QSYS2.SYSKEYCST CHILD
                    INNER JOIN QSYS2.SYSREFCST CROSSREF
                        ON CHILD.CONSTRAINT_SCHEMA = CROSSREF.CONSTRAINT_SCHEMA
                        AND CHILD.CONSTRAINT_NAME = CROSSREF.CONSTRAINT_NAME
                    INNER JOIN QSYS2.SYSKEYCST PARENT
                        ON CROSSREF.UNIQUE_CONSTRAINT_SCHEMA = PARENT.CONSTRAINT_SCHEMA
                        AND CROSSREF.UNIQUE_CONSTRAINT_NAME = PARENT.CONSTRAINT_NAME
                        AND CHILD.ORDINAL_POSITION = PARENT.ORDINAL_POSITION
                    INNER JOIN QSYS2.SYSCST CONINFO
                        ON CHILD.CONSTRAINT_SCHEMA = CONINFO.CONSTRAINT_SCHEMA
                        AND CHILD.CONSTRAINT_NAME = CONINFO.CONSTRAINT_NAME
                WHERE CHILD.TABLE_SCHEMA = :schema
                AND CHILD.TABLE_NAME = :table
                AND CONINFO.CONSTRAINT_TYPE = 'FOREIGN KEY'
                ORDER BY CHILD.CONSTRAINT_NAME, CHILD.ORDINAL_POSITION""",
                {'schema': schema, 'table': table}, ForeignKeyRow, (
                    'TABLE_SCHEMA', 'TABLE_NAME', 'COLUMN_NAME',
                    'REFERENCED_TABLE_SCHEMA', 'REFERENCED_TABLE_NAME',
                    'REFERENCED_COLUMN_NAME',
                ))
        ]

    def get_routines(self, routine_type, schema=None):
        logging.debug("Retrieving routines of type %s" % routine_type)
        params = {'type': routine_type}
        if schema:
            params['schema'] = schema
        sql = """
            SELECT
                RTRIM(ROUTINE_SCHEMA)   AS ROUTINESCHEMA,
                RTRIM(SPECIFIC_NAME)    AS SPECIFICNAME,
                RTRIM(ROUTINE_NAME)     AS ROUTINENAME,
                FUNCTION_TYPE           AS FUNCTIONTYPE
            FROM
                QSYS2.SYSROUTINES
            WHERE FUNCTION_ORIGIN <> 'S'
            AND ROUTINE_TYPE = :type
            %(filter)s
            ORDER BY ROUTINESCHEMA, ROUTINENAME""" % {
                'filter': ['', 'AND ROUTINE_SCHEMA = :schema'][bool(schema)],
            }
        # The catalog has no declared return type; the return value of a
        # scalar function is a row of SYSPARMS
        return [
            RoutineRow(
                make_name(row.schema),
                make_name(row.specific),
                make_name(row.name),
                None,
                (make_name(row.func_type) or None) if routine_type == 'FUNCTION' else None,
            )
            for row in self.fetch(sql, params, RoutineRow, (
                'ROUTINESCHEMA', 'SPECIFICNAME', 'ROUTINENAME',
                'RETURN_TYPENAME', 'FUNCTIONTYPE',
            ))
        ]

    def get_routine_params(self, schema, specific, name):
        logging.debug("Retrieving parameters of %s.%s" % (schema, specific))
        result = []
        for row in self.fetch("""
                SELECT
                    RTRIM(PARAMETER_NAME)   AS PARAMETER_NAME,
                    ORDINAL_POSITION        AS ORDINAL_POSITION,
                    ROW_TYPE                AS ROW_TYPE,
                    RTRIM(DATA_TYPE)        AS DATA_TYPE,
                    CHARACTER_MAXIMUM_LENGTH AS CHARACTER_MAXIMUM_LENGTH,
                    NUMERIC_PRECISION       AS NUMERIC_PRECISION,
                    NUMERIC_SCALE           AS NUMERIC_SCALE,
                    DEFAULT                 AS DEFAULT,
                    PARAMETER_MODE          AS PARAMETER_MODE
                FROM
                    QSYS2.SYSPARMS
                WHERE SPECIFIC_SCHEMA = :schema
                AND SPECIFIC_NAME = :specific
                ORDER BY ORDINAL_POSITION""", {
                    'schema': schema, 'specific': specific,
                }, ParamRow, (
                    'PARAMETER_NAME', 'ORDINAL_POSITION', 'ROW_TYPE',
                    'DATA_TYPE', 'CHARACTER_MAXIMUM_LENGTH',
                    'NUMERIC_PRECISION', 'NUMERIC_SCALE', 'DEFAULT',
                    'PARAMETER_MODE',
                )):
            row_type = make_name(row.row_type)
            if row_type == 'P':
                direction = PARAMETER_MODES.get(make_name(row.mode))
            elif row_type in ('R', 'C'):
                direction = 'R'
            else:
                direction = None
            if direction is None:
                continue
            result.append(RoutineParam(
                make_name(row.name) or None,
                make_int(row.position),
                direction,
                make_name(row.type_name),
                make_int(row.length),
                make_int(row.precision),
                make_int(row.scale),
                make_str(row.default),
            ))
        return result

