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

"""Catalog plugin for DB2 for Linux, UNIX and Windows.

Reads the SYSCAT views of a DB2 LUW database. All SQL for this dialect lives
in this module.
"""

import logging

from db2schema.plugins import InputPlugin as BaseInputPlugin
from db2schema.plugins.db2 import make_name, make_str, make_int, make_bool
from db2schema.tuples import (
    TableRow, ColumnRow, ForeignKeyRow, RoutineRow, RoutineParam, NameRow,
)


# Maps SYSCAT.ROUTINEPARMS.ROWTYPE to RoutineParam.direction. Rows of any
# other type (e.g. 'S' for the source of a sourced function) are skipped
ROW_TYPES = {
    'P': 'I',
    'O': 'O',
    'B': 'B',
    'R': 'R',
    'C': 'R',
}


class InputPlugin(BaseInputPlugin):
    """Catalog plugin for DB2 for Linux, UNIX and Windows."""

    dialect = 'DB2 for Linux, UNIX and Windows'

    def get_schemas(self):
        logging.debug("Retrieving schemas")
        return [
            make_name(row.name)
            for row in self.fetch("""
                SELECT
                    RTRIM(SCHEMANAME) AS SCHEMANAME
                FROM
                    SYSCAT.SCHEMATA
                WHERE DEFINERTYPE <> 'S'
                ORDER BY SCHEMANAME""", None, NameRow, ('SCHEMANAME',))
        ]

    def get_tables(self, schema=None, include_views=True):
        logging.debug("Retrieving tables")
        sql = """
            SELECT
                RTRIM(TABSCHEMA) AS TABSCHEMA,
                RTRIM(TABNAME)   AS TABNAME,
                TYPE             AS TYPE
            FROM
                SYSCAT.TABLES
            WHERE TYPE IN %(types)s
            AND OWNERTYPE <> 'S'
            %(filter)s
            ORDER BY TABNAME""" % {
                'types': ["('T')", "('T', 'V')"][bool(include_views)],
                'filter': ['', 'AND TABSCHEMA = :schema'][bool(schema)],
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
                bool(make_bool(row.identity)),
            )
            for row in self.fetch("""
                SELECT
                    RTRIM(COLNAME)                  AS COLNAME,
                    COLNO                           AS COLNO,
                    RTRIM(TYPENAME)                 AS TYPENAME,
                    CAST(DEFAULT AS VARCHAR(254))   AS DEFAULT,
                    NULLS                           AS NULLS,
                    LENGTH                          AS LENGTH,
                    SCALE                           AS SCALE,
                    IDENTITY                        AS IDENTITY
                FROM
                    SYSCAT.COLUMNS
                WHERE TABSCHEMA = :schema
                AND TABNAME = :table
                ORDER BY COLNO""", {'schema': schema, 'table': table},
                ColumnRow, (
                    'COLNAME', 'COLNO', 'TYPENAME', 'DEFAULT', 'NULLS',
                    'LENGTH', 'SCALE', 'IDENTITY',
                ))
        ]

    def get_primary_key(self, schema, table):
        logging.debug("Retrieving primary key of %s.%s" % (schema, table))
        result = []
        for row in self.fetch("""
                SELECT
                    COLNAMES AS COLNAMES
                FROM
                    SYSCAT.INDEXES
                WHERE UNIQUERULE = 'P'
                AND TABSCHEMA = :schema
                AND TABNAME = :table""", {'schema': schema, 'table': table},
                NameRow, ('COLNAMES',)):
            # COLNAMES lists the key columns each prefixed by its direction,
            # e.g. "+ID" or "+DEPTNO+EMPNO"
            colnames = make_str(row.name).strip().lstrip('+')
            result.extend(name for name in colnames.split('+') if name)
        return result

    def get_foreign_keys(self, schema, table):
        logging.debug("Retrieving foreign keys of %s.%s" % (schema, table))
        return [
            ForeignKeyRow(*(make_name(value) for value in row))
            for row in self.fetch("""
                SELECT
                    RTRIM(FK.TABSCHEMA) AS TABLE_SCHEMA,
                    RTRIM(FK.TABNAME)   AS TABLE_NAME,
                    RTRIM(FK.COLNAME)   AS COLUMN_NAME,
                    RTRIM(PK.TABSCHEMA) AS REFERENCED_TABLE_SCHEMA,
                    RTRIM(PK.TABNAME)   AS REFERENCED_TABLE_NAME,
                    RTRIM(PK.COLNAME)   AS REFERENCED_COLUMN_NAME
                FROM
                    SYSCAT.REFERENCES R
                    INNER JOIN SYSCAT.KEYCOLUSE FK
                        ON FK.CONSTNAME = R.CONSTNAME
                        AND FK.TABSCHEMA = R.TABSCHEMA
                        AND FK.TABNAME = R.TABNAME
                    INNER JOIN SYSCAT.KEYCOLUSE PK
                        ON PK.CONSTNAME = R.REFKEYNAME
                        AND PK.TABSCHEMA = R.REFTABSCHEMA
                        AND PK.TABNAME = R.REFTABNAME
                        AND PK.COLSEQ = FK.COLSEQ
                WHERE R.TABSCHEMA = :schema
                AND R.TABNAME = :table
                ORDER BY R.CONSTNAME, FK.COLSEQ""", {'schema': schema, 'table': table},
                ForeignKeyRow, (
                    'TABLE_SCHEMA', 'TABLE_NAME', 'COLUMN_NAME',
                    'REFERENCED_TABLE_SCHEMA', 'REFERENCED_TABLE_NAME',
                    'REFERENCED_COLUMN_NAME',
                ))
        ]

    def get_routines(self, routine_type, schema=None):
        logging.debug("Retrieving routines of type %s" % routine_type)
        params = {'type': {'PROCEDURE': 'P', 'FUNCTION': 'F'}[routine_type]}
        if schema:
            params['schema'] = schema
        sql = """
            SELECT
                RTRIM(ROUTINESCHEMA)    AS ROUTINESCHEMA,
                RTRIM(SPECIFICNAME)     AS SPECIFICNAME,
                RTRIM(ROUTINENAME)      AS ROUTINENAME,
                RTRIM(RETURN_TYPENAME)  AS RETURN_TYPENAME,
                FUNCTIONTYPE            AS FUNCTIONTYPE
            FROM
                SYSCAT.ROUTINES
            WHERE OWNERTYPE <> 'S'
            AND ROUTINETYPE = :type
            %(filter)s
            ORDER BY ROUTINESCHEMA, ROUTINENAME""" % {
                'filter': ['', 'AND ROUTINESCHEMA = :schema'][bool(schema)],
            }
        return [
            RoutineRow(
                make_name(row.schema),
                make_name(row.specific),
                make_name(row.name),
                make_name(row.return_type) or None,
                # FUNCTIONTYPE is blank for procedures
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
                    RTRIM(PARMNAME)                 AS PARMNAME,
                    ORDINAL                         AS ORDINAL,
                    ROWTYPE                         AS ROWTYPE,
                    RTRIM(TYPENAME)                 AS TYPENAME,
                    LENGTH                          AS LENGTH,
                    LENGTH                          AS PRECISION,
                    SCALE                           AS SCALE,
                    CAST(DEFAULT AS VARCHAR(254))   AS DEFAULT
                FROM
                    SYSCAT.ROUTINEPARMS
                WHERE ROUTINESCHEMA = :schema
                AND ROUTINENAME = :name
                AND SPECIFICNAME = :specific
                ORDER BY ORDINAL""", {
                    'schema': schema, 'name': name, 'specific': specific,
                }, RoutineParam, (
                    'PARMNAME', 'ORDINAL', 'ROWTYPE', 'TYPENAME', 'LENGTH',
                    'PRECISION', 'SCALE', 'DEFAULT',
                )):
            direction = ROW_TYPES.get(make_name(row.direction))
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
