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

import sys
import logging

import db2schema.main
from db2schema.config import DatabaseConfig, read_config
from db2schema.ddl import build_column_ddl
from db2schema.schema import Db2Schema
from db2schema.types import column_spec


COMMANDS = ('schemas', 'tables', 'describe', 'routines', 'call', 'ddl')


class SchemaUtility(db2schema.main.Utility):
    """%prog [options] command [args]

    This utility queries the catalog of a DB2 database (either DB2 for Linux,
    UNIX and Windows, or DB2 for i). The command is one of "schemas" (list
    the schemas), "tables [schema]" (list the tables and views), "describe
    table" (show the columns and keys of a table), "routines [schema]" (list
    procedures and functions), "call routine [arg]..." (show the statement
    invoking a routine), or "ddl type [property=value]..." (show the column
    definition for an abstract type, without connecting). Connection
    parameters are read from the [database] section of the file given with
    --config.
    """

    def __init__(self):
        super(SchemaUtility, self).__init__()
        self.parser.set_defaults(
            config='',
        )
        self.parser.add_option(
            '-c', '--config', dest='config',
            help='specify the configuration file')

    def main(self, options, args):
        super(SchemaUtility, self).main(options, args)
        if not args:
            self.parser.error('you must specify a command')
        (command, args) = (args[0].lower(), args[1:])
        if not command in COMMANDS:
            self.parser.error('unknown command "%s"' % command)
        if command == 'ddl':
            return self.do_ddl(args)
        if not options.config:
            self.parser.error('you must specify a configuration file with --config')
        schema = self.open_schema(options.config)
        return getattr(self, 'do_%s' % command)(schema, args)

    def open_schema(self, filename):
        """Connects to the database described by the configuration file"""
        config = read_config(filename)
        database = DatabaseConfig(config.get('database', {}))
        return Db2Schema(
            database.connect(),
            database.options['schema'],
            config.get('catalog'))

    def do_schemas(self, schema, args):
        for name in schema.list_schemas():
            sys.stdout.write(name + '\n')

    def do_tables(self, schema, args):
        if len(args) > 1:
            self.parser.error('tables takes at most one schema name')
        for table in schema.list_tables(args[0].upper() if args else '').values():
            sys.stdout.write('%-6s %s\n' % (['TABLE', 'VIEW'][table.is_view], table.name))

    def do_describe(self, schema, args):
        if len(args) != 1:
            self.parser.error('describe takes exactly one table name')
        table = schema.get_table(args[0])
        self.pprint('%s %s' % (['Table', 'View'][table.is_view], table.name))
        for column in table.columns:
            flags = []
            if column.is_primary_key:
                flags.append('PRIMARY KEY')
            if column.auto_increment:
                flags.append('IDENTITY')
            if column.is_foreign_key:
                flags.append('REFERENCES %s(%s)' % (column.ref_table, column.ref_field))
            if column.default_value is not None:
                flags.append('DEFAULT %s' % column.default_value)
            sys.stdout.write('    %-30s %-20s %-8s %-8s %s\n' % (
                column.name,
                column.type_str,
                column.type,
                ['NOT NULL', 'NULL'][column.allow_null],
                ' '.join(flags),
            ))
        if table.sequence_name:
            self.pprint('Identity key %s' % table.sequence_name)

    def do_routines(self, schema, args):
        if len(args) > 1:
            self.parser.error('routines takes at most one schema name')
        for kind in ('procedure', 'function'):
            for routine in schema.list_routines(kind, args[0].upper() if args else '').values():
                sys.stdout.write('%-9s %s%s\n' % (
                    kind.upper(), routine.public_name,
                    ' RETURNS %s' % routine.return_type if routine.return_type else ''))

    def do_call(self, schema, args):
        if not args:
            self.parser.error('call requires a routine name')
        (sql, params) = schema.invoke(args[0], args[1:])
        sys.stdout.write(sql + '\n')
        for (index, value) in enumerate(params):
            sys.stdout.write('    ?%d = %r\n' % (index + 1, value))

    def do_ddl(self, args):
        if not args:
            self.parser.error('ddl requires an abstract type')
        properties = {'type': args[0]}
        for arg in args[1:]:
            if not '=' in arg:
                self.parser.error('invalid column property "%s" (use property=value)' % arg)
            (key, value) = arg.split('=', 1)
            properties[key.strip()] = value
        try:
            spec = column_spec(**properties)
        except TypeError as e:
            self.parser.error('invalid column property: %s' % str(e))
        logging.debug('Building DDL for %r' % (spec,))
        sys.stdout.write(build_column_ddl(spec) + '\n')


main = SchemaUtility()
