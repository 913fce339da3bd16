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

"""Defines the base classes for plugins.

Catalog ("input") plugins hold all of the dialect specific SQL used to read
the system catalog. Each returns the rows it retrieves as the namedtuple
classes defined in db2schema.tuples, so that the rest of the package never
needs to know which catalog the rows came from. A plugin is a module (or
package) under db2schema.plugins defining a class named InputPlugin; use
load_plugin() to obtain the class by its dotted name, e.g. "db2.luw".
"""

import logging
import importlib

from db2schema.tuples import project_row


class PluginError(Exception):
    """Base exception class for plugin related errors."""
    pass


class PluginLoadError(PluginError):
    """Exception class for plugin loading errors.

    load_plugin() converts any ImportError raised while importing a plugin
    into this exception.
    """
    pass


class PluginConfigurationError(PluginError):
    """Exception class for plugin configuration errors.

    This exception should only be raised during the configure() method of a
    plugin."""
    pass


class Plugin(object):
    """Abstract base class for configurable objects.

    Derived classes set up the options they accept by calling add_option()
    during construction. configure() then applies a dictionary of (string)
    values to those options, converting each with the handler given when the
    option was added. configure() may be called again; options missing from
    the new dictionary revert to their defaults.
    """

    def __init__(self):
        super(Plugin, self).__init__()
        self.option_defs = {}
        self.options = {}

    def add_option(self, name, default=None, doc=None, convert=None):
        """Adds a new option to the configuration directory.

        Derived classes should NOT override this method.

        Parameters:
        name    -- The name of the option
        default -- The default value for the option if it is not found in the
                   configuration
        doc     -- A description of the option and its possible values
        convert -- A function to call which should convert the option value
                   from a string into its intended type. See the utility
                   convert_X methods below
        """
        self.option_defs[name] = (default, doc, convert)

    def convert_int(self, value, minvalue=None, maxvalue=None):
        """Conversion handler for configuration values containing an integer."""
        result = int(value)
        if minvalue is not None and result < minvalue:
            raise PluginConfigurationError('%d is less than the minimum (%d)' % (result, minvalue))
        if maxvalue is not None and result > maxvalue:
            raise PluginConfigurationError('%d is greater than the maximum (%d)' % (result, maxvalue))
        return result

    def convert_bool(self, value,
            false_values=('false', 'no', 'off', '0'),
            true_values=('true', 'yes', 'on', '1')):
        """Conversion handler for configuration values containing a boolean."""
        if isinstance(value, bool):
            return value
        try:
            return dict(
                [(key, False) for key in false_values] +
                [(key, True) for key in true_values]
            )[value.lower()]
        except KeyError:
            raise PluginConfigurationError('Invalid boolean value "%s" (use one of %s instead)' % (
                value, ', '.join(false_values + true_values)))

    def convert_choice(self, value, choices):
        """Conversion handler for values which must be one of choices.

        Comparison is case insensitive; the result is the matching entry of
        choices.
        """
        for choice in choices:
            if value.upper() == choice.upper():
                return choice
        raise PluginConfigurationError('Invalid value "%s" (use one of %s instead)' % (
            value, ', '.join(repr(choice) for choice in choices)))

    def convert_list(self, value, separator=',', subconvert=None):
        """Conversion handler for configuration values containing a list.

        Use this method within a lambda function if you wish to specify values
        for the optional separator or subconverter parameters. Note that no
        escaping mechanism is provided for handling commas within elements of
        the list.
        """
        if value.strip() == '':
            return []
        elif subconvert is None:
            return [item.strip() for item in value.split(separator)]
        else:
            return [subconvert(item.strip()) for item in value.split(separator)]

    def configure(self, config):
        """Loads the plugin configuration.

        If derived classes override this method they should call the
        inherited method and then test that the configuration is valid.
        """
        for (name, (default, doc, convert)) in self.option_defs.items():
            value = config.get(name, default)
            # Note: Conversion is applied to defaults as well as explicitly
            # specified values (unless the default is None, which is passed
            # thru verbatim)
            if convert is not None and value is not None:
                try:
                    value = convert(value)
                except PluginConfigurationError:
                    raise
                except Exception as e:
                    raise PluginConfigurationError('Error reading value for "%s": %s' % (name, str(e)))
            self.options[name] = value


class InputPlugin(Plugin):
    """Abstract base class for catalog plugins.

    Derived classes implement the get_X methods below for one catalog
    dialect. Plugins hold no state besides their connection and options; all
    caching is the business of the caller.
    """

    # A human readable name for the dialect the plugin reads
    dialect = None

    def __init__(self, connection):
        """Initializes an instance of the class.

        The connection parameter must provide the query() and scalar()
        methods of db2schema.plugins.db2.Connection.
        """
        super(InputPlugin, self).__init__()
        self.connection = connection
        self.add_option('isolation', default='UR',
            convert=lambda value: self.convert_choice(value, ('', 'UR', 'CS', 'RS', 'RR', 'NC')),
            doc="""The isolation level used for catalog queries. Defaults to
            UR (uncommitted read) which avoids waiting on locks held against
            the catalog by concurrent DDL. Set to an empty value to use the
            isolation level of the connection""")
        # Apply the defaults so an unconfigured plugin is usable
        self.configure({})

    def isolate(self, sql):
        """Appends the configured isolation clause to the query sql."""
        if self.options['isolation']:
            return '%s\nWITH %s' % (sql.rstrip(), self.options['isolation'])
        return sql

    def fetch(self, sql, params, cls, fields):
        """Runs the catalog query sql and projects each row onto cls.

        See db2schema.tuples.project_row() for the meaning of fields.
        """
        for row in self.connection.query(self.isolate(sql), params):
            yield project_row(cls, row, fields)

    def get_default_schema(self):
        """Returns the current schema of the connection."""
        return self.connection.scalar('VALUES CURRENT_SCHEMA').strip()

    def get_schemas(self):
        """Retrieves the names of the schemas in the database.

        Override this function to return a list of schema names, excluding
        those which are system defined where the catalog can tell them apart.
        """
        raise NotImplementedError

    def get_tables(self, schema=None, include_views=True):
        """Retrieves the tables (and optionally views) of the database.

        Override this function to return a list of TableRow tuples, ordered
        by name, for all tables which are not system tables. If schema is not
        empty, only tables within that schema must be returned. TableRow
        tuples have the following named fields:

        schema -- The schema of the table
        name   -- The name of the table
        type   -- 'T' for a table, 'V' for a view
        """
        raise NotImplementedError

    def get_columns(self, schema, table):
        """Retrieves the columns of the named table.

        Override this function to return a list of ColumnRow tuples, ordered
        by position. ColumnRow tuples have the following named fields:

        name      -- The name of the column
        position  -- The ordinal position of the column
        type_name -- The native type name of the column
        default*  -- The default expression of the column as SQL
        nullable  -- True if the column accepts NULL (bool)
        length*   -- The length (or precision) of the column
        scale*    -- The scale of decimal columns
        identity  -- True if the column is an identity column (bool)

        * Optional (can be None)
        """
        raise NotImplementedError

    def get_primary_key(self, schema, table):
        """Retrieves the primary key columns of the named table.

        Override this function to return a list of column names in key order.
        The list is empty if the table has no primary key.
        """
        raise NotImplementedError

    def get_foreign_keys(self, schema, table):
        """Retrieves the foreign key columns of the named table.

        Override this function to return a list of ForeignKeyRow tuples, one
        for each column of the table which references a column of a unique
        key. ForeignKeyRow tuples have the following named fields:

        table_schema -- The schema of the referencing table
        table_name   -- The name of the referencing table
        column_name  -- The name of the referencing column
        ref_schema   -- The schema of the referenced table
        ref_table    -- The name of the referenced table
        ref_column   -- The name of the referenced column
        """
        raise NotImplementedError

    def get_routines(self, routine_type, schema=None):
        """Retrieves the procedures or functions of the database.

        Override this function to return a list of RoutineRow tuples for all
        routines which are not system routines. The routine_type parameter is
        'PROCEDURE' or 'FUNCTION'. If schema is not empty only routines in
        that schema must be returned. RoutineRow tuples have the following
        named fields:

        schema       -- The schema of the routine
        specific     -- The specific (unique) name of the routine
        name         -- The name of the routine
        return_type* -- The declared scalar return type name
        func_type*   -- 'C', 'R', 'T' or 'S' (None for procedures)

        * Optional (can be None)
        """
        raise NotImplementedError

    def get_routine_params(self, schema, specific, name):
        """Retrieves the parameters and result columns of a routine.

        Override this function to return a list of RoutineParam tuples ordered
        by position. Rows which are neither a parameter nor part of the
        result must be omitted. RoutineParam tuples have the following named
        fields:

        name       -- The name of the parameter
        position   -- The ordinal of the parameter (0 = return value)
        direction  -- 'I', 'O', 'B' (input, output, both) or 'R' (result)
        type_name  -- The native type name of the parameter
        length*    -- The length of character types
        precision* -- The precision of numeric types
        scale*     -- The scale of decimal types
        default*   -- The default value of the parameter

        * Optional (can be None)
        """
        raise NotImplementedError


def load_plugin(name):
    """Given a dotted name like "db2.luw", returns the plugin's class."""
    logging.debug('Loading plugin "%s"' % name)
    try:
        module = importlib.import_module('db2schema.plugins.%s' % name)
    except ImportError as e:
        raise PluginLoadError('Unable to load plugin "%s": %s' % (name, str(e)))
    try:
        return module.InputPlugin
    except AttributeError:
        raise PluginLoadError('Module "%s" is not a valid plugin' % name)
