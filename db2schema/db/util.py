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

"""Identifier quoting utilities shared by the metadata and DDL modules."""


def quote_str(s, qchar="'"):
    """Quotes s with qchar, doubling any qchar characters within it."""
    return "%s%s%s" % (qchar, s.replace(qchar, qchar * 2), qchar)


def quote_ident(name):
    """Quotes a single identifier (a column, table or schema name)."""
    return quote_str(name, '"')


def quote_table_name(name):
    """Quotes a table name which may be qualified by a schema.

    Each dot-separated part is quoted separately, so "MYSCHEMA.EMP" becomes
    '"MYSCHEMA"."EMP"'. Names which are already quoted are returned verbatim.
    """
    if name.startswith('"'):
        return name
    return '.'.join(quote_ident(part) for part in name.split('.'))


def qualified_name(schema, name, qualify):
    """Returns the (name, raw_name) pair for an object in schema.

    If qualify is true, both are prefixed with the schema. Otherwise the bare
    name is used and the object is assumed to live in the default schema.
    """
    if qualify:
        return (
            '%s.%s' % (schema, name),
            '%s.%s' % (quote_ident(schema), quote_ident(name)),
        )
    else:
        return (name, quote_ident(name))
