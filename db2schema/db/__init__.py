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

"""Defines the metadata model built from the catalog.

The classes in this package are constructed by db2schema.schema.Db2Schema
from the rows returned by an input plugin. Once handed to a caller they
should be treated as read-only.
"""

__all__ = [
    'field',
    'param',
    'routine',
    'schema',
    'table',
    'util',
]
