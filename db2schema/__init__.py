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

"""Schema introspection and DDL synthesis for IBM DB2.

This package discovers schemas, tables, columns, keys and routines from the
system catalog of either DB2 for Linux/UNIX/Windows (SYSCAT) or DB2 for i
(QSYS2), normalizes them into a single metadata model, and builds DB2 DDL and
routine invocation statements from that model.
"""

__version__ = '1.2.0'
