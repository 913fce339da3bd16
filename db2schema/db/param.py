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

from db2schema.db.field import strip_default
from db2schema.types import extract_simple_type


PARAM_TYPES = {
    'I': 'IN',
    'O': 'OUT',
    'B': 'INOUT',
}


class Parameter(object):
    """Class representing a parameter of a routine in a DB2 database"""

    def __init__(self, row):
        """Initializes an instance of the class from a RoutineParam row"""
        (
            name,
            self.position,
            direction,
            self.db_type,
            self.length,
            self.precision,
            self.scale,
            default,
        ) = row
        # If the parameter is unnamed, make up a name based on the parameter's
        # position
        self.name = name or 'P%d' % self.position
        logging.debug("Building parameter %s" % self.name)
        self.param_type = PARAM_TYPES[direction]
        self.type = extract_simple_type(self.db_type, self.length, self.scale)
        self.default_value = strip_default(default)

    def __repr__(self):
        return '<Parameter %d %s %s>' % (self.position, self.param_type, self.name)
