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

"""Builds the statements which invoke procedures and functions."""

from collections.abc import Mapping

from db2schema.db.routine import Procedure
from db2schema.types import TYPE_ROW, TYPE_TABLE


def bind_arguments(routine, args=None):
    """Returns the list of values bound to the parameters of routine.

    The args parameter is either a mapping of parameter names (matched
    without regard to case) to values, or a sequence of values in parameter
    order. Parameters without a value take their default value (which may be
    None). OUT parameters are always bound to None. Raises ValueError for
    values which match no parameter.
    """
    if args is None:
        args = {}
    if isinstance(args, Mapping):
        args = dict((name.lower(), value) for (name, value) in args.items())
        for name in args:
            if routine.get_parameter(name) is None:
                raise ValueError('%s has no parameter named %s' % (routine.public_name, name))
    else:
        args = list(args)
        if len(args) > len(routine.parameters):
            raise ValueError('%s takes at most %d arguments (%d given)' % (
                routine.public_name, len(routine.parameters), len(args)))
    result = []
    for (index, param) in enumerate(routine.parameters):
        if param.param_type == 'OUT':
            value = None
        elif isinstance(args, dict):
            value = args.get(param.name.lower(), param.default_value)
        elif index < len(args):
            value = args[index]
        else:
            value = param.default_value
        result.append(value)
    return result


def invoke(routine, args=None):
    """Returns the (sql, params) pair which invokes routine with args.

    Procedures are invoked with CALL. Functions returning a row or a table are
    invoked within a TABLE() reference; all other functions are selected from
    the single row SYSIBM.SYSDUMMY1 table, their result being the "output"
    column. See bind_arguments() for the meaning of args.
    """
    params = bind_arguments(routine, args)
    call = '%s(%s)' % (routine.raw_name, ', '.join('?' for param in params))
    if isinstance(routine, Procedure):
        sql = 'CALL %s' % call
    elif routine.return_type in (TYPE_ROW, TYPE_TABLE):
        sql = 'SELECT * FROM TABLE(%s)' % call
    else:
        sql = 'SELECT %s AS "output" FROM SYSIBM.SYSDUMMY1' % call
    return (sql, params)
