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

import threading


class SchemaCache(object):
    """Connection scoped cache of loaded metadata objects.

    Entries are keyed by lower-cased qualified name. Completed entries may be
    read concurrently without locking; loading an entry is serialized per key
    so that at most one load for a given name is in flight at a time, and a
    half-built object is never visible to another thread.

    Loaders returning None (e.g. for a table which doesn't exist) are not
    cached, so a later request will query the catalog again.
    """

    def __init__(self):
        super(SchemaCache, self).__init__()
        self._entries = {}
        self._locks = {}
        self._lock = threading.Lock()

    def __contains__(self, key):
        return key.lower() in self._entries

    def __len__(self):
        return len(self._entries)

    def keys(self):
        return list(self._entries.keys())

    def peek(self, key):
        """Returns the completed entry for key, or None"""
        return self._entries.get(key.lower())

    def get(self, key, loader):
        """Returns the entry for key, calling loader() to build it if needed"""
        key = key.lower()
        try:
            return self._entries[key]
        except KeyError:
            pass
        with self._lock:
            key_lock = self._locks.setdefault(key, threading.Lock())
        with key_lock:
            # Another thread may have completed the load while we waited
            try:
                return self._entries[key]
            except KeyError:
                pass
            value = loader()
            if value is not None:
                self._entries[key] = value
        if value is None:
            with self._lock:
                self._locks.pop(key, None)
        return value

    def invalidate(self, key=None):
        """Drops the entry (and load lock) for key, or all of them if key is None"""
        with self._lock:
            if key is None:
                self._entries.clear()
                self._locks.clear()
            else:
                self._entries.pop(key.lower(), None)
                self._locks.pop(key.lower(), None)
