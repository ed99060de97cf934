"""
In-memory stand-in for the pyodbc module used by adapter tests.

It understands just enough SQL to emulate one table, identity values and
BEGIN/COMMIT/ROLLBACK so adapter behavior can be observed end to end.
"""

import copy
import re
from decimal import Decimal

INSERT_RE = re.compile(r"INSERT INTO \[(\w+)\] \((.*?)\) VALUES (.*)$")
ROW_RE = re.compile(r"\(([^()]*)\)")
WHERE_NAME_RE = re.compile(r"WHERE \[name\] = '((?:[^']|'')*)'")
SET_RE = re.compile(r"SET (.*?)(?: WHERE|$)")


class Error(Exception):
    pass


class InterfaceError(Error):
    pass


class DatabaseError(Error):
    pass


class IntegrityError(DatabaseError):
    pass


class OperationalError(DatabaseError):
    pass


class ProgrammingError(DatabaseError):
    pass


def _literal(token):
    token = token.strip()
    if token == "NULL":
        return None
    if token == "TRUE":
        return "1"
    if token == "FALSE":
        return "0"
    if token.startswith("'"):
        return token[1:-1].replace("''", "'")
    return token


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.description = None
        self.rowcount = -1
        self._rows = []
        self.closed = False

    def execute(self, sql):
        conn = self.connection
        conn.executed.append(sql)
        if conn.fail_with is not None:
            error = conn.fail_with
            conn.fail_with = None
            raise error
        self.description = None
        self._rows = []
        self.rowcount = -1

        if sql == "BEGIN TRANSACTION":
            conn.snapshot = copy.deepcopy(conn.tables)
        elif sql == "COMMIT TRANSACTION":
            conn.snapshot = None
        elif sql == "ROLLBACK TRANSACTION":
            if conn.snapshot is not None:
                conn.tables = conn.snapshot
            conn.snapshot = None
        elif sql == "SELECT @@IDENTITY AS ID":
            self.description = [("ID", Decimal, None, 38, 38, 0, True)]
            identity = conn.last_identity
            self._rows = [(Decimal(identity) if identity is not None else None,)]
        elif sql.startswith("INSERT INTO"):
            self._insert(sql)
        elif sql.startswith("UPDATE"):
            self._update(sql)
        elif sql.startswith("DELETE FROM"):
            self._delete(sql)
        elif sql.startswith("SELECT"):
            self._select(sql)
        return self

    def _table(self, sql):
        match = re.search(r"(?:FROM|INTO|UPDATE) \[(\w+)\]", sql)
        return self.connection.tables[match.group(1)]

    def _matching(self, sql, rows):
        match = WHERE_NAME_RE.search(sql)
        if not match:
            return list(rows)
        name = match.group(1).replace("''", "'")
        return [row for row in rows if row.get("name") == name]

    def _insert(self, sql):
        match = INSERT_RE.match(sql)
        table = self.connection.tables[match.group(1)]
        columns = [col.strip()[1:-1] for col in match.group(2).split(",")]
        inserted = 0
        for row_match in ROW_RE.finditer(match.group(3)):
            values = [_literal(token) for token in row_match.group(1).split(",")]
            row = dict(zip(columns, values))
            if "id" in table["schema"] and table["schema"]["id"] == "COUNTER":
                table["next_id"] += 1
                row["id"] = str(table["next_id"])
                self.connection.last_identity = table["next_id"]
            table["rows"].append(row)
            inserted += 1
        self.rowcount = inserted

    def _update(self, sql):
        table = self._table(sql)
        assignments = {}
        for part in SET_RE.search(sql).group(1).split(", "):
            column, value = part.split(" = ", 1)
            assignments[column.strip()[1:-1]] = _literal(value)
        matched = self._matching(sql, table["rows"])
        for row in matched:
            row.update(assignments)
        self.rowcount = len(matched)

    def _delete(self, sql):
        table = self._table(sql)
        matched = self._matching(sql, table["rows"])
        table["rows"] = [row for row in table["rows"] if row not in matched]
        self.rowcount = len(matched)

    def _select(self, sql):
        table = self._table(sql)
        rows = self._matching(sql, table["rows"])
        if "COUNT(*)" in sql:
            self.description = [("", "INTEGER")]
            self._rows = [(str(len(rows)),)]
            return
        schema = table["schema"]
        self.description = [(name, type_code) for name, type_code in schema.items()]
        self._rows = [tuple(row.get(name) for name in schema) for row in rows]

    def fetchall(self):
        if self.description is None:
            raise ProgrammingError("24000", "No results.  Previous SQL was not a query.")
        return list(self._rows)

    def close(self):
        self.closed = True
        if self.connection.close_error is not None:
            raise self.connection.close_error


class FakeConnection:
    def __init__(self, connection_string, **options):
        self.connection_string = connection_string
        self.options = options
        self.executed = []
        self.fail_with = None
        self.cursor_error = None
        self.close_error = None
        self.cursors = []
        self.snapshot = None
        self.last_identity = None
        self.closed = False
        self.tables = {
            "orders": {
                "schema": {
                    "id": "COUNTER",
                    "name": "VARCHAR",
                    "total": "CURRENCY",
                    "paid": "BIT",
                    "created": "DATETIME",
                },
                "rows": [],
                "next_id": 0,
            },
            "notes": {"schema": {"body": "LONGCHAR"}, "rows": [], "next_id": 0},
        }

    def cursor(self):
        if self.cursor_error is not None:
            raise self.cursor_error
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def close(self):
        self.closed = True


class FakeDriver:
    Error = Error
    InterfaceError = InterfaceError
    DatabaseError = DatabaseError
    IntegrityError = IntegrityError
    ProgrammingError = ProgrammingError
    OperationalError = OperationalError

    def __init__(self, connect_error=None):
        self.connections = []
        self.connect_error = connect_error

    def connect(self, connection_string, **options):
        if self.connect_error is not None:
            raise self.connect_error
        connection = FakeConnection(connection_string, **options)
        self.connections.append(connection)
        return connection
