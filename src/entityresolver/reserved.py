"""Reserved keyword lookups for entity, table and column names.

Database keywords come from the SQLAlchemy dialects so they track the
engines' own lists; class-name keywords cover the target language and the
names the generated application already defines.
"""

from __future__ import annotations

from sqlalchemy.dialects.mssql.base import RESERVED_WORDS as _MSSQL
from sqlalchemy.dialects.mysql.reserved_words import (
    RESERVED_WORDS_MARIADB as _MARIADB,
)
from sqlalchemy.dialects.mysql.reserved_words import (
    RESERVED_WORDS_MYSQL as _MYSQL,
)
from sqlalchemy.dialects.oracle.base import RESERVED_WORDS as _ORACLE
from sqlalchemy.dialects.postgresql.base import RESERVED_WORDS as _POSTGRESQL
from sqlalchemy.sql.compiler import RESERVED_WORDS as _ANSI


def _lower(words: set[str] | frozenset[str]) -> frozenset[str]:
    return frozenset(w.lower() for w in words)


ANSI_RESERVED_WORDS = _lower(_ANSI)

# Keyed by production database type.
TABLE_RESERVED_WORDS: dict[str, frozenset[str]] = {
    "mysql": _lower(_MYSQL),
    "mariadb": _lower(_MARIADB),
    "postgresql": _lower(_POSTGRESQL),
    "oracle": _lower(_ORACLE),
    "mssql": _lower(_MSSQL),
    "h2Disk": ANSI_RESERVED_WORDS,
    "h2Memory": ANSI_RESERVED_WORDS,
    "cassandra": ANSI_RESERVED_WORDS,
    "mongodb": frozenset(),
    "couchbase": frozenset(),
    "neo4j": frozenset(),
}

JAVA_RESERVED_WORDS = frozenset(
    """
    ABSTRACT ASSERT BOOLEAN BREAK BYTE CASE CATCH CHAR CLASS CONST CONTINUE DEFAULT
    DO DOUBLE ELSE ENUM EXTENDS FINAL FINALLY FLOAT FOR GOTO IF IMPLEMENTS IMPORT
    INSTANCEOF INT INTERFACE LONG NATIVE NEW PACKAGE PRIVATE PROTECTED PUBLIC RETURN
    SHORT STATIC STRICTFP SUPER SWITCH SYNCHRONIZED THIS THROW THROWS TRANSIENT TRY
    VOID VOLATILE WHILE TRUE FALSE NULL VAR RECORD YIELD
    """.split()
)

# Classes the generated application ships with.
APPLICATION_RESERVED_WORDS = frozenset(
    """
    ACCOUNT ACTIVATE AUDIT AUTHORITY CONFIGURATION DOCS GATEWAY HEALTH LOGIN LOGS
    METRICS PASSWORD REGISTER RESET SESSION SETTINGS TRACKER USER USERMANAGEMENT
    """.split()
)


def is_reserved_class_name(name: str) -> bool:
    keyword = (name or "").upper()
    return keyword in JAVA_RESERVED_WORDS or keyword in APPLICATION_RESERVED_WORDS


def is_reserved_table_name(name: str, prod_database_type: str | None) -> bool:
    """Whether ``name`` is a keyword for the production database.

    Unknown database types fall back to the ANSI list.
    """
    if not name:
        return False
    words = TABLE_RESERVED_WORDS.get(prod_database_type or "", ANSI_RESERVED_WORDS)
    return name.lower() in words
