import logging
import os
import sqlite3
from contextlib import contextmanager

from database.errors import DuplicateCard, InvalidName, IoFailure, NotFound, ReservedName
from database.schema import (
    backfill_card_sub_collections,
    card_migrations,
    card_schema,
    card_unique_index,
    collection_schema,
    seed_default_collection,
    seed_null_sub_collections,
    sub_collection_schema,
)
from utils.constants import (
    DEFAULT_COLLECTION_NAME,
    EMPTY_COLLECTION_NAME_MSG,
    EMPTY_SUB_COLLECTION_NAME_MSG,
    NULL_SUB_COLLECTION_NAME,
)
from utils.utils import clean_name, is_reserved_name


class CardStore:
    """
    SQLite-backed store of collections, sub-collections and cards.

    Every public method opens its own connection, makes sure the schema is
    current, runs in a single transaction and closes the connection again.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    # CARDS COMMANDS =============================================

    def add_card(self, question, answer, collection_id, title=None, sub_collection_id=None) -> int:
        with self.get_db() as conn:
            sub_id = resolve_sub_collection_id(conn, collection_id, sub_collection_id)
            try:
                cursor = conn.execute(
                    "INSERT INTO cards (question, answer, collection_id, title, sub_collection_id) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (question, answer, collection_id, title or '', sub_id)
                )
            except sqlite3.IntegrityError as e:
                if is_unique_violation(e):
                    raise DuplicateCard() from e
                raise
            logging.info(f"Added card {cursor.lastrowid} to collection {collection_id}")
            return cursor.lastrowid

    def update_card(self, card_id, question, answer, collection_id, title=None, sub_collection_id=None):
        with self.get_db() as conn:
            sub_id = resolve_sub_collection_id(conn, collection_id, sub_collection_id)
            try:
                conn.execute(
                    """UPDATE cards
                       SET question = ?, answer = ?, collection_id = ?, title = ?, sub_collection_id = ?
                       WHERE id = ?
                    """,
                    (question, answer, collection_id, title or '', sub_id, card_id)
                )
            except sqlite3.IntegrityError as e:
                if is_unique_violation(e):
                    raise DuplicateCard() from e
                raise

    def delete_card(self, card_id):
        with self.get_db() as conn:
            conn.execute('DELETE FROM cards WHERE id = ?', (card_id,))

    def set_card_skipped(self, card_id, skipped: bool):
        with self.get_db() as conn:
            conn.execute(
                'UPDATE cards SET skipped = ? WHERE id = ?',
                (1 if skipped else 0, card_id)
            )

    def clear_skipped_for_collection(self, collection_id):
        with self.get_db() as conn:
            conn.execute('UPDATE cards SET skipped = 0 WHERE collection_id = ?', (collection_id,))

    def get_cards(self, collection_id) -> list[dict]:
        with self.get_db() as conn:
            rows = conn.execute(
                """SELECT id, question, answer, COALESCE(title, '') AS title,
                          COALESCE(skipped, 0) AS skipped, collection_id, sub_collection_id
                   FROM cards WHERE collection_id = ? ORDER BY id
                """,
                (collection_id,)
            ).fetchall()
            return [card_from_row(row) for row in rows]

    def get_card(self, card_id) -> dict | None:
        with self.get_db() as conn:
            row = conn.execute(
                """SELECT id, question, answer, COALESCE(title, '') AS title,
                          COALESCE(skipped, 0) AS skipped, collection_id, sub_collection_id
                   FROM cards WHERE id = ?
                """,
                (card_id,)
            ).fetchone()
            if row:
                return card_from_row(row)
            return None

    # COLLECTIONS COMMANDS =======================================

    def get_collections(self) -> list[dict]:
        with self.get_db() as conn:
            rows = conn.execute('SELECT id, name FROM collections ORDER BY name').fetchall()
            return [{'id': row['id'], 'name': row['name']} for row in rows]

    def get_collection_id(self, name) -> int | None:
        with self.get_db() as conn:
            return find_collection_id(conn, clean_name(name))

    def create_collection(self, name) -> dict:
        name = clean_name(name)
        if not name:
            raise InvalidName(EMPTY_COLLECTION_NAME_MSG)

        with self.get_db() as conn:
            collection_id = insert_collection(conn, name)
            return {'id': collection_id, 'name': name}

    # SUB-COLLECTIONS COMMANDS ===================================

    def get_sub_collections(self, collection_id) -> list[dict]:
        with self.get_db() as conn:
            rows = conn.execute(
                """SELECT id, name, collection_id FROM sub_collections
                   WHERE collection_id = ? AND name != ?
                   ORDER BY name
                """,
                (collection_id, NULL_SUB_COLLECTION_NAME)
            ).fetchall()
            return [dict(row) for row in rows]

    def create_sub_collection(self, collection_id, name) -> dict:
        name = clean_name(name)
        if not name:
            raise InvalidName(EMPTY_SUB_COLLECTION_NAME_MSG)
        if is_reserved_name(name):
            raise ReservedName()

        with self.get_db() as conn:
            if not collection_exists(conn, collection_id):
                raise NotFound("Collection not found")
            cursor = conn.execute(
                'INSERT INTO sub_collections (name, collection_id) VALUES (?, ?)',
                (name, collection_id)
            )
            logging.info(f"Created sub-collection {name!r} in collection {collection_id}")
            return {'id': cursor.lastrowid, 'name': name, 'collection_id': collection_id}

    # DB CONNECTION ==============================================

    @contextmanager
    def get_db(self):
        directory = os.path.dirname(os.path.abspath(self.db_path))
        try:
            os.makedirs(directory, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.OperationalError) as e:
            raise IoFailure(f"Could not open card database at {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row

        try:
            init_schema(conn)
        except sqlite3.DatabaseError as e:
            conn.close()
            if isinstance(e, sqlite3.IntegrityError):
                raise
            raise IoFailure(f"Could not open card database at {self.db_path}: {e}") from e

        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self):
        with self.get_db():
            logging.info(f"Card database ready at {self.db_path}")


# SCHEMA =====================================================

def init_schema(conn):
    """Create missing tables and upgrade older layouts in place. Safe to rerun."""
    conn.execute(collection_schema)
    conn.execute(sub_collection_schema)
    conn.execute(card_schema)

    for column, definition in card_migrations:
        add_column(conn, 'cards', column, definition)

    conn.execute(seed_default_collection, (DEFAULT_COLLECTION_NAME,))
    conn.execute(seed_null_sub_collections, (NULL_SUB_COLLECTION_NAME,))
    conn.execute(backfill_card_sub_collections, (NULL_SUB_COLLECTION_NAME,))
    conn.execute(card_unique_index)


def add_column(conn, table, column, definition):
    try:
        conn.execute(f'ALTER TABLE {table} ADD COLUMN {column} {definition}')
        logging.info(f"Migrated {table}: added column {column}")
    except sqlite3.OperationalError as e:
        if 'duplicate column' not in str(e).lower():
            raise
        logging.debug(f"{table}.{column} already present")


# HELPERS ====================================================

def card_from_row(row) -> dict:
    card = {
        'id': row['id'],
        'question': row['question'],
        'answer': row['answer'],
        'title': row['title'],
        'skipped': bool(row['skipped']),
        'collection_id': row['collection_id'],
    }
    # NULL only on stores upgraded before the backfill could resolve it
    if row['sub_collection_id'] is not None:
        card['sub_collection_id'] = row['sub_collection_id']
    return card


def is_unique_violation(error: sqlite3.IntegrityError) -> bool:
    return "unique" in str(error).lower()


def collection_exists(conn, collection_id) -> bool:
    row = conn.execute('SELECT 1 FROM collections WHERE id = ?', (collection_id,)).fetchone()
    return row is not None


def find_collection_id(conn, name) -> int | None:
    row = conn.execute('SELECT id FROM collections WHERE name = ?', (name,)).fetchone()
    if row:
        return row['id']
    return None


def insert_collection(conn, name) -> int:
    """Insert a collection together with its null sub-collection."""
    cursor = conn.execute('INSERT INTO collections (name) VALUES (?)', (name,))
    collection_id = cursor.lastrowid
    conn.execute(
        'INSERT INTO sub_collections (name, collection_id) VALUES (?, ?)',
        (NULL_SUB_COLLECTION_NAME, collection_id)
    )
    logging.info(f"Created collection {name!r} ({collection_id})")
    return collection_id


def get_null_sub_collection_id(conn, collection_id) -> int:
    row = conn.execute(
        'SELECT id FROM sub_collections WHERE collection_id = ? AND name = ?',
        (collection_id, NULL_SUB_COLLECTION_NAME)
    ).fetchone()
    if row is None:
        raise NotFound("Collection not found")
    return row['id']


def resolve_sub_collection_id(conn, collection_id, sub_collection_id) -> int:
    """Default to the collection's null sub-collection; reject ids owned by another collection."""
    if sub_collection_id is None:
        return get_null_sub_collection_id(conn, collection_id)

    row = conn.execute(
        'SELECT collection_id FROM sub_collections WHERE id = ?',
        (sub_collection_id,)
    ).fetchone()
    if row is None or row['collection_id'] != collection_id:
        raise NotFound("Sub-collection not found in this collection")
    return sub_collection_id


def get_or_create_sub_collection(conn, collection_id, name) -> int:
    name = clean_name(name)
    if not name:
        raise InvalidName(EMPTY_SUB_COLLECTION_NAME_MSG)

    row = conn.execute(
        'SELECT id FROM sub_collections WHERE collection_id = ? AND name = ?',
        (collection_id, name)
    ).fetchone()
    if row:
        return row['id']

    cursor = conn.execute(
        'INSERT INTO sub_collections (name, collection_id) VALUES (?, ?)',
        (name, collection_id)
    )
    return cursor.lastrowid
