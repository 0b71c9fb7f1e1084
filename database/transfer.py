"""
JSON export/import of collections.

File layout:

    {
      "collections": [
        {
          "name": "Spanish",
          "sub_collections": [{"name": "Greetings"}],
          "cards": [
            {"question": "hola", "answer": "hello", "title": "", "sub_collection_name": "Greetings"},
            {"question": "gato", "answer": "cat", "title": ""}
          ]
        }
      ]
    }

The null sub-collection is never written out; a card that belongs to it has
no "sub_collection_name". On import, sub-collections and collections are
matched by exact (trimmed) name and created when missing. Cards that already
exist in the destination are skipped without error and are not counted.
"""

import json
import logging

from database.database import (
    CardStore,
    collection_exists,
    find_collection_id,
    get_null_sub_collection_id,
    get_or_create_sub_collection,
    insert_collection,
)
from database.errors import InvalidDestination, IoFailure, NotFound
from utils.constants import EXPORT_INDENT, NULL_SUB_COLLECTION_NAME
from utils.utils import clean_name, is_reserved_name, optional_text


# EXPORT =====================================================

def export_collection(store: CardStore, collection_id, path):
    with store.get_db() as conn:
        row = conn.execute('SELECT name FROM collections WHERE id = ?', (collection_id,)).fetchone()
        if row is None:
            raise NotFound("Collection not found")
        collections = [build_collection_export(conn, collection_id, row['name'])]

    write_export_file(path, collections)
    logging.info(f"Exported collection {collection_id} to {path}")


def export_all_collections(store: CardStore, path):
    with store.get_db() as conn:
        rows = conn.execute('SELECT id, name FROM collections ORDER BY name').fetchall()
        collections = [build_collection_export(conn, row['id'], row['name']) for row in rows]

    write_export_file(path, collections)
    logging.info(f"Exported {len(collections)} collections to {path}")


def build_collection_export(conn, collection_id, name) -> dict:
    sub_rows = conn.execute(
        """SELECT id, name FROM sub_collections
           WHERE collection_id = ? AND name != ?
           ORDER BY name
        """,
        (collection_id, NULL_SUB_COLLECTION_NAME)
    ).fetchall()
    sub_names = {row['id']: row['name'] for row in sub_rows}

    cards = []
    card_rows = conn.execute(
        """SELECT question, answer, COALESCE(title, '') AS title, sub_collection_id
           FROM cards WHERE collection_id = ? ORDER BY id
        """,
        (collection_id,)
    ).fetchall()
    for row in card_rows:
        card = {'question': row['question'], 'answer': row['answer'], 'title': row['title']}
        sub_name = sub_names.get(row['sub_collection_id'])
        if sub_name is not None:
            card['sub_collection_name'] = sub_name
        cards.append(card)

    return {
        'name': name,
        'sub_collections': [{'name': row['name']} for row in sub_rows],
        'cards': cards,
    }


def write_export_file(path, collections):
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump({'collections': collections}, f, indent=EXPORT_INDENT, ensure_ascii=False)
    except OSError as e:
        raise IoFailure(f"Could not write {path}: {e}") from e


# IMPORT =====================================================

def read_export_file(path) -> list[dict]:
    """Per-collection summary of an export file. Does not touch the store."""
    return [
        {
            'name': collection['name'],
            'card_count': len(collection['cards']),
            'sub_collection_count': len(collection['sub_collections']),
        }
        for collection in load_export_file(path)
    ]


def import_collection(store: CardStore, path, file_index, destination_collection_id=None,
                      destination_new_name=None) -> dict:
    """
    Import the collection at `file_index` into an existing collection
    (`destination_collection_id`) or into a new one (`destination_new_name`).
    """
    collections = load_export_file(path)
    if not 0 <= file_index < len(collections):
        raise NotFound("Invalid collection index")
    source = collections[file_index]

    new_name = clean_name(destination_new_name)
    if destination_collection_id is None and not new_name:
        raise InvalidDestination()

    with store.get_db() as conn:
        if destination_collection_id is not None:
            if not collection_exists(conn, destination_collection_id):
                raise NotFound("Collection not found")
            collection_id = destination_collection_id
        else:
            collection_id = insert_collection(conn, new_name)

        cards_added = merge_collection(conn, collection_id, source)

    logging.info(f"Imported {cards_added} cards from {path} into collection {collection_id}")
    return {'collections_imported': 1, 'cards_added': cards_added}


def import_all_collections(store: CardStore, path) -> dict:
    collections = load_export_file(path)
    collections_imported = 0
    cards_added = 0

    with store.get_db() as conn:
        for source in collections:
            name = clean_name(source['name'])
            if not name:
                continue

            collection_id = find_collection_id(conn, name)
            if collection_id is None:
                collection_id = insert_collection(conn, name)

            collections_imported += 1
            cards_added += merge_collection(conn, collection_id, source)

    logging.info(f"Imported {collections_imported} collections ({cards_added} cards) from {path}")
    return {'collections_imported': collections_imported, 'cards_added': cards_added}


def merge_collection(conn, collection_id, source) -> int:
    """Insert the source's cards into `collection_id`; returns how many were new."""
    null_sub_id = get_null_sub_collection_id(conn, collection_id)

    sub_ids = {NULL_SUB_COLLECTION_NAME: null_sub_id}
    for sub_name in source['sub_collections']:
        sub_name = clean_name(sub_name)
        if not sub_name or sub_name in sub_ids or is_reserved_name(sub_name):
            continue
        sub_ids[sub_name] = get_or_create_sub_collection(conn, collection_id, sub_name)

    added = 0
    for card in source['cards']:
        sub_id = sub_ids.get(card['sub_collection_name'], null_sub_id)
        cursor = conn.execute(
            "INSERT OR IGNORE INTO cards (question, answer, collection_id, title, sub_collection_id) "
            "VALUES (?, ?, ?, ?, ?)",
            (card['question'].strip(), card['answer'].strip(), collection_id,
             card['title'].strip(), sub_id)
        )
        added += cursor.rowcount
    return added


# FILE PARSING ===============================================

def load_export_file(path) -> list[dict]:
    """
    Read and validate an export file.

    Returns one dict per collection: {'name', 'sub_collections': [names],
    'cards': [{'question', 'answer', 'title', 'sub_collection_name'}]}, where
    'sub_collection_name' is the trimmed name or None.
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise IoFailure(f"Could not read {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise IoFailure(f"Not a valid export file: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get('collections'), list):
        raise IoFailure("Not a valid export file: missing 'collections'")

    return [_parse_collection(item) for item in data['collections']]


def _parse_collection(item) -> dict:
    if not isinstance(item, dict) or not isinstance(item.get('name'), str):
        raise IoFailure("Not a valid export file: collection without a name")

    subs = _list_field(item, 'sub_collections')
    cards = _list_field(item, 'cards')

    sub_collections = []
    for sub in subs:
        if not isinstance(sub, dict) or not isinstance(sub.get('name'), str):
            raise IoFailure("Not a valid export file: sub-collection without a name")
        sub_collections.append(sub['name'])

    return {
        'name': item['name'],
        'sub_collections': sub_collections,
        'cards': [_parse_card(card) for card in cards],
    }


def _list_field(item, key) -> list:
    value = item.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise IoFailure(f"Not a valid export file: '{key}' must be a list")
    return value


def _parse_card(card) -> dict:
    if not isinstance(card, dict):
        raise IoFailure("Not a valid export file: card is not an object")
    question = card.get('question')
    answer = card.get('answer')
    if not isinstance(question, str) or not isinstance(answer, str):
        raise IoFailure("Not a valid export file: card without question or answer")

    title = card.get('title')
    return {
        'question': question,
        'answer': answer,
        'title': title if isinstance(title, str) else '',
        'sub_collection_name': optional_text(card.get('sub_collection_name')),
    }
