# ======================= COLLECTIONS ====================

collection_schema = '''
    CREATE TABLE IF NOT EXISTS collections (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
'''

seed_default_collection = 'INSERT OR IGNORE INTO collections (name) VALUES (?)'

# ======================= SUB-COLLECTIONS ================

sub_collection_schema = '''
    CREATE TABLE IF NOT EXISTS sub_collections (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        collection_id INTEGER NOT NULL REFERENCES collections(id),
        created_at TEXT NOT NULL DEFAULT (datetime('now')),

        UNIQUE(collection_id, name)
    )
'''

# Gives every collection its null sub-collection, including ones written
# before sub-collections existed.
seed_null_sub_collections = '''
    INSERT OR IGNORE INTO sub_collections (name, collection_id)
    SELECT ?, id FROM collections
'''

# ======================= CARDS ==========================

card_schema = '''
    CREATE TABLE IF NOT EXISTS cards (
        id INTEGER PRIMARY KEY AUTOINCREMENT,

        -- Card content
        question TEXT NOT NULL,
        answer TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),

        collection_id INTEGER NOT NULL REFERENCES collections(id),
        title TEXT NOT NULL DEFAULT '',

        -- Study session state
        skipped INTEGER NOT NULL DEFAULT 0,

        sub_collection_id INTEGER NOT NULL REFERENCES sub_collections(id)
    )
'''

card_unique_index = '''
    CREATE UNIQUE INDEX IF NOT EXISTS cards_uniq_collection_sub_question_answer
    ON cards(collection_id, sub_collection_id, question, answer)
'''

# ======================= MIGRATIONS =====================

# Columns added after the first release, as (column, definition).
# ADD COLUMN cannot carry NOT NULL without a default, so sub_collection_id
# is nullable on upgraded stores and backfilled below.
card_migrations = [
    ('collection_id', 'INTEGER NOT NULL DEFAULT 1 REFERENCES collections(id)'),
    ('title', "TEXT NOT NULL DEFAULT ''"),
    ('skipped', 'INTEGER NOT NULL DEFAULT 0'),
    ('sub_collection_id', 'INTEGER REFERENCES sub_collections(id)'),
]

backfill_card_sub_collections = '''
    UPDATE cards
    SET sub_collection_id = (
        SELECT s.id FROM sub_collections s
        WHERE s.collection_id = cards.collection_id AND s.name = ?
    )
    WHERE sub_collection_id IS NULL
'''
