import argparse
import json
import logging
import sys

from config import DB_PATH
from database.database import CardStore
import handlers.cards as hand_card
import handlers.collections as hand_coll
import handlers.files as hand_files
import handlers.transfer as hand_transfer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='cards', description="Flashcard collections store")
    p.add_argument('--db', default=DB_PATH, help="Path to the card database")
    sub = p.add_subparsers(dest='command', required=True)

    # Collections
    sub.add_parser('collections', help="List collections")

    cc = sub.add_parser('create-collection', help="Create a collection")
    cc.add_argument('name')

    sc = sub.add_parser('sub-collections', help="List sub-collections of a collection")
    sc.add_argument('collection_id', type=int)

    csc = sub.add_parser('create-sub-collection', help="Create a sub-collection")
    csc.add_argument('collection_id', type=int)
    csc.add_argument('name')

    # Cards
    cards = sub.add_parser('cards', help="List cards of a collection")
    cards.add_argument('collection_id', type=int)

    add = sub.add_parser('add-card', help="Add a card")
    add.add_argument('collection_id', type=int)
    add.add_argument('question')
    add.add_argument('answer')
    add.add_argument('--title')
    add.add_argument('--sub-collection', type=int, dest='sub_collection_id')

    upd = sub.add_parser('update-card', help="Update every field of a card")
    upd.add_argument('card_id', type=int)
    upd.add_argument('collection_id', type=int)
    upd.add_argument('question')
    upd.add_argument('answer')
    upd.add_argument('--title')
    upd.add_argument('--sub-collection', type=int, dest='sub_collection_id')

    rm = sub.add_parser('delete-card', help="Delete a card")
    rm.add_argument('card_id', type=int)

    skip = sub.add_parser('skip', help="Mark a card as skipped for this session")
    skip.add_argument('card_id', type=int)
    skip.add_argument('--undo', action='store_true', help="Clear the skipped flag instead")

    clear = sub.add_parser('clear-skipped', help="Clear skipped flags in a collection")
    clear.add_argument('collection_id', type=int)

    # Import / export
    exp = sub.add_parser('export', help="Export one collection, or all of them, to a JSON file")
    exp.add_argument('path')
    exp.add_argument('--collection', type=int, dest='collection_id', help="Only this collection")

    insp = sub.add_parser('inspect', help="Summarise the collections in an export file")
    insp.add_argument('path')

    imp = sub.add_parser('import', help="Import one collection from an export file")
    imp.add_argument('path')
    imp.add_argument('index', type=int, help="Position of the collection in the file")
    dest = imp.add_mutually_exclusive_group(required=True)
    dest.add_argument('--into', type=int, dest='destination_collection_id', help="Existing collection id")
    dest.add_argument('--new', dest='destination_new_name', help="Name for a new collection")

    imp_all = sub.add_parser('import-all', help="Import every collection from an export file")
    imp_all.add_argument('path')

    # Files
    for name, help_text in (('list-files', "List matching files in a directory"),
                            ('count-files', "Count matching files in a directory")):
        f = sub.add_parser(name, help=help_text)
        f.add_argument('directory')
        f.add_argument('--format', default='png', dest='fmt', help="File format, e.g. png or jpeg")

    return p


def dispatch(args: argparse.Namespace, store: CardStore) -> dict:
    cmd = args.command

    if cmd == 'collections':
        return hand_coll.get_collections(store)
    if cmd == 'create-collection':
        return hand_coll.create_collection(store, args.name)
    if cmd == 'sub-collections':
        return hand_coll.get_sub_collections(store, args.collection_id)
    if cmd == 'create-sub-collection':
        return hand_coll.create_sub_collection(store, args.collection_id, args.name)

    if cmd == 'cards':
        return hand_card.get_cards(store, args.collection_id)
    if cmd == 'add-card':
        return hand_card.add_card(store, args.question, args.answer, args.collection_id,
                                  args.title, args.sub_collection_id)
    if cmd == 'update-card':
        return hand_card.update_card(store, args.card_id, args.question, args.answer,
                                     args.collection_id, args.title, args.sub_collection_id)
    if cmd == 'delete-card':
        return hand_card.delete_card(store, args.card_id)
    if cmd == 'skip':
        return hand_card.set_card_skipped(store, args.card_id, not args.undo)
    if cmd == 'clear-skipped':
        return hand_card.clear_skipped_for_collection(store, args.collection_id)

    if cmd == 'export':
        if args.collection_id is not None:
            return hand_transfer.export_collection_to_path(store, args.collection_id, args.path)
        return hand_transfer.export_collections_to_path(store, args.path)
    if cmd == 'inspect':
        return hand_transfer.read_export_file(args.path)
    if cmd == 'import':
        return hand_transfer.import_collection_from_file(
            store, args.path, args.index,
            destination_collection_id=args.destination_collection_id,
            destination_new_name=args.destination_new_name,
        )
    if cmd == 'import-all':
        return hand_transfer.import_collections_from_path(store, args.path)

    if cmd == 'list-files':
        return hand_files.list_files_in_directory(args.directory, args.fmt)
    if cmd == 'count-files':
        return hand_files.count_files_in_directory(args.directory, args.fmt)

    raise ValueError(f"Unknown command: {cmd}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.debug(f"Running {args.command} against {args.db}")

    result = dispatch(args, CardStore(args.db))
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0 if result['ok'] else 1


if __name__ == '__main__':
    sys.exit(main())
