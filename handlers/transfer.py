import database.transfer as transfer
from database.database import CardStore
from utils.command_helpers import run_command


def export_collection_to_path(store: CardStore, collection_id, path):
    return run_command(transfer.export_collection, store, collection_id, path)


def export_collections_to_path(store: CardStore, path):
    return run_command(transfer.export_all_collections, store, path)


def read_export_file(path):
    return run_command(transfer.read_export_file, path)


def import_collection_from_file(store: CardStore, path, file_index, destination_collection_id=None,
                                destination_new_name=None):
    return run_command(
        transfer.import_collection, store, path, file_index,
        destination_collection_id=destination_collection_id,
        destination_new_name=destination_new_name,
    )


def import_collections_from_path(store: CardStore, path):
    return run_command(transfer.import_all_collections, store, path)
