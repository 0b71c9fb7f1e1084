from database.database import CardStore
from utils.command_helpers import run_command


def get_collections(store: CardStore):
    return run_command(store.get_collections)


def create_collection(store: CardStore, name):
    return run_command(store.create_collection, name)


def get_sub_collections(store: CardStore, collection_id):
    return run_command(store.get_sub_collections, collection_id)


def create_sub_collection(store: CardStore, collection_id, name):
    return run_command(store.create_sub_collection, collection_id, name)
