from database.database import CardStore
from utils.command_helpers import run_command


def add_card(store: CardStore, question, answer, collection_id, title=None, sub_collection_id=None):
    return run_command(store.add_card, question, answer, collection_id, title, sub_collection_id)


def update_card(store: CardStore, card_id, question, answer, collection_id, title=None, sub_collection_id=None):
    return run_command(store.update_card, card_id, question, answer, collection_id, title, sub_collection_id)


def delete_card(store: CardStore, card_id):
    return run_command(store.delete_card, card_id)


def get_cards(store: CardStore, collection_id):
    return run_command(store.get_cards, collection_id)


def set_card_skipped(store: CardStore, card_id, skipped: bool):
    return run_command(store.set_card_skipped, card_id, skipped)


def clear_skipped_for_collection(store: CardStore, collection_id):
    return run_command(store.clear_skipped_for_collection, collection_id)
