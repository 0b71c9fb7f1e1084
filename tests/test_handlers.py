"""
Tests for the command surface (handlers/) and the CLI in main.py.
"""
import json
import pytest

import handlers.cards as hand_card
import handlers.collections as hand_coll
import handlers.files as hand_files
import handlers.transfer as hand_transfer
import main
from database.database import CardStore
from utils.command_helpers import run_command
from utils.constants import DUPLICATE_CARD_MSG, RESERVED_NAME_MSG


@pytest.fixture()
def store(tmp_path):
    return CardStore(str(tmp_path / "test.db"))


# ── run_command ───────────────────────────────────────────────

class TestRunCommand:
    def test_success_wraps_value(self):
        assert run_command(lambda: 42) == {'ok': True, 'data': 42}

    def test_unexpected_errors_propagate(self):
        def broken():
            raise ZeroDivisionError()

        with pytest.raises(ZeroDivisionError):
            run_command(broken)


# ── Handlers ──────────────────────────────────────────────────

class TestHandlers:
    def test_card_lifecycle(self, store):
        added = hand_card.add_card(store, 'hola', 'hello', 1)
        assert added['ok']
        card_id = added['data']

        assert hand_card.set_card_skipped(store, card_id, True) == {'ok': True, 'data': None}
        cards = hand_card.get_cards(store, 1)['data']
        assert cards[0]['skipped'] is True

        assert hand_card.update_card(store, card_id, 'hola', 'hi', 1, title='t')['ok']
        assert hand_card.clear_skipped_for_collection(store, 1)['ok']
        card = hand_card.get_cards(store, 1)['data'][0]
        assert (card['answer'], card['title'], card['skipped']) == ('hi', 't', False)

        assert hand_card.delete_card(store, card_id)['ok']
        assert hand_card.get_cards(store, 1)['data'] == []

    def test_duplicate_card_message_verbatim(self, store):
        hand_card.add_card(store, 'q', 'a', 1)
        assert hand_card.add_card(store, 'q', 'a', 1) == {'ok': False, 'error': DUPLICATE_CARD_MSG}

    def test_reserved_name_message(self, store):
        assert hand_coll.create_sub_collection(store, 1, '- none -') == {
            'ok': False, 'error': RESERVED_NAME_MSG,
        }

    def test_storage_errors_become_results(self, store):
        hand_coll.create_collection(store, 'Spanish')
        result = hand_coll.create_collection(store, 'Spanish')
        assert result['ok'] is False
        assert 'UNIQUE' in result['error']

    def test_collections(self, store):
        created = hand_coll.create_collection(store, 'Spanish')['data']
        sub = hand_coll.create_sub_collection(store, created['id'], 'Greetings')['data']
        assert hand_coll.get_collections(store)['data'] == [{'id': 1, 'name': 'Default'}, created]
        assert hand_coll.get_sub_collections(store, created['id'])['data'] == [sub]

    def test_transfer(self, store, tmp_path):
        hand_card.add_card(store, 'q', 'a', 1)
        path = str(tmp_path / "out.json")
        assert hand_transfer.export_collection_to_path(store, 1, path)['ok']
        assert hand_transfer.export_collections_to_path(store, path)['ok']
        assert hand_transfer.read_export_file(path)['data'] == [
            {'name': 'Default', 'card_count': 1, 'sub_collection_count': 0},
        ]

        imported = hand_transfer.import_collection_from_file(store, path, 0, destination_new_name='Copy')
        assert imported == {'ok': True, 'data': {'collections_imported': 1, 'cards_added': 1}}
        again = hand_transfer.import_collections_from_path(store, path)
        assert again['data'] == {'collections_imported': 1, 'cards_added': 0}

    def test_import_without_destination(self, store, tmp_path):
        path = str(tmp_path / "out.json")
        hand_transfer.export_collections_to_path(store, path)
        result = hand_transfer.import_collection_from_file(store, path, 0)
        assert result == {
            'ok': False,
            'error': "Specify an existing collection or a new collection name",
        }

    def test_read_missing_file(self, tmp_path):
        assert hand_transfer.read_export_file(str(tmp_path / "nope.json"))['ok'] is False

    def test_malformed_file_becomes_error_result(self, store, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({'collections': [{'name': 'A', 'cards': 5}]}))
        for result in (
            hand_transfer.read_export_file(str(path)),
            hand_transfer.import_collection_from_file(store, str(path), 0, destination_new_name='Copy'),
            hand_transfer.import_collections_from_path(store, str(path)),
        ):
            assert result['ok'] is False
            assert result['error'].startswith("Not a valid export file")
        assert hand_coll.get_collections(store)['data'] == [{'id': 1, 'name': 'Default'}]

    def test_files(self, tmp_path):
        (tmp_path / 'a.jpg').write_bytes(b'hi')
        listed = hand_files.list_files_in_directory(str(tmp_path), 'jpeg')
        assert listed == {'ok': True, 'data': [str(tmp_path / 'a.jpg')]}
        assert hand_files.count_files_in_directory(str(tmp_path), 'jpeg')['data'] == 1
        assert hand_files.read_file_base64(str(tmp_path / 'a.jpg'))['data'] == 'aGk='
        assert hand_files.list_files_in_directory(str(tmp_path / 'a.jpg'), 'jpeg') == {
            'ok': False, 'error': "Path is not a directory",
        }


# ── CLI ───────────────────────────────────────────────────────

def _run(capsys, db_path, *argv):
    code = main.main(['--db', db_path, *argv])
    return code, json.loads(capsys.readouterr().out)


class TestCli:
    def test_create_and_list(self, tmp_path, capsys):
        db_path = str(tmp_path / "cli.db")
        code, out = _run(capsys, db_path, 'create-collection', 'Spanish')
        assert code == 0
        assert out['data']['name'] == 'Spanish'

        code, out = _run(capsys, db_path, 'collections')
        assert [c['name'] for c in out['data']] == ['Default', 'Spanish']

    def test_error_exit_code(self, tmp_path, capsys):
        db_path = str(tmp_path / "cli.db")
        _run(capsys, db_path, 'add-card', '1', 'q', 'a')
        code, out = _run(capsys, db_path, 'add-card', '1', 'q', 'a')
        assert code == 1
        assert out == {'ok': False, 'error': DUPLICATE_CARD_MSG}

    def test_export_import_round_trip(self, tmp_path, capsys):
        db_path = str(tmp_path / "cli.db")
        file_path = str(tmp_path / "out.json")
        _run(capsys, db_path, 'create-sub-collection', '1', 'Greetings')
        _run(capsys, db_path, 'add-card', '1', 'hola', 'hello', '--sub-collection', '2')
        _run(capsys, db_path, 'add-card', '1', 'gato', 'cat', '--title', 'animals')

        assert _run(capsys, db_path, 'export', file_path, '--collection', '1')[0] == 0
        code, out = _run(capsys, db_path, 'inspect', file_path)
        assert out['data'] == [{'name': 'Default', 'card_count': 2, 'sub_collection_count': 1}]

        code, out = _run(capsys, db_path, 'import', file_path, '0', '--new', 'Copy')
        assert out['data'] == {'collections_imported': 1, 'cards_added': 2}

    def test_import_requires_destination(self, tmp_path):
        with pytest.raises(SystemExit):
            main.main(['--db', str(tmp_path / "cli.db"), 'import', 'x.json', '0'])

    def test_skip_and_undo(self, tmp_path, capsys):
        db_path = str(tmp_path / "cli.db")
        _, out = _run(capsys, db_path, 'add-card', '1', 'q', 'a')
        card_id = str(out['data'])
        _run(capsys, db_path, 'skip', card_id)
        _, out = _run(capsys, db_path, 'cards', '1')
        assert out['data'][0]['skipped'] is True
        _run(capsys, db_path, 'skip', card_id, '--undo')
        _, out = _run(capsys, db_path, 'cards', '1')
        assert out['data'][0]['skipped'] is False
