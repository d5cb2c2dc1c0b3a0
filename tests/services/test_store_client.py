import logging
from unittest.mock import MagicMock

import pytest

from vocab_highlighter.core import WordPatch
from vocab_highlighter.services import RpcDispatcher, StoreClient


@pytest.fixture
def client(dispatcher):
    return StoreClient(dispatcher, page_name="test-page")


def test_get_word_passes_record_dict(client, word_service):
    word_service.upsert(WordPatch(word="apple", meaning="fruit"))
    on_success = MagicMock()

    client.get_word("apple", on_success)

    record = on_success.call_args[0][0]
    assert record["word"] == "apple"
    assert record["meaning"] == "fruit"


def test_get_word_missing_passes_none(client):
    on_success = MagicMock()
    client.get_word("ghost", on_success)
    on_success.assert_called_once_with(None)


def test_get_favorite_words(client, word_service):
    word_service.upsert(WordPatch(word="apple", status_favorite=True))
    on_success = MagicMock()

    client.get_favorite_words(on_success)

    favorites = on_success.call_args[0][0]
    assert [record["word"] for record in favorites] == ["apple"]


def test_import_words_reports_count(client):
    on_success = MagicMock()
    client.import_words([{"word": "a"}, {"word": "b"}], on_success)
    on_success.assert_called_once_with(2)


def test_upsert_then_get_all(client):
    client.upsert_word({"word": "apple", "statusChecked": True}, MagicMock())
    on_success = MagicMock()

    client.get_all_words(on_success)

    records = on_success.call_args[0][0]
    assert records[0]["statusChecked"] is True


def test_error_goes_to_error_callback(client):
    on_success = MagicMock()
    on_error = MagicMock()

    client.delete_word("   ", on_success, on_error)

    on_success.assert_not_called()
    on_error.assert_called_once_with("Word is required")


def test_error_without_callback_is_logged(client, caplog):
    with caplog.at_level(logging.ERROR):
        client.get_word("", MagicMock())
    assert "test-page" in caplog.text
    assert "getWord" in caplog.text


def test_update_word_status_sets_field_bag_then_saves(client, word_service):
    on_success = MagicMock()

    client.update_word_status("apple", True, True, on_success)

    on_success.assert_called_once_with("Saved 'apple'")
    bag = word_service.get_dicts_data()
    assert bag.dicts_word == "apple"
    assert bag.dicts_status_fav is True
    assert bag.dicts_update_time is not None
    assert word_service.get_word("apple").status_favorite is True


def test_update_word_status_sends_after_field_bag_reply(word_service, deferred_pool):
    client = StoreClient(RpcDispatcher(word_service, thread_pool=deferred_pool))
    on_success = MagicMock()

    client.update_word_status("apple", False, True, on_success)
    # Only the field bag write is in flight
    assert len(deferred_pool.queued) == 1

    deferred_pool.run_all()
    assert len(deferred_pool.queued) == 1
    on_success.assert_not_called()

    deferred_pool.run_all()
    on_success.assert_called_once_with("Saved 'apple'")
