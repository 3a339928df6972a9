import pytest

from companion_memory.models.core import CompanionKey, InvalidCompanionKeyError, SearchOutcome, SearchResult
from companion_memory.utils.key_utils import derive_history_key


def test_derive_history_key_joins_fields():
    key = CompanionKey(companion_name='Einstein', model_name='llama2', user_id='user_1')
    assert derive_history_key(key) == 'Einstein-llama2-user_1'


def test_derive_history_key_is_deterministic():
    a = CompanionKey('Einstein', 'llama2', 'user_1')
    b = CompanionKey('Einstein', 'llama2', 'user_1')
    assert derive_history_key(a) == derive_history_key(b)


@pytest.mark.parametrize('other', [
    CompanionKey('Newton', 'llama2', 'user_1'),
    CompanionKey('Einstein', 'vicuna', 'user_1'),
    CompanionKey('Einstein', 'llama2', 'user_2'),
])
def test_keys_differing_in_any_field_do_not_collide(other):
    base = CompanionKey('Einstein', 'llama2', 'user_1')
    assert derive_history_key(base) != derive_history_key(other)


@pytest.mark.parametrize('fields', [
    ('', 'llama2', 'user_1'),
    ('Einstein', '   ', 'user_1'),
    ('Einstein', 'llama2', None),
    ('Einstein', 'llama2', 42),
])
def test_companion_key_rejects_missing_fields(fields):
    with pytest.raises(InvalidCompanionKeyError):
        CompanionKey(*fields)


def test_from_mapping_accepts_camel_and_snake_case():
    camel = CompanionKey.from_mapping({'companionName': 'Einstein', 'modelName': 'llama2', 'userId': 'u'})
    snake = CompanionKey.from_mapping({'companion_name': 'Einstein', 'model_name': 'llama2', 'user_id': 'u'})
    assert camel == snake


def test_from_mapping_without_user_id_is_invalid():
    with pytest.raises(InvalidCompanionKeyError):
        CompanionKey.from_mapping({'companionName': 'Einstein', 'modelName': 'llama2'})


def test_search_result_defaults_to_no_matches():
    result = SearchResult()
    assert result.documents == []
    assert result.outcome is SearchOutcome.NO_MATCHES
    assert not result.failed
