from datetime import timedelta

import jwt
import pytest

from inkfolio.auth import TokenService, bearer_token
from inkfolio.errors import InvalidToken


@pytest.fixture
def tokens():
    return TokenService('access-secret', 'refresh-secret')


def test_pair_round_trips_user_id(tokens):
    pair = tokens.issue_token_pair('u1')
    assert tokens.verify_access(pair['token']) == 'u1'
    assert tokens.verify_refresh(pair['refresh_token']) == 'u1'


def test_access_and_refresh_are_not_interchangeable(tokens):
    pair = tokens.issue_token_pair('u1')
    with pytest.raises(InvalidToken):
        tokens.verify_access(pair['refresh_token'])
    with pytest.raises(InvalidToken):
        tokens.verify_refresh(pair['token'])


def test_expired_token_is_rejected():
    tokens = TokenService('a', 'r', access_ttl=timedelta(seconds=-1))
    token = tokens.issue_token_pair('u1')['token']
    with pytest.raises(InvalidToken, match='expired'):
        tokens.verify_access(token)


def test_foreign_signature_is_rejected(tokens):
    token = jwt.encode({'user_id': 'u1', 'type': 'access'}, 'other', algorithm='HS256')
    with pytest.raises(InvalidToken):
        tokens.verify_access(token)


def test_token_without_user_id_is_rejected(tokens):
    token = jwt.encode({'type': 'access'}, 'access-secret', algorithm='HS256')
    with pytest.raises(InvalidToken):
        tokens.verify_access(token)


def test_bearer_token_parsing():
    assert bearer_token({'Authorization': 'Bearer abc'}) == 'abc'
    assert bearer_token({'Authorization': 'Basic abc'}) is None
    assert bearer_token({'Authorization': 'Bearer '}) is None
    assert bearer_token({}) is None
