"""Account endpoints: signup, signin, token rotation, signout and profile."""

from __future__ import annotations

from flask import Blueprint, current_app

from account.api.deps import (
    current_user,
    get_session,
    json_body,
    json_response,
    require_identity,
    timing,
)
from account.core.extensions import get_token_service, limiter
from account.schemas import CredentialsSchema, RefreshTokenSchema, TokenPairSchema, UserSchema
from account.services.tokens import TokenPair
from account.services.users import CredentialsIn
from account.services.users.service import UserService

bp = Blueprint("account", __name__)

credentials_schema = CredentialsSchema()
refresh_token_schema = RefreshTokenSchema()
token_pair_schema = TokenPairSchema()
user_schema = UserSchema()


def _tokens_body(pair: TokenPair) -> dict:
    return {"tokens": token_pair_schema.dump(pair)}


def _signin_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/signup")
@timing
def signup():
    """Create an account and return its first token pair."""

    data = credentials_schema.load(json_body())
    user = UserService(get_session()).signup(CredentialsIn(**data))
    pair = get_token_service().issue_token_pair(user)
    return json_response(_tokens_body(pair), status=201)


@bp.post("/signin")
@limiter.limit(_signin_rate_limit)
@timing
def signin():
    """Verify credentials and return a new token pair."""

    data = credentials_schema.load(json_body())
    user = UserService(get_session()).signin(CredentialsIn(**data))
    pair = get_token_service().issue_token_pair(user)
    return json_response(_tokens_body(pair))


@bp.post("/tokens")
@timing
def tokens():
    """Exchange a refresh token for a new pair, invalidating the old id."""

    data = refresh_token_schema.load(json_body())
    token_service = get_token_service()
    refresh_token = token_service.validate_refresh_token(data["refresh_token"])
    user = UserService(get_session()).get(refresh_token.uid)
    pair = token_service.issue_token_pair(user, refresh_token.id)
    return json_response(_tokens_body(pair))


@bp.post("/signout")
@timing
def signout():
    """Revoke a single refresh token."""

    data = refresh_token_schema.load(json_body())
    token_service = get_token_service()
    refresh_token = token_service.validate_refresh_token(data["refresh_token"])
    token_service.revoke_refresh_token(refresh_token.uid, refresh_token.id)
    return "", 204


@bp.get("/me")
@require_identity
@timing
def me():
    """Return the user embedded in the verified identity token."""

    return json_response({"user": user_schema.dump(current_user())})
