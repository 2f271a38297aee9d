"""Account endpoint schemas (credentials, tokens, user profile)."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class CredentialsSchema(Schema):
    """Input payload for signing up or signing in."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=6, max=30))


class RefreshTokenSchema(Schema):
    """Input payload carrying a refresh token (``/tokens`` and ``/signout``)."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )


class TokenPairSchema(Schema):
    """Identity/Refresh token pair as returned to clients."""

    id_token = fields.String(required=True, data_key="idToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class UserSchema(Schema):
    """Public representation of an account user; the password is never dumped."""

    uid = fields.UUID(required=True)
    email = fields.Email(required=True)
    name = fields.String()
    image_url = fields.String(data_key="imageUrl")
    website = fields.String()
