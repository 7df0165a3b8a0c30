"""Authentication and profile schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from fitcoach.models.user import USER_ROLES


class RegisterSchema(Schema):
    """Payload for account registration; ``profile`` holds role-specific fields."""

    username = fields.String(required=True, validate=validate.Length(min=3, max=80))
    password = fields.String(required=True, load_only=True, validate=validate.Length(max=128))
    role = fields.String(required=True, validate=validate.OneOf(USER_ROLES))
    email = fields.Email(load_default=None, allow_none=True, validate=validate.Length(max=254))
    full_name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=120))
    profile = fields.Dict(keys=fields.String(), load_default=dict)


class LoginSchema(Schema):
    username = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class UserSchema(Schema):
    """Public representation of a user and its role profile."""

    id = fields.Integer(required=True)
    uuid = fields.String()
    username = fields.String(required=True)
    email = fields.String(allow_none=True)
    role = fields.String(required=True)
    full_name = fields.String(allow_none=True)
    phone_number = fields.String(allow_none=True)
    profile_picture_url = fields.String(allow_none=True)
    is_public_profile = fields.Boolean()
    created_at = fields.DateTime(allow_none=True)
    profile = fields.Dict()


class TokenResponseSchema(Schema):
    access_token = fields.String(required=True)
    token_type = fields.String(required=True)
    expires_in = fields.Integer(required=True)
    user = fields.Nested(UserSchema)


class ProfileUpdateSchema(Schema):
    """Profile patch. ``role`` is rejected rather than silently ignored."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(allow_none=True, validate=validate.Length(max=120))
    email = fields.Email(allow_none=True, validate=validate.Length(max=254))
    phone_number = fields.String(allow_none=True, validate=validate.Length(max=40))
    profile_picture_url = fields.String(allow_none=True, validate=validate.Length(max=500))
    is_public_profile = fields.Boolean()
    profile = fields.Dict(keys=fields.String(), load_default=dict)

    @validates_schema(pass_original=True)
    def reject_role(self, data: dict[str, Any], original: Any, **_: Any) -> None:
        if isinstance(original, dict) and "role" in original:
            raise ValidationError("Role cannot be changed after registration.", "role")


class BetaSignupSchema(Schema):
    first_name = fields.String(required=True, validate=validate.Length(min=1, max=80))
    last_name = fields.String(required=True, validate=validate.Length(min=1, max=80))
    email = fields.Email(required=True, validate=validate.Length(max=254))


class BetaSignupOutSchema(Schema):
    id = fields.Integer()
    first_name = fields.String()
    last_name = fields.String()
    email = fields.String()
    created_at = fields.DateTime(allow_none=True)
