from marshmallow import Schema, fields, validate


class UserCredentialsSchema(Schema):
    """Body of /register and /login."""
    username = fields.String(required=True, validate=validate.Length(min=1, max=255))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    username = fields.String(allow_none=False)
    created_at = fields.DateTime(allow_none=True)
