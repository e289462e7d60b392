from marshmallow import Schema, fields, pre_load, validate


class TodoCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))

    @pre_load
    def strip_title(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("title"), str):
            data = {**data, "title": data["title"].strip()}
        return data


class TodoOutSchema(Schema):
    id = fields.String()
    owner_id = fields.String()
    title = fields.String()
    completed = fields.Boolean()
    created_at = fields.DateTime(allow_none=True)
