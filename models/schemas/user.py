from marshmallow import EXCLUDE, Schema, fields, pre_load, validate


def _norm_email(v):
    # surrounding whitespace only; the stored email keeps its case
    return v.strip() if isinstance(v, str) else v


class UserCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=255))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserSummarySchema(Schema):
    """Shape returned by registration: {id, name, email}."""
    id = fields.String()
    name = fields.String(allow_none=True)
    email = fields.String()


class UserOutSchema(UserSummarySchema):
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
