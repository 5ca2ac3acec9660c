from flask import current_app
from marshmallow import Schema, fields, validate, post_load, ValidationError, EXCLUDE
from stockroom.models import PickListStatus
from stockroom.utils.filters import SORT_KEYS, STOCK_LEVELS, ACTIVITY_CATEGORIES


class PaginationSchema(Schema):
    """Common page/per_page query parameters"""
    class Meta:
        unknown = EXCLUDE

    page = fields.Int(validate=validate.Range(min=1), load_default=1)
    per_page = fields.Int(validate=validate.Range(min=1), load_default=None)

    @post_load
    def page_size(self, data, **kwargs):
        """Default and cap per_page from DEFAULT_PAGE_SIZE and MAX_PAGE_SIZE"""
        max_size = current_app.config['MAX_PAGE_SIZE']
        if data['per_page'] is None:
            data['per_page'] = min(current_app.config['DEFAULT_PAGE_SIZE'], max_size)
        elif data['per_page'] > max_size:
            raise ValidationError(f'Must be at most {max_size}', 'per_page')
        return data


class ItemRequestSchema(Schema):
    """Schema for creating items"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)
    sku = fields.Str(validate=validate.Length(min=1, max=100), allow_none=True)
    barcode = fields.Str(validate=validate.Length(max=100), allow_none=True)
    quantity = fields.Int(validate=validate.Range(min=0), load_default=0)
    min_quantity = fields.Int(validate=validate.Range(min=0), load_default=0)
    cost_price = fields.Float(validate=validate.Range(min=0), allow_none=True)
    sell_price = fields.Float(validate=validate.Range(min=0), allow_none=True)
    weight = fields.Float(validate=validate.Range(min=0), allow_none=True)
    photos = fields.List(fields.Str(), load_default=list)
    folder_id = fields.Str(allow_none=True)
    location = fields.Str(validate=validate.Length(max=255), allow_none=True)
    notes = fields.Str(allow_none=True)
    tag_ids = fields.List(fields.Str(), load_default=list)


class ItemUpdateSchema(Schema):
    """Partial item update; quantity changes go through adjustments"""
    name = fields.Str(validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)
    sku = fields.Str(validate=validate.Length(min=1, max=100))
    barcode = fields.Str(validate=validate.Length(max=100), allow_none=True)
    min_quantity = fields.Int(validate=validate.Range(min=0))
    cost_price = fields.Float(validate=validate.Range(min=0), allow_none=True)
    sell_price = fields.Float(validate=validate.Range(min=0), allow_none=True)
    weight = fields.Float(validate=validate.Range(min=0), allow_none=True)
    photos = fields.List(fields.Str())
    location = fields.Str(validate=validate.Length(max=255), allow_none=True)
    notes = fields.Str(allow_none=True)
    tag_ids = fields.List(fields.Str())


class ItemSearchSchema(PaginationSchema):
    """Query parameters for item listing"""
    search = fields.Str(load_default=None)
    sort_by = fields.Str(validate=validate.OneOf(SORT_KEYS), load_default='name')
    descending = fields.Bool(load_default=False)
    low_stock = fields.Bool(load_default=False)
    folder_id = fields.Str(load_default=None)
    root_only = fields.Bool(load_default=False)

    @post_load
    def scope(self, data, **kwargs):
        data['scope_to_folder'] = bool(data.pop('root_only') or data.get('folder_id'))
        return data


class StockLevelSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    level = fields.Str(validate=validate.OneOf(STOCK_LEVELS), load_default='all')


class QuantityAdjustmentSchema(Schema):
    """Schema for manual stock adjustments"""
    adjustment = fields.Int(required=True, strict=True)
    reason = fields.Str(validate=validate.Length(max=500), allow_none=True)

    @post_load
    def non_zero(self, data, **kwargs):
        if data['adjustment'] == 0:
            raise ValidationError('Adjustment cannot be zero', 'adjustment')
        return data


class MoveItemSchema(Schema):
    folder_id = fields.Str(required=True, allow_none=True)


class FolderRequestSchema(Schema):
    """Schema for creating folders"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    parent_folder_id = fields.Str(allow_none=True, load_default=None)
    icon = fields.Str(validate=validate.Length(max=50), allow_none=True)
    colour = fields.Str(validate=validate.Length(max=20), allow_none=True)
    description = fields.Str(allow_none=True)
    sku = fields.Str(validate=validate.Length(min=1, max=100), allow_none=True)


class FolderUpdateSchema(Schema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    parent_folder_id = fields.Str(allow_none=True)
    icon = fields.Str(validate=validate.Length(max=50), allow_none=True)
    colour = fields.Str(validate=validate.Length(max=20), allow_none=True)
    description = fields.Str(allow_none=True)
    sku = fields.Str(validate=validate.Length(min=1, max=100), allow_none=True)


class TagRequestSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    colour = fields.Str(validate=validate.Length(max=20), allow_none=True)


class PickListRequestSchema(Schema):
    """Schema for creating pick lists"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    notes = fields.Str(allow_none=True)
    assigned_to = fields.Str(allow_none=True)


class PickListUpdateSchema(Schema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    notes = fields.Str(allow_none=True)
    assigned_to = fields.Str(allow_none=True)


class PickListSearchSchema(PaginationSchema):
    """Query parameters for pick list listing"""
    status = fields.Str(
        validate=validate.OneOf(['all'] + [s.value for s in PickListStatus]),
        load_default='all'
    )
    search = fields.Str(load_default=None)


class PickListLineSchema(Schema):
    item_id = fields.Str(required=True, validate=validate.Length(min=1))
    # Range checks live in the service so they surface as invalid_quantity
    quantity = fields.Raw(required=True)
    location_hint = fields.Str(validate=validate.Length(max=255), allow_none=True)


class AddLinesSchema(Schema):
    lines = fields.List(fields.Nested(PickListLineSchema), required=True, validate=validate.Length(min=1))


class PickRequestSchema(Schema):
    quantity_picked = fields.Raw(required=True)


class TransitionRequestSchema(Schema):
    """Target status; unknown values are reported as invalid transitions"""
    status = fields.Str(required=True)


class CommentRequestSchema(Schema):
    content = fields.Str(required=True, validate=validate.Length(min=1, max=2000))


class ActivitySearchSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    category = fields.Str(validate=validate.OneOf(ACTIVITY_CATEGORIES), load_default='all')
    limit = fields.Int(validate=validate.Range(min=1, max=100), load_default=50)
    offset = fields.Int(validate=validate.Range(min=0), load_default=0)


class RegisterRequestSchema(Schema):
    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=8), load_only=True)
    full_name = fields.Str(allow_none=True)


class SignInRequestSchema(Schema):
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class ProfileUpdateSchema(Schema):
    full_name = fields.Str(allow_none=True, validate=validate.Length(max=255))
    avatar_url = fields.Str(allow_none=True, validate=validate.Length(max=500))


class PinRequestSchema(Schema):
    pin = fields.Str(required=True)
