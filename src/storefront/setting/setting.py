"""Setting aggregate: store-wide key/value configuration.

Values are stored as text and interpreted through ``value_type`` so that the
admin can change tax rates and shipping fees without a deploy.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from storefront.domain import storefront


class SettingType(Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


@storefront.event(part_of="Setting")
class SettingUpdated:
    """A store setting was created or changed."""

    __version__ = 1

    key = String(required=True)
    value = Text()
    value_type = String(required=True)
    updated_at = DateTime(required=True)


@storefront.aggregate
class Setting:
    key = String(identifier=True, max_length=100)
    value = Text()
    value_type = String(choices=SettingType, default=SettingType.TEXT.value)
    group = String(max_length=50, default="general")
    updated_at = DateTime()

    @invariant.post
    def value_must_match_type(self):
        if self.value is None:
            return
        try:
            self.typed_value  # noqa: B018
        except (ValueError, TypeError):
            raise ValidationError(
                {"value": [f"'{self.value}' is not a valid {self.value_type} value"]}
            ) from None

    @classmethod
    def define(cls, key, value, value_type=SettingType.TEXT.value, group="general"):
        setting = cls(key=key, value_type=value_type, group=group)
        setting.change(value, value_type=value_type, group=group)
        return setting

    def change(self, value, value_type=None, group=None):
        with atomic_change(self):
            if value_type:
                self.value_type = value_type
            if group:
                self.group = group
            self.value = value if value is None else str(value)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            SettingUpdated(
                key=self.key,
                value=self.value,
                value_type=self.value_type,
                updated_at=self.updated_at,
            )
        )

    @property
    def typed_value(self):
        if self.value is None:
            return None

        value_type = SettingType(self.value_type)
        if value_type == SettingType.NUMBER:
            return float(self.value)
        if value_type == SettingType.BOOLEAN:
            return self.value.strip().lower() in ("1", "true", "yes", "on")
        if value_type == SettingType.JSON:
            return json.loads(self.value)
        return self.value
