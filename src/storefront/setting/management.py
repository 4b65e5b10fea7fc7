"""Setting management: upsert command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.setting.setting import Setting


@storefront.command(part_of="Setting")
class UpdateSetting:
    key = String(required=True, max_length=100)
    value = Text()
    value_type = String(max_length=20)
    group = String(max_length=50)


@storefront.command_handler(part_of=Setting)
class ManageSettingsHandler:
    @handle(UpdateSetting)
    def update_setting(self, command):
        repo = current_domain.repository_for(Setting)
        try:
            setting = repo.get(command.key)
            setting.change(command.value, value_type=command.value_type, group=command.group)
        except ObjectNotFoundError:
            setting = Setting.define(
                key=command.key,
                value=command.value,
                value_type=command.value_type or "text",
                group=command.group or "general",
            )
        repo.add(setting)

        logger.info("setting_updated", key=command.key, value=setting.value)
        return setting.key
