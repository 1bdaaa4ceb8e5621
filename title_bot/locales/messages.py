from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Texts:
    start: str
    echo_empty: str
    status_template: str
    group_only: str
    missing_argument: str
    invalid_timezone: str
    invalid_switch: str
    invalid_title: str
    invalid_request: str
    empty_segments: str
    template_changed: str
    enabled: str
    disabled: str
    timezone_changed: str
    require_admin_changed: str
    preview: str
    title_update_failed: str
    storage_failed: str
    internal_error: str


MESSAGES: Dict[str, Texts] = {
    "en": Texts(
        start=(
            "Title bot {version}\n"
            "I rename this group on a schedule using a title template.\n"
            "/status - show the current settings\n"
            "/enable, /disable - turn automatic titles on or off\n"
            "/set_template <text> - replace the template (split on the delimiter)\n"
            "/set_delimiter <text> - change the delimiter\n"
            "/set_timezone <name> - e.g. Europe/Berlin\n"
            "/push, /push_front <text> - add a segment\n"
            "/pop, /pop_front - remove a segment\n"
            "/preview - render the template without applying it\n"
            "/require_admin on|off - restrict commands to admins\n"
            "Placeholders such as {{Y}}-{{m}}-{{d}} or {{H}}:{{M}} are filled with the local time."
        ),
        echo_empty="wut?",
        status_template=(
            "Current title: {title}\n"
            "Chat ID: {chat_id}\n"
            "Automatic titles: {enabled}\n"
            "Segments: {segments}\n"
            "Delimiter: {delimiter!r}\n"
            "Timezone: {timezone}\n"
            "Admins only: {require_admin}"
        ),
        group_only="This command is only allowed in group chats.",
        missing_argument="Invalid command: /{command} needs an argument.",
        invalid_timezone="Invalid command: unknown timezone {name!r}.",
        invalid_switch="Invalid command: use /{command} on or /{command} off.",
        invalid_title="The rendered title is not valid ({reason}), automatic titles are now disabled.",
        invalid_request="Invalid command: {reason}",
        empty_segments="Nothing to remove: the title template is empty.",
        template_changed="Title template changed to: {template}",
        enabled="Automatic titles enabled, current template: {template}",
        disabled="Automatic titles disabled.",
        timezone_changed="Timezone changed to: {timezone}",
        require_admin_changed="Admins only: {value}",
        preview="Preview: {title}",
        title_update_failed=(
            "Could not change the chat title, automatic titles are now disabled. "
            "Please check the bot's admin rights."
        ),
        storage_failed="Something went wrong while saving settings, please try again later.",
        internal_error="Something went wrong, please try again later.",
    ),
    "zh": Texts(
        start=(
            "Title bot {version}\n"
            "按照标题模板定时更改群标题。\n"
            "/status - 查看当前设置\n"
            "/enable, /disable - 启用或禁用自动标题更改\n"
            "/set_template <模板> - 替换标题模板（按分隔符拆分）\n"
            "/set_delimiter <分隔符> - 更改分隔符\n"
            "/set_timezone <时区> - 例如 Asia/Shanghai\n"
            "/push, /push_front <片段> - 添加标题片段\n"
            "/pop, /pop_front - 移除标题片段\n"
            "/preview - 预览标题\n"
            "/require_admin on|off - 仅允许管理员使用\n"
            "模板中的 {{Y}}-{{m}}-{{d}}、{{H}}:{{M}} 等占位符会被替换为当地时间。"
        ),
        echo_empty="wut?",
        status_template=(
            "当前标题: {title}\n"
            "群 ID: {chat_id}\n"
            "启用自动更改: {enabled}\n"
            "标题片段: {segments}\n"
            "分隔符: {delimiter!r}\n"
            "时区: {timezone}\n"
            "需要管理权限: {require_admin}"
        ),
        group_only="该命令仅限群组使用",
        missing_argument="无效命令，/{command} 需要参数",
        invalid_timezone="无效命令，无法解析时区名称 {name!r}",
        invalid_switch="无效命令，请使用 /{command} on 或 /{command} off",
        invalid_title="生成的标题无效（{reason}），已禁用自动更改",
        invalid_request="无效命令：{reason}",
        empty_segments="标题模板为空，没有可以移除的片段",
        template_changed="标题模板已被更改至： {template}",
        enabled="已启用自动标题更改，当前标题模板为： {template}",
        disabled="已禁用自动标题更改",
        timezone_changed="时区已变更至：{timezone}",
        require_admin_changed="需要管理权限: {value}",
        preview="标题预览： {title}",
        title_update_failed="发生什么事了？未能成功更改群标题，已禁用自动更改，请检查 bot 帐号权限",
        storage_failed="保存设置时出错，请稍后再试",
        internal_error="发生错误，请稍后再试",
    ),
}


def get_text(language: str, key: str, **kwargs: object) -> str:
    texts = MESSAGES.get(language, MESSAGES["en"])
    value = getattr(texts, key)
    if kwargs:
        return value.format(**kwargs)
    return value
