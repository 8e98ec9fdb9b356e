"""
I18n — Localized user-facing messages (English / Chinese)

Language resolution (highest to lowest priority):
  1. --lang flag
  2. Config `language` (unless "auto")
  3. Environment: SHNOTE_LANG, LC_ALL, LC_MESSAGES, LANGUAGE, LANG
  4. English
"""

import os
from enum import Enum
from typing import Dict, Optional


class Lang(Enum):
    EN = "en"
    ZH = "zh"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional['Lang']:
        """
        Parse a locale tag such as "zh_CN.UTF-8" or "en-US".

        C/POSIX are not languages and return None so detection falls through.
        """
        if not tag:
            return None
        raw = tag.strip()
        if not raw:
            return None
        raw = raw.split(".", 1)[0].replace("_", "-").lower()
        if raw in ("c", "posix"):
            return None
        if raw.startswith("zh"):
            return cls.ZH
        if raw.startswith("en"):
            return cls.EN
        return None


LANG_ENV_KEYS = ("SHNOTE_LANG", "LC_ALL", "LC_MESSAGES", "LANGUAGE", "LANG")


def lang_from_env(environ=None) -> Optional[Lang]:
    environ = os.environ if environ is None else environ
    for key in LANG_ENV_KEYS:
        value = environ.get(key)
        if value is None:
            continue
        if key == "LANGUAGE":
            # GNU priority list: "zh_CN:en_US"
            value = value.split(":", 1)[0]
        lang = Lang.from_tag(value)
        if lang:
            return lang
    return None


def detect_lang(cli_lang: Optional[str], config_lang: str = "auto", environ=None) -> Lang:
    lang = Lang.from_tag(cli_lang)
    if lang:
        return lang
    if config_lang and config_lang != "auto":
        lang = Lang.from_tag(config_lang)
        if lang:
            return lang
    return lang_from_env(environ) or Lang.EN


# Message table: id -> {Lang: template}. Templates use str.format fields.
MESSAGES: Dict[str, Dict[Lang, str]] = {
    # Rationale gate / classifier
    "err_missing_what_why": {
        Lang.EN: "`{cmd}` requires `--what` and `--why`, and they must appear before the subcommand.\n"
                 "Example: shnote --what \"...\" --why \"...\" {cmd} ...",
        Lang.ZH: "`{cmd}` 需要 `--what` 和 `--why`，并且必须写在子命令之前。\n"
                 "示例：shnote --what \"...\" --why \"...\" {cmd} ...",
    },
    "err_missing_flags": {
        Lang.EN: "missing: {flags}",
        Lang.ZH: "缺少：{flags}",
    },
    "err_misplaced_flags": {
        Lang.EN: "found after the subcommand: {flags}",
        Lang.ZH: "写在了子命令之后：{flags}",
    },
    "err_reject_root_meta": {
        Lang.EN: "`--what/--why` are only accepted for `run`, `py`, `node`, `pip`, `npm`, `npx`, and `pueue` commands",
        Lang.ZH: "`--what/--why` 只允许用于 `run`、`py`、`node`、`pip`、`npm`、`npx` 和 `pueue` 命令",
    },
    "err_unknown_command": {
        Lang.EN: "unknown command: {cmd}. Available: {available}",
        Lang.ZH: "未知命令：{cmd}。可用命令：{available}",
    },
    "err_no_command": {
        Lang.EN: "a subcommand is required",
        Lang.ZH: "需要指定子命令",
    },
    "err_flag_needs_value": {
        Lang.EN: "option {flag} requires a value",
        Lang.ZH: "选项 {flag} 需要一个值",
    },
    "err_run_needs_command": {
        Lang.EN: "`run` requires a command to execute",
        Lang.ZH: "`run` 需要指定要执行的命令",
    },
    "err_script_source_required": {
        Lang.EN: "exactly one of --stdin, -c/--code, -f/--file is required",
        Lang.ZH: "必须且只能指定一种脚本来源：--stdin、-c/--code、-f/--file",
    },
    "err_script_file_not_found": {
        Lang.EN: "script file not found or not readable: {path}",
        Lang.ZH: "脚本文件不存在或不可读：{path}",
    },
    "err_read_stdin": {
        Lang.EN: "failed to read from stdin",
        Lang.ZH: "从 stdin 读取失败",
    },
    # Executor
    "err_interpreter_not_found": {
        Lang.EN: "interpreter not found: {name}",
        Lang.ZH: "未找到解释器：{name}",
    },
    "err_failed_to_execute": {
        Lang.EN: "failed to execute: {cmd} ({reason})",
        Lang.ZH: "执行失败：{cmd}（{reason}）",
    },
    "err_no_shell_unix": {
        Lang.EN: "no shell found in PATH (tried: zsh, bash, sh)",
        Lang.ZH: "在 PATH 中未找到 shell（已尝试：zsh、bash、sh）",
    },
    "err_no_shell_windows": {
        Lang.EN: "no shell found (tried: pwsh, powershell, cmd)",
        Lang.ZH: "未找到 shell（已尝试：pwsh、powershell、cmd）",
    },
    "err_shell_not_in_path": {
        Lang.EN: "shell not found in PATH: {name}",
        Lang.ZH: "在 PATH 中未找到 shell：{name}",
    },
    # Config
    "config_key_not_found": {
        Lang.EN: "unknown config key: {key}",
        Lang.ZH: "未知的配置项：{key}",
    },
    "config_updated": {
        Lang.EN: "config updated: {key} = {value}",
        Lang.ZH: "配置已更新：{key} = {value}",
    },
    "config_reset_done": {
        Lang.EN: "configuration reset to defaults",
        Lang.ZH: "配置已重置为默认值",
    },
    "err_invalid_config_value": {
        Lang.EN: "invalid {key} value: {value}. Valid options: {valid}",
        Lang.ZH: "无效的 {key} 值：{value}。有效选项：{valid}",
    },
    "err_read_config": {
        Lang.EN: "failed to read config file: {path}",
        Lang.ZH: "读取配置文件失败：{path}",
    },
    "err_parse_config": {
        Lang.EN: "failed to parse config file: {path}",
        Lang.ZH: "解析配置文件失败：{path}",
    },
    "err_write_config": {
        Lang.EN: "failed to write config file: {path}",
        Lang.ZH: "写入配置文件失败：{path}",
    },
    "err_home_dir": {
        Lang.EN: "failed to determine home directory",
        Lang.ZH: "无法确定主目录",
    },
    # Block merge
    "err_corrupt_block": {
        Lang.EN: "{path}: shnote block `{marker}` has a start marker without a matching end marker; "
                 "fix the file by hand (nothing was changed)",
        Lang.ZH: "{path}：shnote 区块 `{marker}` 有开始标记但缺少结束标记；请手动修复该文件（未做任何修改）",
    },
    "err_duplicate_block": {
        Lang.EN: "{path}: shnote block `{marker}` appears more than once; fix the file by hand (nothing was changed)",
        Lang.ZH: "{path}：shnote 区块 `{marker}` 出现了多次；请手动修复该文件（未做任何修改）",
    },
    "err_write_file": {
        Lang.EN: "failed to write file: {path}",
        Lang.ZH: "写入文件失败：{path}",
    },
    "err_read_file": {
        Lang.EN: "failed to read file: {path}",
        Lang.ZH: "读取文件失败：{path}",
    },
    # Init
    "init_success": {
        Lang.EN: "{check} shnote rules written to: {path}",
        Lang.ZH: "{check} shnote 规则已写入到：{path}",
    },
    "init_rules_inserted": {
        Lang.EN: "  (rules appended to file)",
        Lang.ZH: "  （规则已追加到文件）",
    },
    "init_rules_updated": {
        Lang.EN: "  (existing shnote rules were updated)",
        Lang.ZH: "  （已更新现有的 shnote 规则）",
    },
    "init_rules_unchanged": {
        Lang.EN: "  (rules already up to date)",
        Lang.ZH: "  （规则已是最新）",
    },
    "init_old_rules_cleaned": {
        Lang.EN: "  (removed old rules from {path})",
        Lang.ZH: "  （已从 {path} 移除旧规则）",
    },
    "init_tool_found": {
        Lang.EN: "{check} Detected {tool} {version} ({path})",
        Lang.ZH: "{check} 检测到 {tool} {version}（{path}）",
    },
    "init_tool_not_found": {
        Lang.EN: "! {tool} not found in PATH (rules will still be written)",
        Lang.ZH: "! 在 PATH 中未找到 {tool}（仍会写入规则）",
    },
    # Setup
    "setup_starting": {
        Lang.EN: "Setting up shnote...",
        Lang.ZH: "正在设置 shnote...",
    },
    "setup_platform": {
        Lang.EN: "  Platform: {platform}",
        Lang.ZH: "  平台：{platform}",
    },
    "setup_target_dir": {
        Lang.EN: "  Target directory: {path}",
        Lang.ZH: "  目标目录：{path}",
    },
    "setup_downloading": {
        Lang.EN: "Downloading pueue binaries...",
        Lang.ZH: "正在下载 pueue 二进制文件...",
    },
    "setup_using_proxy": {
        Lang.EN: "  Using GitHub proxy: {proxy}",
        Lang.ZH: "  使用 GitHub 代理：{proxy}",
    },
    "setup_path_instruction": {
        Lang.EN: "To use pueue, add the following to your PATH:",
        Lang.ZH: "要使用 pueue，请将以下路径添加到 PATH：",
    },
    "setup_complete": {
        Lang.EN: "Setup complete! Run `shnote doctor` to verify.",
        Lang.ZH: "设置完成！运行 `shnote doctor` 验证。",
    },
    "err_unsupported_platform": {
        Lang.EN: "no prebuilt pueue binaries for this platform: {platform}",
        Lang.ZH: "当前平台没有预编译的 pueue 二进制文件：{platform}",
    },
    "err_download_failed": {
        Lang.EN: "download failed: {url} ({reason})",
        Lang.ZH: "下载失败：{url}（{reason}）",
    },
    "err_checksum_mismatch": {
        Lang.EN: "SHA256 checksum mismatch for {path}\n  expected: {expected}\n  actual:   {actual}",
        Lang.ZH: "{path} 的 SHA256 校验失败\n  预期：{expected}\n  实际：{actual}",
    },
    "err_create_dir": {
        Lang.EN: "failed to create directory: {path}",
        Lang.ZH: "创建目录失败：{path}",
    },
    # Doctor
    "doctor_all_ok": {
        Lang.EN: "All dependencies OK!",
        Lang.ZH: "所有依赖检查通过！",
    },
    "doctor_has_issues": {
        Lang.EN: "Some dependencies have issues. Please fix them before using shnote.",
        Lang.ZH: "部分依赖存在问题，请先修复后再使用 shnote。",
    },
    "doctor_not_found_in_path": {
        Lang.EN: "not found in PATH",
        Lang.ZH: "在 PATH 中未找到",
    },
    "doctor_pueue_not_found": {
        Lang.EN: "not found (run `shnote setup` to install)",
        Lang.ZH: "未找到（运行 `shnote setup` 安装）",
    },
    # Info
    "info_paths": {Lang.EN: "Paths", Lang.ZH: "路径"},
    "info_install_path": {Lang.EN: "Install", Lang.ZH: "安装位置"},
    "info_config_path": {Lang.EN: "Config", Lang.ZH: "配置文件"},
    "info_data_path": {Lang.EN: "Data", Lang.ZH: "数据目录"},
    "info_components": {Lang.EN: "Components", Lang.ZH: "组件"},
    "info_installed": {Lang.EN: "installed", Lang.ZH: "已安装"},
    "info_not_installed": {Lang.EN: "not installed", Lang.ZH: "未安装"},
    "info_run_setup": {Lang.EN: "(run `shnote setup`)", Lang.ZH: "（运行 `shnote setup`）"},
    "info_unknown": {Lang.EN: "unknown", Lang.ZH: "未知"},
    # Update
    "update_checking": {
        Lang.EN: "Checking for updates...",
        Lang.ZH: "正在检查更新...",
    },
    "update_current_version": {Lang.EN: "Current version", Lang.ZH: "当前版本"},
    "update_latest_version": {Lang.EN: "Latest version", Lang.ZH: "最新版本"},
    "update_already_latest": {
        Lang.EN: "You are already using the latest version.",
        Lang.ZH: "已是最新版本。",
    },
    "update_available": {
        Lang.EN: "New version available: {version}. Run `shnote update` to install.",
        Lang.ZH: "有新版本可用：{version}。运行 `shnote update` 安装。",
    },
    "update_installing": {
        Lang.EN: "Installing {version}...",
        Lang.ZH: "正在安装 {version}...",
    },
    "update_success": {
        Lang.EN: "Updated to {version}.",
        Lang.ZH: "已更新到 {version}。",
    },
    "update_failed": {
        Lang.EN: "pip exited with status {code}",
        Lang.ZH: "pip 退出状态为 {code}",
    },
    "update_err_fetch": {
        Lang.EN: "failed to fetch latest version: {reason}",
        Lang.ZH: "获取最新版本失败：{reason}",
    },
    "update_rules_checking": {
        Lang.EN: "Checking installed AI rules...",
        Lang.ZH: "正在检查已安装的 AI 规则...",
    },
    "update_rules_outdated": {
        Lang.EN: "  outdated: {path}",
        Lang.ZH: "  已过期：{path}",
    },
    "update_rules_prompt": {
        Lang.EN: "Refresh outdated rules?",
        Lang.ZH: "是否刷新过期的规则？",
    },
    "update_rules_refreshed": {
        Lang.EN: "  refreshed: {path}",
        Lang.ZH: "  已刷新：{path}",
    },
    "update_rules_current": {
        Lang.EN: "  All rules are up to date.",
        Lang.ZH: "  所有规则均为最新。",
    },
    # Uninstall
    "uninstall_will_remove": {
        Lang.EN: "The following will be removed:",
        Lang.ZH: "将删除以下内容：",
    },
    "uninstall_config_data": {Lang.EN: "config and data", Lang.ZH: "配置和数据"},
    "uninstall_rules_files": {
        Lang.EN: "shnote rules in AI tool files:",
        Lang.ZH: "AI 工具文件中的 shnote 规则：",
    },
    "uninstall_confirm": {
        Lang.EN: "Continue?",
        Lang.ZH: "是否继续？",
    },
    "uninstall_cancelled": {
        Lang.EN: "Uninstall cancelled.",
        Lang.ZH: "已取消卸载。",
    },
    "uninstall_removing": {Lang.EN: "Removing", Lang.ZH: "正在删除"},
    "uninstall_nothing": {
        Lang.EN: "Nothing to remove.",
        Lang.ZH: "没有需要删除的内容。",
    },
    "uninstall_success": {
        Lang.EN: "shnote data removed.",
        Lang.ZH: "shnote 数据已删除。",
    },
    "uninstall_package_hint": {
        Lang.EN: "To remove the package itself, run: {command}",
        Lang.ZH: "如需删除软件包本身，请运行：{command}",
    },
}


class I18n:
    """Message lookup bound to one language."""

    def __init__(self, lang: Lang = Lang.EN):
        self.lang = lang

    def t(self, key: str, /, **kwargs) -> str:
        entry = MESSAGES[key]
        template = entry.get(self.lang) or entry[Lang.EN]
        return template.format(**kwargs) if kwargs else template

    def __repr__(self):
        return f"I18n({self.lang.value})"
