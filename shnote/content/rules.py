"""
Rules document installed into AI agent instruction files.

Assembled from sections so the pueue part is only included when pueue is
available on this machine.
"""

from ..i18n import Lang

RULES_EN_HEAD = """# shnote - Shell Command Wrapper

## Overview

shnote wraps command execution and requires a WHAT (what the command does)
and a WHY (why it is being run) before anything executes. This lets users
quickly understand the commands an AI agent assembles on the fly.

## Rule

**Whenever you need to run a shell command, run it through shnote instead of
calling the Bash/shell tool directly.**

> `--what/--why` are only accepted for the execution subcommands `run`, `py`,
> `node`, `pip`, `npm`, `npx` and `pueue`, and they must come BEFORE the
> subcommand. Management commands (`config`, `init`, `setup`, `doctor`,
> `completions`, ...) are run as `shnote <subcommand>` without them.

### Do

```bash
shnote --what "List files" --why "Inspect project layout" run ls -la
shnote --what "Run a check" --why "Verify the fix" py -c 'print("ok")'
shnote --what "Transform JSON" --why "Convert config format" node -c 'console.log(JSON.stringify({a:1}))'
shnote --what "Install requests" --why "Needed for HTTP calls" pip install requests
shnote --what "Install axios" --why "HTTP client" npm install axios
```

### Don't

```bash
ls -la                 # wrong: not wrapped
shnote run ls -la      # wrong: missing --what and --why
shnote run --what x --why y ls   # wrong: flags after the subcommand
```

## Command forms

```bash
shnote --what "<what>" --why "<why>" run <command> [args...]

shnote --what "<what>" --why "<why>" py -c '<code>'
shnote --what "<what>" --why "<why>" py -f <script.py> [-- args...]
shnote --what "<what>" --why "<why>" py --stdin <<'EOF'
<multi-line code>
EOF

shnote --what "<what>" --why "<why>" node -c '<code>'
shnote --what "<what>" --why "<why>" node -f <script.js>

shnote --what "<what>" --why "<why>" pip <pip args...>     # runs `python -m pip`
shnote --what "<what>" --why "<why>" npm <npm args...>     # npm next to the configured node
shnote --what "<what>" --why "<why>" npx <npx args...>
```

### Inline code

- Python f-string expressions cannot contain backslashes: assign the format
  string to a variable first.
- Nest quotes: single quotes outside, double quotes inside (or the reverse).
- For anything longer than a line or two, prefer `py --stdin` with a quoted
  heredoc (`<<'EOF'`) or a script file.

## Prefer uv when it is installed

`uv run --with <pkg>` and `uvx <tool>` run Python code and tools in throwaway
environments without polluting the system interpreter:

```bash
shnote --what "Make a QR code" --why "Share a link" run uv run --with qrcode --with pillow python -c "import qrcode; qrcode.make('hi').save('qr.png')"
shnote --what "Lint code" --why "Find problems early" run uvx ruff check .
```

Use `pip install` for persistent project dependencies or when uv is absent.

## Writing --what and --why

- `--what`: short, starts with a verb ("List files", "Build project").
- `--why`: the reason or context ("Inspect layout", "Verify the fix").

## When shnote is not needed

Agent-internal operations that have dedicated tools (reading or editing
files) do not go through shnote.
"""

RULES_EN_PUEUE = """
## Long-running commands (pueue)

Commands that run for a long time or never exit (dev servers, watchers, long
builds) must run in the background through pueue so the agent is not blocked.

> If `pueue/pueued` are missing, run `shnote setup` (installs into
> `~/.shnote/bin` and prints the PATH line) or install pueue yourself.

```bash
shnote --what "Start dev server" --why "Test the feature locally" pueue add -- npm run dev
shnote --what "List background tasks" --why "Check service state" pueue status
shnote --what "Show task log" --why "Debug the service" pueue log <task_id>
shnote --what "Stop background task" --why "Shut the service down" pueue kill <task_id>
```

pueue is sensitive to complex quoting: write multi-line or heavily quoted
commands to a script file and queue the script instead.
"""

RULES_EN_TAIL = """
## Output

shnote prints the rationale before the command's own output:

```
WHAT: List files
WHY: Inspect project layout
file1.txt
file2.txt
```

> Piping `shnote ...` into `head`, `tail` or `grep` may hide these two lines.
> The rationale is still recorded in the command line itself, which is why
> `--what/--why` must precede the subcommand.
"""

RULES_ZH_HEAD = """# shnote - Shell 命令包装器

## 概述

shnote 是一个命令包装器，强制在执行命令前填写 WHAT（做什么）和 WHY（为什么）。
这有助于让用户能够快速直观地理解 AI Agent 临时编排的复杂命令。

## 重要规则

**当你需要执行任何 shell 命令时，必须使用 shnote 而不是直接使用 Bash/shell 工具。**

> `--what/--why` 只允许用于执行类子命令：`run`、`py`、`node`、`pip`、`npm`、`npx`、`pueue`，
> 并且必须写在子命令之前。`config`、`init`、`setup`、`doctor`、`completions` 等管理命令
> 请直接运行 `shnote <subcommand>`（不要带 `--what/--why`）。

### 正确做法

```bash
shnote --what "列出目录文件" --why "查看项目结构" run ls -la
shnote --what "运行检查" --why "验证修复" py -c 'print("ok")'
shnote --what "处理 JSON 数据" --why "转换配置格式" node -c 'console.log(JSON.stringify({a:1}))'
shnote --what "安装 requests" --why "HTTP 请求需要" pip install requests
shnote --what "安装 axios" --why "HTTP 客户端需要" npm install axios
```

### 错误做法

```bash
ls -la                 # 错误：没有使用 shnote
shnote run ls -la      # 错误：缺少 --what 和 --why
shnote run --what x --why y ls   # 错误：参数写在了子命令之后
```

## 命令格式

```bash
shnote --what "<做什么>" --why "<为什么>" run <command> [args...]

shnote --what "<做什么>" --why "<为什么>" py -c '<code>'
shnote --what "<做什么>" --why "<为什么>" py -f <script.py> [-- args...]
shnote --what "<做什么>" --why "<为什么>" py --stdin <<'EOF'
<多行代码>
EOF

shnote --what "<做什么>" --why "<为什么>" node -c '<code>'
shnote --what "<做什么>" --why "<为什么>" node -f <script.js>

shnote --what "<做什么>" --why "<为什么>" pip <pip 参数...>     # 内部使用 `python -m pip`
shnote --what "<做什么>" --why "<为什么>" npm <npm 参数...>     # 与配置的 node 同目录的 npm
shnote --what "<做什么>" --why "<为什么>" npx <npx 参数...>
```

### 内联代码注意事项

- Python f-string 表达式内不能包含反斜杠：先将格式字符串赋值给变量。
- 引号嵌套：外层用单引号时，内层用双引号（或反之）。
- 超过一两行的代码，优先使用 `py --stdin` 配合带引号的 heredoc（`<<'EOF'`），或写成脚本文件。

## 推荐：使用 uv 避免污染系统环境

`uv run --with <pkg>` 和 `uvx <tool>` 在临时环境中运行 Python 代码和工具，不污染系统解释器：

```bash
shnote --what "生成二维码" --why "创建分享链接" run uv run --with qrcode --with pillow python -c "import qrcode; qrcode.make('hi').save('qr.png')"
shnote --what "检查代码" --why "发现潜在问题" run uvx ruff check .
```

需要持久安装项目依赖或没有安装 uv 时，使用 `pip install`。

## --what 和 --why 的编写规范

- `--what`：简洁描述命令目的，使用动词开头（"列出目录文件"、"编译项目"）。
- `--why`：解释执行原因，提供上下文（"查看项目结构"、"验证修复是否生效"）。

## 不需要使用 shnote 的情况

Agent 自身的操作（如读取文件、编辑文件等，使用专用工具）不需要通过 shnote。
"""

RULES_ZH_PUEUE = """
## 长时间运行的命令（使用 pueue）

对于长时间运行或持续运行的命令（开发服务器、文件监听、长时间编译），必须通过 pueue 放到后台执行，避免阻塞 Agent。

> 如果环境里没有 `pueue/pueued`，可以先运行 `shnote setup`（安装到 `~/.shnote/bin` 并提示如何加入 PATH），或自行安装 pueue。

```bash
shnote --what "启动开发服务器" --why "本地测试新功能" pueue add -- npm run dev
shnote --what "查看后台任务" --why "检查服务运行状态" pueue status
shnote --what "查看任务日志" --why "调试服务问题" pueue log <task_id>
shnote --what "停止后台任务" --why "关闭服务" pueue kill <task_id>
```

pueue 对命令的引号处理比较敏感：多行命令或复杂引号嵌套请先写成脚本文件再加入队列。
"""

RULES_ZH_TAIL = """
## 输出格式

shnote 会在命令输出前显示 WHAT 和 WHY：

```
WHAT: 列出目录文件
WHY: 查看项目结构
file1.txt
file2.txt
```

> 如果在 `shnote ...` 外层再接 `head`、`tail`、`grep` 等过滤，可能看不到这两行。
> 这不影响记录：`--what/--why` 写在子命令之前，总会出现在命令行本身中。
"""

_SECTIONS = {
    Lang.EN: (RULES_EN_HEAD, RULES_EN_PUEUE, RULES_EN_TAIL),
    Lang.ZH: (RULES_ZH_HEAD, RULES_ZH_PUEUE, RULES_ZH_TAIL),
}


def rules_text(lang: Lang = Lang.EN, with_pueue: bool = True) -> str:
    head, pueue, tail = _SECTIONS.get(lang, _SECTIONS[Lang.EN])
    return head + (pueue if with_pueue else "") + tail
