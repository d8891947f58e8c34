# zhv

`zhv` turns a Chinese term into English variable-name suggestions that follow a
chosen naming style. It asks an OpenAI-compatible chat completions API, streams
the reply to your terminal as it arrives, and then lists the names it found.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configure

Settings come from three places, later ones winning:

1. Defaults: API URL `https://api.openai.com/v1`, model `gpt-3.5-turbo`, no key.
2. The settings file `~/.zhv/setting.json` (keys `api_url`, `model`, `api_key`).
   A missing or unreadable file is ignored.
3. The environment variables `ZHV_API_URL`, `ZHV_MODEL` and `ZHV_KEY`
   (empty values are ignored).

All three settings must be non-empty before names can be requested.

Write the settings file from the command line:

```
zhv config set api_url "https://api.example.com/v1"
zhv config set model "your-model"
zhv config set api_key "placeholder"
```

Only `api_url`, `model` and `api_key` are accepted; any other key is an error.

Check what is in effect (the key is shown masked, keeping only its first and
last four characters when it is longer than eight):

```
zhv config show
```

`zhv config` with no action prints a short usage text.

## Use

```
zhv 用户名称
zhv -s snake 数据库连接
zhv -s pascal "文件上传状态"
zhv -v -s kebab 订单列表
```

All words given are joined with spaces into one term. The words `config` and
`version` are taken as subcommands when they come first.

Styles (`-s` / `--style`):

| style    | example              |
|----------|----------------------|
| `camel`  | `userName` (default) |
| `pascal` | `UserName`           |
| `snake`  | `user_name`          |
| `kebab`  | `user-name`          |

An unknown style is treated as `camel`.

`-v` / `--verbose` prints the API URL, model, term and style before the answer.

```
zhv version
```

prints the version, build information, Python version and platform.

Example output:

```
中文: 用户名称
风格: 驼峰命名法 (camelCase)
正在生成变量名推荐...

AI回复: 
userName - 用户名称
accountName - 账户名称

推荐的变量名:
  1. userName
  2. accountName
```

The command exits with status 1 and a message on standard error when the
settings are incomplete or the request fails.

## Library use

```python
from zhv.config import load_config
from zhv.converter import Converter

names = Converter(load_config()).convert("用户名称", "snake")
```

`Converter.convert_stream(text, style, on_content, on_complete)` sends a
streaming request, passes each piece of the reply to `on_content`, hands the
parsed names to `on_complete` and also returns them. Both methods raise
`zhv.converter.ConversionError` when the request fails.

Lower-level pieces:

- `zhv.config`: `Config`, `load_config(path=None)`, `save_config(config, path=None)`,
  `config_path()`.
- `zhv.client`: `OpenAIClient` with `chat(messages)` and `chat_stream(messages)`,
  `parse_event_stream(lines)` for server-sent event lines, and `APIError`.
- `zhv.converter`: `build_prompt(text, style)`, `parse_response(content)` and
  `is_valid_variable_name(name)`; the last two work offline on any reply text.
  When a reply holds no recognisable names, `parse_response` returns the whole
  reply joined onto one line.