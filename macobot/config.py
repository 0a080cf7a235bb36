"""Configuration — environment (.env) with CLI overrides."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

SUPPORTED_BACKENDS = ("mattermost", "discord")
SUPPORTED_ARGS_MODES = ("split", "raw")

DEFAULT_COMMAND = "./macobot.sh"
DEFAULT_SIGIL = "="


def _choice(name: str, value: str, allowed, default: str) -> str:
    value = value.strip().lower()
    if value not in allowed:
        _stderr_print(f"Unsupported {name}={value!r}, falling back to {default!r}")
        return default
    return value


@dataclass
class MattermostConfig:
    url: str = ""
    login: str = ""
    password: str = ""
    team: str = ""
    channel: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.login and self.password and self.team and self.channel)


@dataclass
class DiscordConfig:
    token: str = ""
    channel_id: int = 0

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.channel_id)


@dataclass
class RunnerConfig:
    command: str = DEFAULT_COMMAND
    args_mode: str = "split"
    stdout_prefix: str = "OUT>"
    stderr_prefix: str = "ERR>"
    stdout_emphasis: str = ""
    stderr_emphasis: str = ":exclamation: "


@dataclass
class BotConfig:
    """Typed configuration for one bot process."""

    backend: str = "mattermost"
    sigil: str = DEFAULT_SIGIL
    issue_link: str = ""
    mattermost: MattermostConfig = field(default_factory=MattermostConfig)
    discord: DiscordConfig = field(default_factory=DiscordConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Create BotConfig from environment variables."""
        return cls(
            backend=_choice(
                "MACOBOT_BACKEND", os.getenv("MACOBOT_BACKEND", "mattermost"),
                SUPPORTED_BACKENDS, "mattermost",
            ),
            sigil=os.getenv("MACOBOT_SIGIL", DEFAULT_SIGIL) or DEFAULT_SIGIL,
            issue_link=os.getenv("MACOBOT_ISSUE_LINK", ""),
            mattermost=MattermostConfig(
                url=os.getenv("MATTERMOST_URL", ""),
                login=os.getenv("MATTERMOST_LOGIN", ""),
                password=os.getenv("MATTERMOST_PASSWORD", ""),
                team=os.getenv("MATTERMOST_TEAM", ""),
                channel=os.getenv("MATTERMOST_CHANNEL", ""),
            ),
            discord=DiscordConfig(
                token=os.getenv("DISCORD_TOKEN", ""),
                channel_id=int(os.getenv("DISCORD_CHANNEL_ID", "0") or "0"),
            ),
            runner=RunnerConfig(
                command=os.getenv("MACOBOT_COMMAND", DEFAULT_COMMAND) or DEFAULT_COMMAND,
                args_mode=_choice(
                    "MACOBOT_ARGS_MODE", os.getenv("MACOBOT_ARGS_MODE", "split"),
                    SUPPORTED_ARGS_MODES, "split",
                ),
                stdout_prefix=os.getenv("MACOBOT_STDOUT_PREFIX", "OUT>"),
                stderr_prefix=os.getenv("MACOBOT_STDERR_PREFIX", "ERR>"),
                stdout_emphasis=os.getenv("MACOBOT_STDOUT_EMPHASIS", ""),
                stderr_emphasis=os.getenv("MACOBOT_STDERR_EMPHASIS", ":exclamation: "),
            ),
        )

    def apply_overrides(self, args) -> "BotConfig":
        """Apply parsed CLI flags on top of the environment values.

        Only flags that were actually given (not None) override.
        """
        if getattr(args, "backend", None):
            self.backend = _choice("--backend", args.backend, SUPPORTED_BACKENDS, self.backend)
        for flag, attr in (
            ("addr", "url"),
            ("login", "login"),
            ("password", "password"),
            ("team", "team"),
            ("channel", "channel"),
        ):
            value = getattr(args, flag, None)
            if value is not None:
                setattr(self.mattermost, attr, value)
        if getattr(args, "command", None):
            self.runner.command = args.command
        if getattr(args, "issue_link", None) is not None:
            self.issue_link = args.issue_link
        return self
