import logging
import os
from typing import Dict, List

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _split_prefixes(raw: str) -> List[str]:
    return [p.strip() for p in raw.split(",") if p.strip()]


class Core:
    def __init__(self, config: dict | None = None) -> None:
        cfg = (config or {}).get("chatdispatch", {})
        discord_cfg = cfg.get("discord", {})
        commands_cfg = cfg.get("commands", {})
        messages_cfg = cfg.get("messages", {})

        token_env = str(discord_cfg.get("token_env", "DISCORD_API_TOKEN"))
        self.DISCORD_API_TOKEN: str | None = os.getenv(token_env)

        prefixes_cfg = commands_cfg.get("prefixes")
        if prefixes_cfg:
            self.COMMAND_PREFIXES: List[str] = [str(p) for p in prefixes_cfg]
        else:
            self.COMMAND_PREFIXES = _split_prefixes(os.getenv("COMMAND_PREFIXES", "!"))

        ignore_bots = commands_cfg.get("ignore_bots", os.getenv("IGNORE_BOTS", "true"))
        self.IGNORE_BOTS: bool = (
            ignore_bots if isinstance(ignore_bots, bool) else str(ignore_bots).strip().lower() in _TRUTHY
        )

        self.MESSAGES: Dict[str, str] = {str(k): str(v) for k, v in messages_cfg.items()}

        if not self.COMMAND_PREFIXES:
            raise ValueError("At least one command prefix must be configured (COMMAND_PREFIXES)")

        if not self.DISCORD_API_TOKEN:
            logger.debug("%s is not set; the Discord client will not start.", token_env)
