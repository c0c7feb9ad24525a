import os, sys
import warnings
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src/ to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Keep configuration independent from the developer's environment
os.environ.setdefault("DISCORD_API_TOKEN", "test-token")
os.environ.setdefault("COMMAND_PREFIXES", "!")

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings(
    "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
)
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


def pytest_configure(config):
    warnings.filterwarnings(
        "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
    )
    warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


class FakeChannel(SimpleNamespace):
    """Channel stub recording everything sent to it."""

    def __init__(self, channel_id: int = 1) -> None:
        super().__init__(id=channel_id, sent=[])

    async def send(self, content=None, **kwargs):
        self.sent.append(content if content is not None else kwargs)


def make_message(content, *, author=None, guild=None, channel=None, message_id=100):
    """Build a message stub exposing what the dispatcher touches."""

    message = SimpleNamespace(
        id=message_id,
        content=content,
        author=author if author is not None else SimpleNamespace(id=10, bot=False),
        guild=guild,
        channel=channel if channel is not None else FakeChannel(),
        deleted=0,
    )

    async def delete():
        message.deleted += 1

    message.delete = delete
    return message


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def message_factory():
    return make_message
