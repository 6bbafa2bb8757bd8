from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ooh_portal.auth import Capability, Role, has_capability


@dataclass(frozen=True)
class SessionState:
    token: str
    user: dict

    @property
    def user_id(self) -> str:
        return self.user['id']

    @property
    def role(self) -> Role:
        return Role(self.user['role'])


class MemorySessionStore:
    def __init__(self) -> None:
        self._state: SessionState | None = None

    def read(self) -> SessionState | None:
        return self._state

    def write(self, state: SessionState) -> None:
        self._state = state

    def erase(self) -> None:
        self._state = None


class FileSessionStore:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> SessionState | None:
        try:
            raw = json.loads(self.path.read_text(encoding='utf-8'))
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            # A corrupt file is treated as logged out.
            return None
        if not isinstance(raw, dict) or 'token' not in raw or 'user' not in raw:
            return None
        return SessionState(token=raw['token'], user=raw['user'])

    def write(self, state: SessionState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({'token': state.token, 'user': state.user}), encoding='utf-8')

    def erase(self) -> None:
        self.path.unlink(missing_ok=True)


@dataclass
class SessionContext:
    store: MemorySessionStore | FileSessionStore = field(default_factory=MemorySessionStore)
    on_load: list[Callable[[SessionState], None]] = field(default_factory=list)
    on_clear: list[Callable[[], None]] = field(default_factory=list)
    state: SessionState | None = None

    def load(self) -> SessionState | None:
        """Restore a persisted session, e.g. at client start-up."""
        self.state = self.store.read()
        if self.state is not None:
            for hook in self.on_load:
                hook(self.state)
        return self.state

    def begin(self, token: str, user: dict) -> SessionState:
        self.state = SessionState(token=token, user=dict(user))
        self.store.write(self.state)
        for hook in self.on_load:
            hook(self.state)
        return self.state

    def clear(self) -> None:
        self.state = None
        self.store.erase()
        for hook in self.on_clear:
            hook()

    @property
    def user(self) -> dict | None:
        return self.state.user if self.state else None

    @property
    def token(self) -> str | None:
        return self.state.token if self.state else None

    def has_capability(self, capability: Capability) -> bool:
        if self.state is None:
            return False
        return has_capability(self.state.role, capability)
