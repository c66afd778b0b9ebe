"""Shared test helpers for PomoTimer."""

from datetime import datetime, timedelta


class FakeClock:
    """Callable stand-in for ``local_now`` that only moves when told."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now

    def at(self, seconds: float) -> datetime:
        """A time *seconds* after the current one, without moving."""
        return self.now + timedelta(seconds=seconds)


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeSoundManager:
    def __init__(self):
        self.played: list[str] = []

    def play(self, name: str) -> None:
        self.played.append(name)


class FakeTray:
    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def showMessage(self, title, body, *args):
        self.messages.append((title, body))


class FakeLocker:
    def __init__(self):
        self.calls = 0

    def lock(self) -> bool:
        self.calls += 1
        return True
