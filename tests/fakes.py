"""In-memory fakes for every port.

No editor, filesystem or settings file is touched; timers never fire on
their own, tests trigger them through ``ManualTimers``.
"""

from __future__ import annotations

from collections.abc import Callable

from tabstash.ports import LayoutError, StorageError

WORKSPACE = "/work/app/app.sln"


class FakeHost:
    """Layout + document ports with scriptable failures."""

    def __init__(self) -> None:
        self.open_files: list[str] = []
        self.layout = b"layout-1"
        self.fail_capture = False
        self.fail_replay = False
        self.failing_paths: set[str] = set()
        self.replayed: list[bytes] = []
        self.opened: list[str] = []

    def capture(self) -> bytes:
        if self.fail_capture:
            raise LayoutError("capture refused")
        return self.layout

    def replay(self, blob: bytes) -> None:
        if self.fail_replay:
            raise LayoutError("replay refused")
        self.replayed.append(blob)

    def open_documents(self) -> list[str]:
        return list(self.open_files)

    def open(self, path: str) -> None:
        self.opened.append(path)
        if path in self.failing_paths:
            raise OSError(f"cannot open {path}")
        self.open_files.append(path)

    def close_all(self, predicate: Callable[[str], bool]) -> None:
        self.open_files = [p for p in self.open_files if not predicate(p)]


class MemorySettings:
    """SettingsPort over nested dicts, enforcing the per-value limit."""

    def __init__(self, max_length: int = 512_000) -> None:
        self.collections: dict[str, dict[str, str]] = {}
        self.max_length = max_length
        self.fail_writes = False

    def ensure_collection(self, collection: str) -> None:
        self.collections.setdefault(collection, {})

    def property_exists(self, collection: str, name: str) -> bool:
        return name in self.collections.get(collection, {})

    def get_string(self, collection: str, name: str) -> str:
        return self.collections[collection][name]

    def set_string(self, collection: str, name: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError("store is read-only")
        if len(value) > self.max_length:
            raise StorageError(f"{name} too long")
        self.collections.setdefault(collection, {})[name] = value

    def delete_property(self, collection: str, name: str) -> None:
        self.collections.get(collection, {}).pop(name, None)

    def names(self, collection: str = "TabStash") -> list[str]:
        return sorted(self.collections.get(collection, {}))


class MemoryFiles:
    """FilePort over a dict of path -> text."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}

    def exists(self, path: str) -> bool:
        return path in self.files

    def read_text(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path: str, text: str) -> None:
        self.files[path] = text

    def delete(self, path: str) -> None:
        self.files.pop(path, None)


class FakePrompt:
    def __init__(self, delete: bool = True, translate: bool = True) -> None:
        self.delete = delete
        self.translate = translate
        self.asked: list[tuple[str, ...]] = []

    def confirm_delete(self, group_name: str) -> bool:
        self.asked.append(("delete", group_name))
        return self.delete

    def confirm_translate(self, original_key: str, target_key: str) -> bool:
        self.asked.append(("translate", original_key, target_key))
        return self.translate


class ManualTimer:
    def __init__(self, delay: float, fn: Callable[[], None]) -> None:
        self.delay = delay
        self.fn = fn
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimers:
    """Timer factory whose timers only fire when told to."""

    def __init__(self) -> None:
        self.created: list[ManualTimer] = []

    def __call__(self, delay: float, fn: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, fn)
        self.created.append(timer)
        return timer

    @property
    def live(self) -> list[ManualTimer]:
        return [t for t in self.created if t.started and not t.cancelled]

    def fire_all(self) -> None:
        for timer in self.live:
            timer.cancelled = True
            timer.fn()



def run_inline(fn: Callable[[], None]) -> None:
    """Dispatch hook for tests: the test thread plays the host UI context."""
    fn()
