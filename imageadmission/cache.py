"""An indexed object store and an informer that keeps it in step with a list/watch source."""

import threading
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from .schema import GroupResource

NAMESPACE_ALL = ""
NAMESPACE_INDEX = "namespace"

IndexFunc = Callable[[Any], List[str]]
KeyFunc = Callable[[Any], str]
Selector = Union[None, Mapping[str, str], Callable[[Mapping[str, str]], bool]]
ListFunc = Callable[[Dict[str, Any]], Iterable[Any]]
WatchFunc = Callable[[Dict[str, Any]], Iterable[Tuple[str, Any]]]

_RELIST_BACKOFF = 1.0
_SYNC_POLL_INTERVAL = 0.1


class NotFoundError(LookupError):
    """Raised when a named object is not in the store."""

    def __init__(self, resource: GroupResource, name: str):
        super().__init__(f'{resource} "{name}" not found')
        self.resource = resource
        self.name = name


def _metadata(obj: Any) -> Any:
    meta = getattr(obj, "metadata", None)
    if meta is None:
        raise TypeError(f"object of type {type(obj).__qualname__} has no metadata")
    return meta


def meta_namespace_key(obj: Any) -> str:
    """Return ``namespace/name`` for namespaced objects and ``name`` otherwise."""
    meta = _metadata(obj)
    if meta.namespace:
        return f"{meta.namespace}/{meta.name}"
    return meta.name


def meta_namespace_index(obj: Any) -> List[str]:
    """Index function that files an object under its namespace."""
    return [_metadata(obj).namespace]


def _labels(obj: Any) -> Mapping[str, str]:
    meta = getattr(obj, "metadata", None)
    return getattr(meta, "labels", None) or {}


def _matches(selector: Selector, obj: Any) -> bool:
    if selector is None:
        return True
    labels = _labels(obj)
    if callable(selector):
        return bool(selector(labels))
    return all(labels.get(key) == value for key, value in selector.items())


class Indexer:
    """A thread-safe store of objects by key, with secondary indices."""

    def __init__(
        self,
        key_func: KeyFunc = meta_namespace_key,
        indexers: Optional[Mapping[str, IndexFunc]] = None,
    ) -> None:
        self._key_func = key_func
        self._indexers: Dict[str, IndexFunc] = dict(indexers or {})
        self._items: Dict[str, Any] = {}
        self._indices: Dict[str, Dict[str, Dict[str, None]]] = {
            name: {} for name in self._indexers
        }
        self._lock = threading.RLock()

    def _reindex(self, key: str, old: Any, new: Any) -> None:
        for name, index_func in self._indexers.items():
            index = self._indices[name]
            if old is not None:
                for value in index_func(old):
                    bucket = index.get(value)
                    if bucket is not None:
                        bucket.pop(key, None)
                        if not bucket:
                            del index[value]
            if new is not None:
                for value in index_func(new):
                    index.setdefault(value, {})[key] = None

    def add(self, obj: Any) -> None:
        """Insert ``obj``, replacing any object with the same key."""
        key = self._key_func(obj)
        with self._lock:
            old = self._items.get(key)
            self._items[key] = obj
            self._reindex(key, old, obj)

    def update(self, obj: Any) -> None:
        """Store the new state of ``obj``."""
        self.add(obj)

    def delete(self, obj: Any) -> None:
        """Remove the object with the key of ``obj``; missing objects are ignored."""
        key = self._key_func(obj)
        with self._lock:
            old = self._items.pop(key, None)
            if old is not None:
                self._reindex(key, old, None)

    def get_by_key(self, key: str) -> Optional[Any]:
        """Return the object stored under ``key``, or None."""
        with self._lock:
            return self._items.get(key)

    def list(self) -> List[Any]:
        """Return every stored object."""
        with self._lock:
            return list(self._items.values())

    def by_index(self, index_name: str, value: str) -> List[Any]:
        """Return the objects whose index function yields ``value``."""
        with self._lock:
            if index_name not in self._indexers:
                raise KeyError(f"Index with name {index_name} does not exist")
            keys = self._indices[index_name].get(value, {})
            return [self._items[key] for key in keys]

    def replace(self, objs: Iterable[Any]) -> None:
        """Replace the whole contents of the store with ``objs``."""
        with self._lock:
            self._items = {self._key_func(obj): obj for obj in objs}
            self._indices = {name: {} for name in self._indexers}
            for key, obj in self._items.items():
                self._reindex(key, None, obj)


def list_all(indexer: Indexer, selector: Selector) -> List[Any]:
    """Return the stored objects whose labels match ``selector``.

    ``selector`` is None for everything, a mapping of required label values,
    or a callable taking the labels and returning a bool.
    """
    return [obj for obj in indexer.list() if _matches(selector, obj)]


def list_all_by_namespace(indexer: Indexer, namespace: str, selector: Selector) -> List[Any]:
    """Return the objects in ``namespace`` whose labels match ``selector``."""
    if namespace == NAMESPACE_ALL:
        return list_all(indexer, selector)
    try:
        candidates = indexer.by_index(NAMESPACE_INDEX, namespace)
    except KeyError:
        candidates = [
            obj for obj in indexer.list() if _metadata(obj).namespace == namespace
        ]
    return [obj for obj in candidates if _matches(selector, obj)]


@dataclass
class ListWatch:
    """Functions that list objects and stream ``(event_type, object)`` changes."""

    list_func: ListFunc
    watch_func: Optional[WatchFunc] = None


class SharedIndexInformer:
    """Fills an Indexer from a ListWatch and keeps it up to date until stopped."""

    def __init__(
        self,
        list_watch: ListWatch,
        obj_type: type,
        resync_period: float,
        indexers: Optional[Mapping[str, IndexFunc]] = None,
    ) -> None:
        self.list_watch = list_watch
        self.obj_type = obj_type
        self.resync_period = resync_period
        self._indexer = Indexer(indexers=indexers)
        self._synced = threading.Event()

    def _check_type(self, obj: Any) -> Any:
        if not isinstance(obj, self.obj_type):
            raise TypeError(
                f"expected type {self.obj_type.__qualname__}, "
                f"but got {type(obj).__qualname__}"
            )
        return obj

    def _watch(self, stop: threading.Event) -> None:
        events = self.list_watch.watch_func({})
        try:
            for event_type, obj in events:
                if stop.is_set():
                    break
                if event_type in ("ADDED", "MODIFIED"):
                    self._indexer.update(self._check_type(obj))
                elif event_type == "DELETED":
                    self._indexer.delete(self._check_type(obj))
                elif event_type == "ERROR":
                    break
        finally:
            close = getattr(events, "close", None)
            if close is not None:
                close()

    def run(self, stop: threading.Event) -> None:
        """List and watch until ``stop`` is set, re-listing whenever the watch ends."""
        while not stop.is_set():
            objects = [self._check_type(obj) for obj in self.list_watch.list_func({})]
            self._indexer.replace(objects)
            self._synced.set()
            if self.list_watch.watch_func is not None:
                self._watch(stop)
            stop.wait(_RELIST_BACKOFF)

    def has_synced(self) -> bool:
        """Return True once the first listing has been stored."""
        return self._synced.is_set()

    def get_indexer(self) -> Indexer:
        """Return the store this informer fills."""
        return self._indexer


def wait_for_cache_sync(stop: threading.Event, *cache_syncs: Callable[[], bool]) -> bool:
    """Wait until every function reports a synced cache; False if ``stop`` is set first."""
    while True:
        if all(synced() for synced in cache_syncs):
            return True
        if stop.wait(_SYNC_POLL_INTERVAL):
            return False


class GenericLister:
    """Lists and gets objects of one resource from an Indexer."""

    def __init__(self, indexer: Indexer, resource: GroupResource) -> None:
        self.indexer = indexer
        self.resource = resource

    def list(self, selector: Selector) -> List[Any]:
        """Return the objects whose labels match ``selector``."""
        return list_all(self.indexer, selector)

    def get(self, name: str) -> Any:
        """Return the object stored under ``name``."""
        obj = self.indexer.get_by_key(name)
        if obj is None:
            raise NotFoundError(self.resource, name)
        return obj