"""A factory that shares one informer per resource type among its users."""

import threading
from typing import Any, Callable, Dict, Optional

from .cache import (
    NAMESPACE_ALL,
    GenericLister,
    SharedIndexInformer,
    wait_for_cache_sync,
)
from .informers import TweakListOptionsFunc, V1beta1Informers
from .policytypes import SCHEME_GROUP_VERSION
from .schema import GroupResource, GroupVersionResource

NewInformerFunc = Callable[[Any, float], SharedIndexInformer]


class NoInformerError(LookupError):
    """Raised when no informer is known for a resource."""


class GenericInformer:
    """An informer of any resource type, with a lister that returns plain objects."""

    def __init__(self, informer: SharedIndexInformer, resource: GroupResource) -> None:
        self._informer = informer
        self.resource = resource

    def informer(self) -> SharedIndexInformer:
        """Return the shared informer."""
        return self._informer

    def lister(self) -> GenericLister:
        """Return a lister reading the informer's store."""
        return GenericLister(self._informer.get_indexer(), self.resource)


class SecurityEnforcementGroup:
    """Access to each version of the securityenforcement API group."""

    def __init__(
        self,
        factory: "SharedInformerFactory",
        namespace: str,
        tweak_list_options: Optional[TweakListOptionsFunc] = None,
    ) -> None:
        self.factory = factory
        self.namespace = namespace
        self.tweak_list_options = tweak_list_options

    def v1beta1(self) -> V1beta1Informers:
        """Return the informers of version v1beta1."""
        return V1beta1Informers(self.factory, self.namespace, self.tweak_list_options)


class SharedInformerFactory:
    """Creates informers on demand and shares one per object type."""

    def __init__(
        self,
        client: Any,
        default_resync: float,
        namespace: str = NAMESPACE_ALL,
        tweak_list_options: Optional[TweakListOptionsFunc] = None,
    ) -> None:
        self.client = client
        self.default_resync = default_resync
        self.namespace = namespace
        self.tweak_list_options = tweak_list_options
        self._lock = threading.Lock()
        self._informers: Dict[type, SharedIndexInformer] = {}
        self._started: Dict[type, bool] = {}

    def start(self, stop: threading.Event) -> None:
        """Run every requested informer that is not running yet, each in its own thread."""
        with self._lock:
            for obj_type, informer in self._informers.items():
                if self._started.get(obj_type):
                    continue
                thread = threading.Thread(
                    target=informer.run,
                    args=(stop,),
                    name=f"informer-{obj_type.__name__}",
                    daemon=True,
                )
                thread.start()
                self._started[obj_type] = True

    def wait_for_cache_sync(self, stop: threading.Event) -> Dict[type, bool]:
        """Wait for every started informer to sync; map each type to whether it did."""
        with self._lock:
            started = {
                obj_type: informer
                for obj_type, informer in self._informers.items()
                if self._started.get(obj_type)
            }
        return {
            obj_type: wait_for_cache_sync(stop, informer.has_synced)
            for obj_type, informer in started.items()
        }

    def informer_for(self, obj_type: type, new_func: NewInformerFunc) -> SharedIndexInformer:
        """Return the informer for ``obj_type``, creating it with ``new_func`` if needed."""
        with self._lock:
            informer = self._informers.get(obj_type)
            if informer is None:
                informer = new_func(self.client, self.default_resync)
                self._informers[obj_type] = informer
            return informer

    def for_resource(self, resource: GroupVersionResource) -> GenericInformer:
        """Return a generic informer for ``resource``."""
        versions = self.security_enforcement().v1beta1()
        if resource == SCHEME_GROUP_VERSION.with_resource("clusterimagepolicies"):
            informer = versions.cluster_image_policies().informer()
        elif resource == SCHEME_GROUP_VERSION.with_resource("imagepolicies"):
            informer = versions.image_policies().informer()
        else:
            raise NoInformerError(f"no informer found for {resource}")
        return GenericInformer(informer, resource.group_resource())

    def security_enforcement(self) -> SecurityEnforcementGroup:
        """Return the securityenforcement API group."""
        return SecurityEnforcementGroup(self, self.namespace, self.tweak_list_options)


def new_filtered_shared_informer_factory(
    client: Any,
    default_resync: float,
    namespace: str,
    tweak_list_options: Optional[TweakListOptionsFunc],
) -> SharedInformerFactory:
    """Return a factory whose informers see only ``namespace`` and tweaked list options."""
    return SharedInformerFactory(client, default_resync, namespace, tweak_list_options)


def new_shared_informer_factory(client: Any, default_resync: float) -> SharedInformerFactory:
    """Return a factory whose informers see every namespace."""
    return new_filtered_shared_informer_factory(client, default_resync, NAMESPACE_ALL, None)