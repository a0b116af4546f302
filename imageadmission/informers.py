"""Informers for the image policy resources, version v1beta1."""

from typing import Any, Callable, Dict, Mapping, Optional

from .cache import (
    NAMESPACE_INDEX,
    IndexFunc,
    ListWatch,
    SharedIndexInformer,
    meta_namespace_index,
)
from .listers import ClusterImagePolicyLister, ImagePolicyLister
from .policytypes import ClusterImagePolicy, ImagePolicy

TweakListOptionsFunc = Callable[[Dict[str, Any]], None]


def _tweaked(options: Dict[str, Any], tweak_list_options: Optional[TweakListOptionsFunc]) -> Dict[str, Any]:
    options = dict(options)
    if tweak_list_options is not None:
        tweak_list_options(options)
    return options


def _default_indexers() -> Dict[str, IndexFunc]:
    return {NAMESPACE_INDEX: meta_namespace_index}


def new_cluster_image_policy_informer(
    client: Any,
    resync_period: float,
    indexers: Optional[Mapping[str, IndexFunc]],
    tweak_list_options: Optional[TweakListOptionsFunc] = None,
) -> SharedIndexInformer:
    """Build an informer for ClusterImagePolicies served by ``client``."""

    def list_func(options: Dict[str, Any]):
        resources = client.securityenforcement_v1beta1().cluster_image_policies()
        return resources.list(_tweaked(options, tweak_list_options)).items

    def watch_func(options: Dict[str, Any]):
        resources = client.securityenforcement_v1beta1().cluster_image_policies()
        return resources.watch(_tweaked(options, tweak_list_options))

    return SharedIndexInformer(
        ListWatch(list_func=list_func, watch_func=watch_func),
        ClusterImagePolicy,
        resync_period,
        indexers,
    )


def new_image_policy_informer(
    client: Any,
    namespace: str,
    resync_period: float,
    indexers: Optional[Mapping[str, IndexFunc]],
    tweak_list_options: Optional[TweakListOptionsFunc] = None,
) -> SharedIndexInformer:
    """Build an informer for the ImagePolicies in ``namespace`` served by ``client``."""

    def list_func(options: Dict[str, Any]):
        resources = client.securityenforcement_v1beta1().image_policies(namespace)
        return resources.list(_tweaked(options, tweak_list_options)).items

    def watch_func(options: Dict[str, Any]):
        resources = client.securityenforcement_v1beta1().image_policies(namespace)
        return resources.watch(_tweaked(options, tweak_list_options))

    return SharedIndexInformer(
        ListWatch(list_func=list_func, watch_func=watch_func),
        ImagePolicy,
        resync_period,
        indexers,
    )


class ClusterImagePolicyInformer:
    """Gives access to the shared informer and lister for ClusterImagePolicies."""

    def __init__(self, factory: Any, tweak_list_options: Optional[TweakListOptionsFunc] = None) -> None:
        self.factory = factory
        self.tweak_list_options = tweak_list_options

    def _default_informer(self, client: Any, resync_period: float) -> SharedIndexInformer:
        return new_cluster_image_policy_informer(
            client, resync_period, _default_indexers(), self.tweak_list_options
        )

    def informer(self) -> SharedIndexInformer:
        """Return the informer shared through the factory."""
        return self.factory.informer_for(ClusterImagePolicy, self._default_informer)

    def lister(self) -> ClusterImagePolicyLister:
        """Return a lister reading the shared informer's store."""
        return ClusterImagePolicyLister(self.informer().get_indexer())


class ImagePolicyInformer:
    """Gives access to the shared informer and lister for ImagePolicies."""

    def __init__(
        self,
        factory: Any,
        namespace: str,
        tweak_list_options: Optional[TweakListOptionsFunc] = None,
    ) -> None:
        self.factory = factory
        self.namespace = namespace
        self.tweak_list_options = tweak_list_options

    def _default_informer(self, client: Any, resync_period: float) -> SharedIndexInformer:
        return new_image_policy_informer(
            client, self.namespace, resync_period, _default_indexers(), self.tweak_list_options
        )

    def informer(self) -> SharedIndexInformer:
        """Return the informer shared through the factory."""
        return self.factory.informer_for(ImagePolicy, self._default_informer)

    def lister(self) -> ImagePolicyLister:
        """Return a lister reading the shared informer's store."""
        return ImagePolicyLister(self.informer().get_indexer())


class V1beta1Informers:
    """The informers of every resource in this group version."""

    def __init__(
        self,
        factory: Any,
        namespace: str,
        tweak_list_options: Optional[TweakListOptionsFunc] = None,
    ) -> None:
        self.factory = factory
        self.namespace = namespace
        self.tweak_list_options = tweak_list_options

    def cluster_image_policies(self) -> ClusterImagePolicyInformer:
        """Return the ClusterImagePolicy informer."""
        return ClusterImagePolicyInformer(self.factory, self.tweak_list_options)

    def image_policies(self) -> ImagePolicyInformer:
        """Return the ImagePolicy informer."""
        return ImagePolicyInformer(self.factory, self.namespace, self.tweak_list_options)