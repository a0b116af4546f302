import threading

from imageadmission.cache import NAMESPACE_INDEX, wait_for_cache_sync
from imageadmission.informers import (
    ClusterImagePolicyInformer,
    ImagePolicyInformer,
    V1beta1Informers,
    new_cluster_image_policy_informer,
    new_image_policy_informer,
)
from imageadmission.listers import ClusterImagePolicyLister, ImagePolicyLister
from imageadmission.policytypes import (
    ClusterImagePolicy,
    ClusterImagePolicyList,
    ImagePolicy,
    ImagePolicyList,
    ObjectMeta,
)


class FakeResources:
    def __init__(self, list_type, items):
        self.list_type = list_type
        self.items = items
        self.list_calls = []
        self.watch_calls = []

    def list(self, options):
        self.list_calls.append(options)
        return self.list_type(items=list(self.items))

    def watch(self, options):
        self.watch_calls.append(options)
        return iter(())


class FakeGroup:
    def __init__(self, client):
        self.client = client

    def cluster_image_policies(self):
        return self.client.cluster

    def image_policies(self, namespace):
        self.client.namespaces.append(namespace)
        return self.client.namespaced


class FakeClient:
    def __init__(self, cluster_items=(), namespaced_items=()):
        self.cluster = FakeResources(ClusterImagePolicyList, list(cluster_items))
        self.namespaced = FakeResources(ImagePolicyList, list(namespaced_items))
        self.namespaces = []

    def securityenforcement_v1beta1(self):
        return FakeGroup(self)


class FakeFactory:
    def __init__(self, client, resync=0.0):
        self.client = client
        self.resync = resync
        self.informers = {}

    def informer_for(self, obj_type, new_func):
        if obj_type not in self.informers:
            self.informers[obj_type] = new_func(self.client, self.resync)
        return self.informers[obj_type]


def add_label(options):
    options["labelSelector"] = "team=a"


def test_cluster_informer_list_applies_tweak():
    policy = ClusterImagePolicy(metadata=ObjectMeta(name="p"))
    client = FakeClient(cluster_items=[policy])
    informer = new_cluster_image_policy_informer(client, 0, None, add_label)
    assert informer.obj_type is ClusterImagePolicy
    assert list(informer.list_watch.list_func({})) == [policy]
    assert client.cluster.list_calls == [{"labelSelector": "team=a"}]
    list(informer.list_watch.watch_func({}))
    assert client.cluster.watch_calls == [{"labelSelector": "team=a"}]


def test_image_policy_informer_uses_namespace():
    policy = ImagePolicy(metadata=ObjectMeta(name="p", namespace="team-a"))
    client = FakeClient(namespaced_items=[policy])
    informer = new_image_policy_informer(client, "team-a", 0, None)
    assert list(informer.list_watch.list_func({"resourceVersion": "0"})) == [policy]
    assert client.namespaces == ["team-a"]
    assert client.namespaced.list_calls == [{"resourceVersion": "0"}]


def test_informer_is_shared_through_factory():
    factory = FakeFactory(FakeClient())
    informers = ClusterImagePolicyInformer(factory)
    first = informers.informer()
    assert informers.informer() is first
    assert factory.informers == {ClusterImagePolicy: first}


def test_default_informer_indexes_by_namespace():
    policy = ImagePolicy(metadata=ObjectMeta(name="p", namespace="team-a"))
    factory = FakeFactory(FakeClient())
    indexer = ImagePolicyInformer(factory, "team-a").informer().get_indexer()
    indexer.add(policy)
    assert indexer.by_index(NAMESPACE_INDEX, "team-a") == [policy]


def test_lister_sees_listed_objects():
    policies = [
        ImagePolicy(metadata=ObjectMeta(name="a", namespace="team-a")),
        ImagePolicy(metadata=ObjectMeta(name="b", namespace="team-a")),
    ]
    factory = FakeFactory(FakeClient(namespaced_items=policies))
    informers = ImagePolicyInformer(factory, "team-a")
    shared = informers.informer()
    stop = threading.Event()
    thread = threading.Thread(target=shared.run, args=(stop,), daemon=True)
    thread.start()
    try:
        assert wait_for_cache_sync(stop, shared.has_synced) is True
        lister = informers.lister()
        assert isinstance(lister, ImagePolicyLister)
        assert lister.image_policies("team-a").get("b") is policies[1]
        assert lister.list(None) == policies
    finally:
        stop.set()
        thread.join(timeout=5)
    assert not thread.is_alive()


def test_v1beta1_informers():
    factory = FakeFactory(FakeClient())
    group = V1beta1Informers(factory, "team-a", add_label)
    images = group.image_policies()
    assert isinstance(images, ImagePolicyInformer)
    assert images.namespace == "team-a"
    assert images.tweak_list_options is add_label
    clusters = group.cluster_image_policies()
    assert isinstance(clusters, ClusterImagePolicyInformer)
    assert isinstance(clusters.lister(), ClusterImagePolicyLister)
    assert clusters.informer() is factory.informers[ClusterImagePolicy]