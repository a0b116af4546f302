# imageadmission

Building blocks for deciding whether a container image may be admitted to a
cluster: image reference parsing, wildcard repository matching, content trust
server lookup, registry OAuth tokens, image policy resources, and an
in-memory cache of those resources kept up to date by informers.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Parsing image references

```python
from imageadmission.image import parse_reference, NoTrustServerError

ref = parse_reference("de.icr.io:8080/namespace/name")
ref.hostname            # "de.icr.io"
ref.port                # "8080"
ref.tag                 # "latest"
ref.digest              # ""
ref.name                # "de.icr.io:8080/namespace/name"
ref.has_ibm_repo()      # True
ref.registry_url()      # "https://de.icr.io:8080"
ref.content_trust_url() # "https://de.icr.io:4443"
ref.name_with_tag()     # "de.icr.io:8080/namespace/name:latest"
str(ref)                # the original reference
```

A reference without a registry host is treated as living on `docker.io`; a
reference without a tag gets the tag `latest`. A `@sha256:` digest is split
off into `digest` before parsing, so short digests are accepted.

An invalid reference raises `InvalidReferenceError` (a `ValueError`). A
registry with no known trust server makes `content_trust_url()` raise
`NoTrustServerError` (a `LookupError`). The known trust servers are in
`imageadmission.trustmap.TRUST_SERVER_MAP`, keyed by registry host suffix:
`docker.io`, `quay.io`, `bluemix.net` and `icr.io`.

## Wildcard matching

```python
from imageadmission.wildcard import compare, compare_any_tag

compare("s*wx*z", "stuvwxyz")                                   # True
compare("", "")                                                 # True
compare_any_tag("example.com/ns/app", "example.com/ns/app:v1")  # True
```

`*` stands for any run of characters. `compare_any_tag` also accepts a name
that only adds a tag to the pattern.

## Image policies

```python
from imageadmission.policytypes import ImagePolicy, ImagePolicyList

policies = ImagePolicyList(items=[ImagePolicy.from_dict({
    "metadata": {"name": "default", "namespace": "apps"},
    "spec": {"repositories": [
        {"name": "example.com/*", "policy": {"trust": {"enabled": True}}},
    ]},
})])

policy = policies.find_image_policy("example.com/ns/app:v1")
policy.trust.enabled    # True
policy.va.enabled       # None: not set
```

The repository whose name matches the image most closely wins: an exact,
wildcard-free match ends the search at once; otherwise the matching pattern
with the most non-wildcard characters wins, the first one on a tie. `None`
means no repository matched. `ClusterImagePolicyList.find_cluster_image_policy`
does the same for cluster-wide policies, and `find_policy(items, image)` works
on any sequence of either resource.

`from_dict` raises `ValueError` when a field has the wrong JSON type.
`build_scheme()` returns an `imageadmission.schema.Scheme` with the four
resource types registered under the group version
`securityenforcement.admission.cloud.ibm.com/v1beta1`.

## Registry OAuth tokens

```python
from imageadmission.oauth import request_token

response = request_token("token", "namespace/app", "iambearer", False,
                         "notary", "https://registry.example.com")
response.token
response.expires_in
```

The request is a form POST to `<hostname>/oauth/token` asking for `pull`
access, or `pull,push,*` when write access is required. Network failures,
non-2xx answers and undecodable bodies raise `OAuthError`; for a non-2xx answer
its `status_code` is set. `parse_token_response` decodes a JSON body on its
own.

## Caching policies

`imageadmission.cache.Indexer` is a thread-safe object store keyed by
`namespace/name` (or `name` for cluster-wide objects) with secondary indices.
A `SharedIndexInformer` fills an indexer from a `ListWatch`: it lists, then
consumes `(event_type, object)` pairs (`ADDED`, `MODIFIED`, `DELETED`,
`ERROR`) from the watch, and lists again whenever the watch ends, until its
stop event is set.

`imageadmission.factory.new_shared_informer_factory(client, default_resync)`
returns a `SharedInformerFactory` that shares one informer per resource type:

```python
import threading
from imageadmission.factory import new_shared_informer_factory

factory = new_shared_informer_factory(client, 30.0)
informers = factory.security_enforcement().v1beta1()
lister = informers.image_policies().lister()

stop = threading.Event()
factory.start(stop)               # one daemon thread per informer
factory.wait_for_cache_sync(stop)

lister.image_policies("apps").get("default")
lister.list({"team": "web"})      # selector: None, a label mapping, or a callable
```

The `client` is supplied by the caller. It must offer
`client.securityenforcement_v1beta1().image_policies(namespace)` and
`.cluster_image_policies()`, each returning an object whose
`list(options)` returns something with an `items` sequence and whose
`watch(options)` yields `(event_type, object)` pairs.

Listers raise `imageadmission.cache.NotFoundError` for unknown names.
`factory.for_resource(gvr)` returns a `GenericInformer` for
`imagepolicies` or `clusterimagepolicies` and raises `NoInformerError` for
anything else.

`imageadmission.kube.in_cluster_config()` reads the API server address from
`KUBERNETES_SERVICE_HOST` and `KUBERNETES_SERVICE_PORT` and the service
account token and CA from the service account directory, raising
`ConfigError` when they are missing; `InClusterConfig.session()` returns a
`requests.Session` carrying the bearer token.

## What this package does not do

It has no command and runs no admission webhook server. It does not verify
image signatures against a trust server, look up vulnerability reports, or
decide admission itself. It ships no API client for the policy resources: the
informers need a client object of the shape described above, provided by the
caller.