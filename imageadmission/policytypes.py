"""Image policy resources of the securityenforcement API group, version v1beta1."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .schema import GroupKind, GroupResource, GroupVersion, Scheme
from .wildcard import compare_any_tag

GROUP_NAME = "securityenforcement.admission.cloud.ibm.com"
SCHEME_GROUP_VERSION = GroupVersion(group=GROUP_NAME, version="v1beta1")


def kind(kind: str) -> GroupKind:
    """Qualify an unqualified kind with this API group."""
    return SCHEME_GROUP_VERSION.with_kind(kind).group_kind()


def resource(resource: str) -> GroupResource:
    """Qualify an unqualified resource with this API group."""
    return SCHEME_GROUP_VERSION.with_resource(resource).group_resource()


def _mapping(data: Any, what: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, not {type(data).__name__}")
    return data


def _string(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, not {type(value).__name__}")
    return value


def _optional_bool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, not {type(value).__name__}")
    return value


def _list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list, not {type(value).__name__}")
    return value


@dataclass
class ObjectMeta:
    """The identifying metadata of a resource."""

    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)


def _meta_from_dict(data: Any) -> ObjectMeta:
    data = _mapping(data, "metadata")
    labels = _mapping(data.get("labels"), "labels")
    return ObjectMeta(
        name=_string(data, "name"),
        namespace=_string(data, "namespace"),
        labels={str(k): str(v) for k, v in labels.items()},
    )


@dataclass
class Signer:
    """A secret naming a signer whose signature is required."""

    name: str = ""


@dataclass
class VA:
    """Vulnerability advisor settings; ``enabled`` is None when unset."""

    enabled: Optional[bool] = None


@dataclass
class Trust:
    """Content trust settings; ``enabled`` is None when unset."""

    enabled: Optional[bool] = None
    signer_secrets: List[Signer] = field(default_factory=list)
    trust_server: str = ""


@dataclass
class Policy:
    """The trust and vulnerability policy applied to a repository."""

    trust: Trust = field(default_factory=Trust)
    va: VA = field(default_factory=VA)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Policy":
        """Build a policy from its JSON form."""
        data = _mapping(data, "policy")
        trust = _mapping(data.get("trust"), "trust")
        va = _mapping(data.get("va"), "va")
        signers = [
            Signer(name=_string(_mapping(item, "signer"), "name"))
            for item in _list(trust, "signerSecrets")
        ]
        return cls(
            trust=Trust(
                enabled=_optional_bool(trust, "enabled"),
                signer_secrets=signers,
                trust_server=_string(trust, "trustServer"),
            ),
            va=VA(enabled=_optional_bool(va, "enabled")),
        )


@dataclass
class Repository:
    """A repository name, which may contain ``*`` wildcards, and its policy."""

    name: str = ""
    policy: Policy = field(default_factory=Policy)


@dataclass
class PolicySpec:
    """The spec shared by ImagePolicy and ClusterImagePolicy."""

    repositories: List[Repository] = field(default_factory=list)


def _spec_from_dict(data: Any) -> PolicySpec:
    data = _mapping(data, "spec")
    repositories = []
    for item in _list(data, "repositories"):
        item = _mapping(item, "repository")
        repositories.append(
            Repository(name=_string(item, "name"), policy=Policy.from_dict(item.get("policy")))
        )
    return PolicySpec(repositories=repositories)


@dataclass
class ImagePolicy:
    """A namespaced image policy resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PolicySpec = field(default_factory=PolicySpec)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ImagePolicy":
        """Build the resource from its JSON form."""
        data = _mapping(data, "ImagePolicy")
        return cls(metadata=_meta_from_dict(data.get("metadata")), spec=_spec_from_dict(data.get("spec")))


@dataclass
class ClusterImagePolicy:
    """A cluster-wide image policy resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PolicySpec = field(default_factory=PolicySpec)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ClusterImagePolicy":
        """Build the resource from its JSON form."""
        data = _mapping(data, "ClusterImagePolicy")
        return cls(metadata=_meta_from_dict(data.get("metadata")), spec=_spec_from_dict(data.get("spec")))


def find_policy(
    items: Iterable[Union[ImagePolicy, ClusterImagePolicy]], image: str
) -> Optional[Policy]:
    """Return the policy of the repository that best matches ``image``, or None.

    An exact, wildcard-free match wins outright; otherwise the matching
    pattern with the most non-wildcard characters wins, the first on a tie.
    """
    best_quality = -1
    best_policy: Optional[Policy] = None
    for item in items:
        for repo in item.spec.repositories:
            if "*" not in repo.name and repo.name == image:
                return repo.policy
            if compare_any_tag(repo.name, image):
                quality = len(repo.name) - repo.name.count("*")
                if quality > best_quality:
                    best_quality = quality
                    best_policy = repo.policy
    return best_policy


@dataclass
class ImagePolicyList:
    """A list of ImagePolicy resources."""

    items: List[ImagePolicy] = field(default_factory=list)

    def find_image_policy(self, image: str) -> Optional[Policy]:
        """Return the policy that most closely matches ``image``, or None."""
        return find_policy(self.items, image)


@dataclass
class ClusterImagePolicyList:
    """A list of ClusterImagePolicy resources."""

    items: List[ClusterImagePolicy] = field(default_factory=list)

    def find_cluster_image_policy(self, image: str) -> Optional[Policy]:
        """Return the policy that most closely matches ``image``, or None."""
        return find_policy(self.items, image)


def add_to_scheme(scheme: Scheme) -> None:
    """Register this group's types with ``scheme``."""
    scheme.add_known_types(
        SCHEME_GROUP_VERSION,
        ImagePolicy,
        ImagePolicyList,
        ClusterImagePolicy,
        ClusterImagePolicyList,
    )


def build_scheme() -> Scheme:
    """Return a new scheme holding this group's types."""
    scheme = Scheme()
    add_to_scheme(scheme)
    return scheme