"""Listers that read image policies from an informer's store."""

from typing import List

from .cache import Indexer, NotFoundError, Selector, list_all, list_all_by_namespace
from .policytypes import ClusterImagePolicy, ImagePolicy, resource


class ClusterImagePolicyLister:
    """Lists and gets ClusterImagePolicies."""

    def __init__(self, indexer: Indexer) -> None:
        self.indexer = indexer

    def list(self, selector: Selector) -> List[ClusterImagePolicy]:
        """Return the ClusterImagePolicies whose labels match ``selector``."""
        return list_all(self.indexer, selector)

    def get(self, name: str) -> ClusterImagePolicy:
        """Return the ClusterImagePolicy called ``name``."""
        obj = self.indexer.get_by_key(name)
        if obj is None:
            raise NotFoundError(resource("clusterimagepolicy"), name)
        return obj


class ImagePolicyNamespaceLister:
    """Lists and gets ImagePolicies in one namespace."""

    def __init__(self, indexer: Indexer, namespace: str) -> None:
        self.indexer = indexer
        self.namespace = namespace

    def list(self, selector: Selector) -> List[ImagePolicy]:
        """Return the ImagePolicies in the namespace whose labels match ``selector``."""
        return list_all_by_namespace(self.indexer, self.namespace, selector)

    def get(self, name: str) -> ImagePolicy:
        """Return the ImagePolicy called ``name`` in the namespace."""
        obj = self.indexer.get_by_key(f"{self.namespace}/{name}")
        if obj is None:
            raise NotFoundError(resource("imagepolicy"), name)
        return obj


class ImagePolicyLister:
    """Lists ImagePolicies across namespaces."""

    def __init__(self, indexer: Indexer) -> None:
        self.indexer = indexer

    def list(self, selector: Selector) -> List[ImagePolicy]:
        """Return every ImagePolicy whose labels match ``selector``."""
        return list_all(self.indexer, selector)

    def image_policies(self, namespace: str) -> ImagePolicyNamespaceLister:
        """Return a lister restricted to ``namespace``."""
        return ImagePolicyNamespaceLister(self.indexer, namespace)