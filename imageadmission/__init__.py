"""Container image admission: references, wildcard policies, trust servers, OAuth tokens and policy caching."""

__version__ = "0.1.0"