"""kubeplan — dependency-ordered deployment plans for Kubernetes."""

__version__ = "0.1.0"
