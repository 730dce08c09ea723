"""Helm Updater - find newer Helm chart versions for GitOps manifests."""

__version__ = "0.1.0"
