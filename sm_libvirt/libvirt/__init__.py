"""Attachment and lifecycle bridge between the storage control plane and libvirt."""
