from .loader import (
    DESCRIPTOR_SAMPLE,
    DESCRIPTOR_TEMPLATE,
    dump_descriptor,
    load_descriptor,
    parse_descriptor,
    save_descriptor,
)
from .models import DescriptorError, FileChanges, UpdateDescriptor, update_name
from .mutator import apply_classification

__all__ = [
    "DESCRIPTOR_SAMPLE",
    "DESCRIPTOR_TEMPLATE",
    "DescriptorError",
    "FileChanges",
    "UpdateDescriptor",
    "apply_classification",
    "dump_descriptor",
    "load_descriptor",
    "parse_descriptor",
    "save_descriptor",
    "update_name",
]
