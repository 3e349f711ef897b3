"""
The machinery for packing repository objects into AIPs and unpacking them again.
"""
from .params import PackageParameters, parse_boolean
from .filter import ContentFilter
from .refs import ChildReferenceTracker
from .plugins import (PluginRegistry, PackageDisseminator, PackageIngester, PackageReferencer,
                      DISSEMINATOR, INGESTER, AIP)
from .resolve import ParameterResolver, resolve_parameters
from .packer import Packer, UnpackResult, REPLACED, RESTORED, CONFLICT, default_unpack_parameters
