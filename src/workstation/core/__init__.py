"""Core functionality for the workstation provisioner."""

from .backup import ConfigFileWriter, WriteResult
from .bootstrap import Provisioner, ProvisionResult, Stage
from .config import Config
from .packages import PackageInstaller, PackageManager, detect_package_manager
from .repository import ExternalRepoRunner

__all__ = [
    "Config",
    "ConfigFileWriter",
    "ExternalRepoRunner",
    "PackageInstaller",
    "PackageManager",
    "ProvisionResult",
    "Provisioner",
    "Stage",
    "WriteResult",
    "detect_package_manager",
]
