from .step_10_detect_system import DetectSystemStep
from .step_20_setup_credentials import SetupCredentialsStep
from .step_30_sync_repository import SyncRepositoryStep
from .step_40_install_boot_config import InstallBootConfigStep
from .step_50_install_packages import InstallPackagesStep

__all__ = [
    "DetectSystemStep",
    "SetupCredentialsStep",
    "SyncRepositoryStep",
    "InstallBootConfigStep",
    "InstallPackagesStep",
]
