from .step_10_update_system import UpdateSystemStep
from .step_20_install_packages import InstallPackagesStep
from .step_30_install_aur_helper import InstallAurHelperStep
from .step_40_install_aur_packages import InstallAurPackagesStep
from .step_50_backup_configs import BackupConfigsStep
from .step_60_link_configs import LinkConfigsStep
from .step_70_install_fonts import InstallFontsStep
from .step_80_set_wallpaper import SetWallpaperStep
from .step_90_cleanup import CleanupStep

__all__ = [
    "UpdateSystemStep",
    "InstallPackagesStep",
    "InstallAurHelperStep",
    "InstallAurPackagesStep",
    "BackupConfigsStep",
    "LinkConfigsStep",
    "InstallFontsStep",
    "SetWallpaperStep",
    "CleanupStep",
]
