import platform
import os
import stat
import logging
from typing import Union

from . import config

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    try:
        import ntsecuritycon
        import win32api
        import win32con
        import win32security
        WINDOWS_SECURITY_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not fully installed, cannot restrict the vaults file to the current user.")
        WINDOWS_SECURITY_AVAILABLE = False
else:
    WINDOWS_SECURITY_AVAILABLE = False


def setup_logging(level: Union[str, int] = config.LOG_LEVEL_DEFAULT) -> None:
    """
    Configure root logging for a host application embedding the manager.
    The library itself never configures logging on import.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.LOG_FORMAT)


def set_owner_only_permissions(filepath: Union[str, os.PathLike]) -> bool:
    """
    Restrict a file to its owner. The vaults file holds plain-text passcodes.

    On POSIX the mode becomes 0600. On Windows the file gets a protected DACL
    granting read/write to the current user only, which needs pywin32.
    Returns True if the permissions were applied.
    """
    filepath = os.fspath(filepath)
    if platform.system() != 'Windows':
        os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)  # 600
        return True

    if not WINDOWS_SECURITY_AVAILABLE:
        logger.warning(f"Skipping Windows file permission setting for {filepath}: pywin32 not available.")
        return False

    try:
        token = win32security.OpenProcessToken(win32api.GetCurrentProcess(), win32con.TOKEN_QUERY)
        user_sid = win32security.GetTokenInformation(token, win32security.TokenUser)[0]

        dacl = win32security.ACL()
        dacl.AddAccessAllowedAce(
            win32security.ACL_REVISION,
            ntsecuritycon.FILE_GENERIC_READ | ntsecuritycon.FILE_GENERIC_WRITE,
            user_sid
        )
        # PROTECTED drops ACEs inherited from the data directory
        win32security.SetNamedSecurityInfo(
            filepath,
            win32security.SE_FILE_OBJECT,
            win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
            None,
            None,
            dacl,
            None
        )
    except win32api.error as e:
        logger.warning(f"Could not restrict {filepath} to the current user: {e}")
        return False

    logger.info(f"Restricted {filepath} to the current user.")
    return True
