from .config.settings import IIIFNotificationsConfig, get_config
from .utils.logging import Logger, get_logger
from .utils.terminal import supports_utf8
from .utils.version import get_git_hash, get_pyproject_version

__license__ = "MIT"
__version__ = get_pyproject_version()
__git_hash__ = get_git_hash()


if supports_utf8():
    IIIF_NOTIFICATIONS_HEADER = f"""
╔═══════════════════════════════════════════════════════════════════════════════╗
║                   I I I F   N O T I F I C A T I O N S                         ║
╠═══════════════════════════════════════════════════════════════════════════════╣
║                                                                               ║
║  Version: {__version__:<68}║
║  Git Hash: {__git_hash__:<67}║
║  License: {__license__:<68}║
║                                                                               ║
╚═══════════════════════════════════════════════════════════════════════════════╝
    """.strip()
else:
    IIIF_NOTIFICATIONS_HEADER = f"""
+-------------------------------------------------------------------------------+
|                   I I I F   N O T I F I C A T I O N S                         |
+-------------------------------------------------------------------------------+
|                                                                               |
|  Version: {__version__:<68}|
|  Git Hash: {__git_hash__:<67}|
|  License: {__license__:<68}|
|                                                                               |
+-------------------------------------------------------------------------------+
    """.strip()

config: IIIFNotificationsConfig = get_config()

log: Logger = get_logger()
