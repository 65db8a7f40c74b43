"""
Configuration constants for the vaults core manager.
"""

# Application Metadata
APP_VERSION = "1.0"  # Use: Current version of the library, logged when a manager starts. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "Vaults Core Manager"  # Use: Full name of the library, logged when a manager starts. Type: str. Range: Any valid string.

# File and Directory Names
CONFIG_DIR_NAME = ".vaults_core"  # Use: Name of the hidden directory within the user's home directory where vault data is stored. Type: str. Range: Any valid directory name.
DATA_DIR_NAME = "VaultData"  # Use: Sub-directory of CONFIG_DIR_NAME holding the vaults file. Type: str. Range: Any valid directory name.
VAULTS_FILE_NAME = "vaults.json"  # Use: Filename of the JSON file holding the full vault collection. Type: str. Range: Any valid filename.
TMP_FILE_SUFFIX = ".tmp"  # Use: Suffix of the temporary file written before atomically replacing the vaults file. Type: str. Range: Any suffix not used by other files in the data directory.

# Storage Settings
JSON_INDENT = 2  # Use: Indentation of the persisted JSON array. Type: int. Range: None or a non-negative integer.
JSON_ENCODING = "utf-8"  # Use: Text encoding of the vaults file. Type: str. Range: Any codec name accepted by open().

# Concurrency Settings
LOAD_THREAD_NAME_PREFIX = "vaults-load"  # Use: Thread name prefix of the background worker running the initial load. Type: str. Range: Any string.

# Logging Settings
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'  # Use: Format passed to logging.basicConfig by utils.setup_logging. Type: str. Range: Any valid logging format string.
LOG_LEVEL_DEFAULT = "INFO"  # Use: Default level used by utils.setup_logging. Type: str. Range: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL".
