import os
import tempfile

# Keep rotating log files out of the working tree during the test session.
os.environ.setdefault("BIGIP_SD_LOG_DIR", tempfile.mkdtemp(prefix="bigip_sd_logs_"))
