# core.py
from typing import Optional
from post_arch.utils.logger import RichAppLogger

# A global variable to hold the initialized logger wrapper
# It starts as None and is set by the command line entry point
app_logger: Optional[RichAppLogger] = None
