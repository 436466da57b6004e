import logging

__title__ = "pullsdk"
__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
