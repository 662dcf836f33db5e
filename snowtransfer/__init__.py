"""
SnowTransfer
~~~~~~~~~~~~

A rate limit aware client for the Discord REST API.

:copyright: (c) 2015-present Rapptz
:license: MIT, see LICENSE for more details.

"""

__title__ = 'snowtransfer'
__author__ = 'Rapptz'
__license__ = 'MIT'
__copyright__ = 'Copyright 2015-present Rapptz'
__version__ = '1.0.0'

import logging
from typing import NamedTuple, Literal

from .client import *
from .errors import *
from .file import *
from .mentions import *
from .methods import *
from .utils import *
from .http import HTTPClient as HTTPClient, RateLimitInfo as RateLimitInfo, Route as Route
from .ratelimit import BucketStore as BucketStore, GlobalLock as GlobalLock
from . import constants as constants, utils as utils


class VersionInfo(NamedTuple):
    major: int
    minor: int
    micro: int
    releaselevel: Literal['alpha', 'beta', 'candidate', 'final']
    serial: int


version_info: VersionInfo = VersionInfo(major=1, minor=0, micro=0, releaselevel='final', serial=0)

logging.getLogger(__name__).addHandler(logging.NullHandler())

del logging, NamedTuple, Literal, VersionInfo
