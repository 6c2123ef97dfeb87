################################################################################
# Copyright (c) 2024, National Research Foundation (SARAO)
#
# Licensed under the BSD 3-Clause License (the "License"); you may not use
# this file except in compliance with the License. You may obtain a copy
# of the License at
#
#   https://opensource.org/licenses/BSD-3-Clause
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
################################################################################


"""
Geophysical corrections for space-geodesy and Earth-orientation reductions.

This provides the FCUL tropospheric mapping function and Mendes-Pavlis zenith
delay for optical ranging, as well as the effect of zonal Earth tides on
Earth rotation, using an existing astronomy library (Astropy / ERFA) to do
the low-level time and fundamental argument calculations.
"""

import logging as _logging
from types import ModuleType as _ModuleType

from ._version import __version__
from .fundamental import (
    FundamentalArguments,
    iers2003_fundamental_arguments,
    julian_centuries,
    wrap_turn,
)
from .tides import ZonalTideCorrections, ZonalTideModel, zonal_tide_corrections
from .troposphere.delay import (
    MendesPavlisZenithDelay,
    TroposphericDelay,
    mendes_pavlis_zenith_delay,
    water_vapour_pressure,
)
from .troposphere.mapping import FculMappingFunction, fcul_a


# Setup library logger and add a print-like handler used when no logging is configured
class _NoConfigFilter(_logging.Filter):
    """Filter which only allows event if top-level logging is not configured."""

    def filter(self, record):
        return 1 if not _logging.root.handlers else 0


_no_config_handler = _logging.StreamHandler()
_no_config_handler.setFormatter(_logging.Formatter(_logging.BASIC_FORMAT))
_no_config_handler.addFilter(_NoConfigFilter())
logger = _logging.getLogger(__name__)
logger.addHandler(_no_config_handler)

# Document public API in __all__ / __dir__ by discarding modules and private variables
__all__ = [
    n
    for n, o in globals().items()
    if not isinstance(o, _ModuleType) and not n.startswith("_")
]
__all__ += ["__version__"]


def __dir__():
    """Tab completion in IPython seems to respect this."""
    return __all__
