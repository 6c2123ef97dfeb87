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

"""Fundamental lunisolar arguments and time arguments for tidal series.

The periodic series describing tidal effects on Earth rotation are expressed
as sums of sinusoids whose phases are integer combinations of five slowly
varying angles that describe the geometry of the Moon and Sun. This module
provides these angles and the time argument (Julian centuries since J2000)
that drives them.
"""

from typing import NamedTuple

import erfa
import numpy as np
from astropy.time import Time


class FundamentalArguments(NamedTuple):
    """The five Delaunay (lunisolar) arguments, in radians.

    The order of the fields matches the order of the argument multipliers in
    tidal and nutation series.
    """

    l: float  # noqa: E741 (mean anomaly of the Moon)
    l_prime: float  # mean anomaly of the Sun
    f: float  # mean argument of latitude of the Moon (L - Omega)
    d: float  # mean elongation of the Moon from the Sun
    omega: float  # mean longitude of the ascending node of the Moon


def iers2003_fundamental_arguments(t):
    """Fundamental lunisolar arguments according to IERS Conventions (2003).

    Parameters
    ----------
    t : float or array
        TDB (or TT, for all practical purposes), in Julian centuries since
        J2000.0

    Returns
    -------
    args : :class:`FundamentalArguments`
        Lunisolar arguments l, l', F, D and Omega, in radians

    Notes
    -----
    The polynomials are those of [Simon1994]_ as adopted by the IERS
    Conventions (2003) and (2010). They are evaluated by the corresponding
    ERFA routines (eraFal03, eraFalp03, eraFaf03, eraFad03 and eraFaom03),
    which reduce each argument to a single turn with a truncating modulo
    before converting arcseconds to radians, exactly like the FUNDARG
    subroutine of the IERS Conventions software collection.

    References
    ----------
    .. [Simon1994] J.L. Simon, P. Bretagnon, J. Chapront, M. Chapront-Touze,
       G. Francou, J. Laskar, "Numerical expressions for precession formulae
       and mean elements for the Moon and the planets," Astronomy and
       Astrophysics, vol. 282, pp. 663-683, 1994.
    """
    return FundamentalArguments(
        erfa.fal03(t), erfa.falp03(t), erfa.faf03(t), erfa.fad03(t), erfa.faom03(t)
    )


def julian_centuries(time):
    """Julian centuries of TT since the J2000.0 epoch.

    Parameters
    ----------
    time : :class:`~astropy.time.Time` or float or array
        Epoch(s) of interest. Numbers are assumed to be Julian centuries already
        and are passed through unchanged.

    Returns
    -------
    t : float or array
        TT expressed as (JD - 2451545.0) / 36525
    """
    if not isinstance(time, Time):
        return time
    tt = time.tt
    # Subtract the epoch from the larger part first to preserve precision
    return ((tt.jd1 - erfa.DJ00) + tt.jd2) / erfa.DJC


def wrap_turn(angle):
    """Reduce angle to the interval [0, 2 pi).

    This applies a modulo that truncates towards zero (like C's `fmod` and
    Fortran's `MOD`) and then adds a full turn to any negative remainder.
    Python's floored `%` operator gives different rounding in the last bits
    for negative angles, which matters when reproducing published values.
    """
    angle = np.fmod(angle, erfa.D2PI)
    return np.where(angle < 0.0, angle + erfa.D2PI, angle)
