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

"""Effect of zonal Earth tides on the rotation of the Earth.

This predicts the periodic variations in UT1, length of day and rotational
speed caused by the zonal (long-period) tidal deformation of the solid Earth
and oceans, as a function of time.
"""

import logging
from dataclasses import dataclass
from typing import Callable, NamedTuple

import astropy.units as u
import numpy as np

from .fundamental import iers2003_fundamental_arguments, julian_centuries, wrap_turn

logger = logging.getLogger(__name__)


def _read_only(array):
    """Mark `array` as read-only and return it."""
    array.flags.writeable = False
    return array


# Luni-solar argument multipliers
#    l   l'  F   D  Omega
ZONAL_TIDE_MULTIPLIERS = _read_only(
    np.array(
        [
            [1, 0, 2, 2, 2],
            [2, 0, 2, 0, 1],
            [2, 0, 2, 0, 2],
            [0, 0, 2, 2, 1],
            [0, 0, 2, 2, 2],
            [1, 0, 2, 0, 0],
            [1, 0, 2, 0, 1],
            [1, 0, 2, 0, 2],
            [3, 0, 0, 0, 0],
            [-1, 0, 2, 2, 1],
            [-1, 0, 2, 2, 2],
            [1, 0, 0, 2, 0],
            [2, 0, 2, -2, 2],
            [0, 1, 2, 0, 2],
            [0, 0, 2, 0, 0],
            [0, 0, 2, 0, 1],
            [0, 0, 2, 0, 2],
            [2, 0, 0, 0, -1],
            [2, 0, 0, 0, 0],
            [2, 0, 0, 0, 1],
            [0, -1, 2, 0, 2],
            [0, 0, 0, 2, -1],
            [0, 0, 0, 2, 0],
            [0, 0, 0, 2, 1],
            [0, -1, 0, 2, 0],
            [1, 0, 2, -2, 1],
            [1, 0, 2, -2, 2],
            [1, 1, 0, 0, 0],
            [-1, 0, 2, 0, 0],
            [-1, 0, 2, 0, 1],
            [-1, 0, 2, 0, 2],
            [1, 0, 0, 0, -1],
            [1, 0, 0, 0, 0],
            [1, 0, 0, 0, 1],
            [0, 0, 0, 1, 0],
            [1, -1, 0, 0, 0],
            [-1, 0, 0, 2, -1],
            [-1, 0, 0, 2, 0],
            [-1, 0, 0, 2, 1],
            [1, 0, -2, 2, -1],
            [-1, -1, 0, 2, 0],
            [0, 2, 2, -2, 2],
            [0, 1, 2, -2, 1],
            [0, 1, 2, -2, 2],
            [0, 0, 2, -2, 0],
            [0, 0, 2, -2, 1],
            [0, 0, 2, -2, 2],
            [0, 2, 0, 0, 0],
            [2, 0, 0, -2, -1],
            [2, 0, 0, -2, 0],
            [2, 0, 0, -2, 1],
            [0, -1, 2, -2, 1],
            [0, 1, 0, 0, -1],
            [0, -1, 2, -2, 2],
            [0, 1, 0, 0, 0],
            [0, 1, 0, 0, 1],
            [1, 0, 0, -1, 0],
            [2, 0, -2, 0, 0],
            [-2, 0, 2, 0, 1],
            [-1, 1, 0, 1, 0],
            [0, 0, 0, 0, 2],
            [0, 0, 0, 0, 1],
        ],
        dtype=int,
    )
)

# Zonal tide term coefficients, in units of 1e-4 s, 1e-5 s and 1e-14 rad/s
#        DUT              DLOD               DOMEGA
#    sin      cos      cos      sin       cos      sin
ZONAL_TIDE_COEFFICIENTS = _read_only(
    np.array(
        [
            [-0.0235, 0.0000, 0.2617, 0.0000, -0.2209, 0.0000],
            [-0.0404, 0.0000, 0.3706, 0.0000, -0.3128, 0.0000],
            [-0.0987, 0.0000, 0.9041, 0.0000, -0.7630, 0.0000],
            [-0.0508, 0.0000, 0.4499, 0.0000, -0.3797, 0.0000],
            [-0.1231, 0.0000, 1.0904, 0.0000, -0.9203, 0.0000],
            [-0.0385, 0.0000, 0.2659, 0.0000, -0.2244, 0.0000],
            [-0.4108, 0.0000, 2.8298, 0.0000, -2.3884, 0.0000],
            [-0.9926, 0.0000, 6.8291, 0.0000, -5.7637, 0.0000],
            [-0.0179, 0.0000, 0.1222, 0.0000, -0.1031, 0.0000],
            [-0.0818, 0.0000, 0.5384, 0.0000, -0.4544, 0.0000],
            [-0.1974, 0.0000, 1.2978, 0.0000, -1.0953, 0.0000],
            [-0.0761, 0.0000, 0.4976, 0.0000, -0.4200, 0.0000],
            [0.0216, 0.0000, -0.1060, 0.0000, 0.0895, 0.0000],
            [0.0254, 0.0000, -0.1211, 0.0000, 0.1022, 0.0000],
            [-0.2989, 0.0000, 1.3804, 0.0000, -1.1650, 0.0000],
            [-3.1873, 0.2010, 14.6890, 0.9266, -12.3974, -0.7820],
            [-7.8468, 0.5320, 36.0910, 2.4469, -30.4606, -2.0652],
            [0.0216, 0.0000, -0.0988, 0.0000, 0.0834, 0.0000],
            [-0.3384, 0.0000, 1.5433, 0.0000, -1.3025, 0.0000],
            [0.0179, 0.0000, -0.0813, 0.0000, 0.0686, 0.0000],
            [-0.0244, 0.0000, 0.1082, 0.0000, -0.0913, 0.0000],
            [0.0470, 0.0000, -0.2004, 0.0000, 0.1692, 0.0000],
            [-0.7341, 0.0000, 3.1240, 0.0000, -2.6367, 0.0000],
            [-0.0526, 0.0000, 0.2235, 0.0000, -0.1886, 0.0000],
            [-0.0508, 0.0000, 0.2073, 0.0000, -0.1749, 0.0000],
            [0.0498, 0.0000, -0.1312, 0.0000, 0.1107, 0.0000],
            [0.1006, 0.0000, -0.2640, 0.0000, 0.2228, 0.0000],
            [0.0395, 0.0000, -0.0968, 0.0000, 0.0817, 0.0000],
            [0.0470, 0.0000, -0.1099, 0.0000, 0.0927, 0.0000],
            [0.1767, 0.0000, -0.4115, 0.0000, 0.3473, 0.0000],
            [0.4352, 0.0000, -1.0093, 0.0000, 0.8519, 0.0000],
            [0.5339, 0.0000, -1.2224, 0.0000, 1.0317, 0.0000],
            [-8.4046, 0.2500, 19.1647, 0.5701, -16.1749, -0.4811],
            [0.5443, 0.0000, -1.2360, 0.0000, 1.0432, 0.0000],
            [0.0470, 0.0000, -0.1000, 0.0000, 0.0844, 0.0000],
            [-0.0555, 0.0000, 0.1169, 0.0000, -0.0987, 0.0000],
            [0.1175, 0.0000, -0.2332, 0.0000, 0.1968, 0.0000],
            [-1.8236, 0.0000, 3.6018, 0.0000, -3.0399, 0.0000],
            [0.1316, 0.0000, -0.2587, 0.0000, 0.2183, 0.0000],
            [0.0179, 0.0000, -0.0344, 0.0000, 0.0290, 0.0000],
            [-0.0855, 0.0000, 0.1542, 0.0000, -0.1302, 0.0000],
            [-0.0573, 0.0000, 0.0395, 0.0000, -0.0333, 0.0000],
            [0.0329, 0.0000, -0.0173, 0.0000, 0.0146, 0.0000],
            [-1.8847, 0.0000, 0.9726, 0.0000, -0.8209, 0.0000],
            [0.2510, 0.0000, -0.0910, 0.0000, 0.0768, 0.0000],
            [1.1703, 0.0000, -0.4135, 0.0000, 0.3490, 0.0000],
            [-49.7174, 0.4330, 17.1056, 0.1490, -14.4370, -0.1257],
            [-0.1936, 0.0000, 0.0666, 0.0000, -0.0562, 0.0000],
            [0.0489, 0.0000, -0.0154, 0.0000, 0.0130, 0.0000],
            [-0.5471, 0.0000, 0.1670, 0.0000, -0.1409, 0.0000],
            [0.0367, 0.0000, -0.0108, 0.0000, 0.0092, 0.0000],
            [-0.0451, 0.0000, 0.0082, 0.0000, -0.0069, 0.0000],
            [0.0921, 0.0000, -0.0167, 0.0000, 0.0141, 0.0000],
            [0.8281, 0.0000, -0.1425, 0.0000, 0.1202, 0.0000],
            [-15.8887, 0.1530, 2.7332, 0.0267, -2.3068, -0.0222],
            [-0.1382, 0.0000, 0.0225, 0.0000, -0.0190, 0.0000],
            [0.0348, 0.0000, -0.0053, 0.0000, 0.0045, 0.0000],
            [-0.1372, 0.0000, -0.0079, 0.0000, 0.0066, 0.0000],
            [0.4211, 0.0000, -0.0203, 0.0000, 0.0171, 0.0000],
            [-0.0404, 0.0000, 0.0008, 0.0000, -0.0007, 0.0000],
            [7.8998, 0.0000, 0.1460, 0.0000, -0.1232, 0.0000],
            [-1617.2681, 0.0000, -14.9471, 0.0000, 12.6153, 0.0000],
        ]
    )
)


class ZonalTideCorrections(NamedTuple):
    """Effect of zonal tides on Earth rotation."""

    dut: float  # effect on UT1, in seconds
    dlod: float  # effect on excess length of day, in seconds (per day)
    domega: float  # effect on rotational speed, in radians per second


def _scalar_or_array(x):
    """Turn 0-D arrays into Python scalars but leave proper arrays alone."""
    x = np.asarray(x)
    return x if x.ndim else x.item()


def zonal_tide_corrections(
    t,
    fundamental_arguments=iers2003_fundamental_arguments,
    multipliers=ZONAL_TIDE_MULTIPLIERS,
    coefficients=ZONAL_TIDE_COEFFICIENTS,
):
    """Effects of zonal Earth tides on UT1, length of day and rotational speed.

    This is considered a low-level function that operates on floats instead of
    Astropy Quantities, sort of like PyERFA.

    Parameters
    ----------
    t : float or array
        TT, in Julian centuries since J2000.0 (TDB would be more correct, but
        the difference is insignificant for this model)
    fundamental_arguments : callable, optional
        Function that maps `t` to the five lunisolar arguments (l, l', F, D,
        Omega) in radians (defaults to the IERS 2003 expressions)
    multipliers : array of int, shape (N, 5), optional
        Integer multipliers of the fundamental arguments for each tidal term
        (defaults to the IERS 2010 table of 62 terms)
    coefficients : array of float, shape (N, 6), optional
        Amplitudes (DUT sin/cos, DLOD cos/sin, DOMEGA cos/sin) of each tidal
        term, in units of 1e-4 s, 1e-5 s and 1e-14 rad/s, respectively

    Returns
    -------
    corrections : :class:`ZonalTideCorrections`
        Effect on UT1 (s), excess length of day (s) and rotational speed (rad/s)

    Raises
    ------
    ValueError
        If the `multipliers` and `coefficients` tables have incompatible shapes

    Notes
    -----
    This is derived from the RG_ZONT2 subroutine in the International Earth
    Rotation and Reference Systems Service (IERS) Conventions software
    collection. It is neither distributed nor endorsed by the IERS Conventions
    Center. The model combines the elastic body tide of [Yoder1981]_, the
    inelastic body tide of [Wahr1986]_ and the ocean tide model of
    [Kantha1998]_, as described in chapter 8 of [IERS2010]_. The terms are
    summed in table order and each argument is reduced to a single turn in
    the same way as the original, so that the published test values are
    reproduced in all significant digits.

    References
    ----------
    .. [Yoder1981] C.F. Yoder, J.G. Williams, M.E. Parke, "Tidal variations of
       Earth rotation," Journal of Geophysical Research, vol. 86, no. B2,
       pp. 881-891, 1981. DOI: 10.1029/JB086iB02p00881

    .. [Wahr1986] J. Wahr, Z. Bergen, "The effects of mantle anelasticity on
       nutations, Earth tides, and tidal variations in rotation rate,"
       Geophysical Journal of the Royal Astronomical Society, vol. 87,
       pp. 633-668, 1986.

    .. [Kantha1998] L.H. Kantha, J.S. Stewart, S.D. Desai, "Long-period lunar
       fortnightly and monthly ocean tides," Journal of Geophysical Research,
       vol. 103, pp. 12639-12647, 1998.

    .. [IERS2010] G. Petit, B. Luzum (eds.), "IERS Conventions (2010)," IERS
       Technical Note No. 36, Verlag des Bundesamts fuer Kartographie und
       Geodaesie, Frankfurt am Main, 2010.
    """
    multipliers = np.asarray(multipliers)
    coefficients = np.asarray(coefficients)
    if multipliers.ndim != 2 or multipliers.shape[1] != 5:
        raise ValueError(
            f"Argument multipliers should have shape (N, 5), not {multipliers.shape}"
        )
    if coefficients.shape != (len(multipliers), 6):
        raise ValueError(
            f"Tide coefficients should have shape ({len(multipliers)}, 6) to match "
            f"argument multipliers, not {coefficients.shape}"
        )
    l, lp, f, d, om = fundamental_arguments(t)  # noqa: E741
    dut = dlod = domega = 0.0
    for n, c in zip(multipliers, coefficients):
        arg = wrap_turn(n[0] * l + n[1] * lp + n[2] * f + n[3] * d + n[4] * om)
        sin_arg = np.sin(arg)
        cos_arg = np.cos(arg)
        dut = dut + c[0] * sin_arg + c[1] * cos_arg
        dlod = dlod + c[2] * cos_arg + c[3] * sin_arg
        domega = domega + c[4] * cos_arg + c[5] * sin_arg
    # Rescale corrections so that they are in units involving seconds
    return ZonalTideCorrections(
        _scalar_or_array(dut * 1e-4),
        _scalar_or_array(dlod * 1e-5),
        _scalar_or_array(domega * 1e-14),
    )


@dataclass(frozen=True)
class ZonalTideModel:
    """Correct Earth rotation parameters for the effect of zonal tides.

    The corrections are calculated by calling this object like a function.
    The zonal tides are typically removed from observed UT1 and LOD before
    interpolating or smoothing them, and restored afterwards.

    Parameters
    ----------
    fundamental_arguments : callable, optional
        Function that maps TT in Julian centuries since J2000 to the five
        lunisolar arguments (l, l', F, D, Omega) in radians (defaults to the
        IERS 2003 expressions evaluated by ERFA)
    """

    fundamental_arguments: Callable = iers2003_fundamental_arguments

    def __call__(self, time) -> ZonalTideCorrections:
        """Effects of zonal Earth tides on Earth rotation at given time(s).

        Parameters
        ----------
        time : :class:`~astropy.time.Time` or float or array
            Epoch(s) of interest, either as `Time` or as TT in Julian centuries
            since J2000.0

        Returns
        -------
        corrections : :class:`ZonalTideCorrections`
            Effect on UT1 and excess length of day as :class:`~astropy.units.Quantity`
            in seconds, and effect on rotational speed in radians per second
        """
        t = julian_centuries(time)
        logger.debug("Evaluating zonal tides at T = %s Julian centuries", t)
        dut, dlod, domega = zonal_tide_corrections(t, self.fundamental_arguments)
        return ZonalTideCorrections(dut * u.s, dlod * u.s, domega * u.rad / u.s)
