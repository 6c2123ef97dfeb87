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

"""Tropospheric mapping function.

This scales the propagation delay at the zenith to the delay at any elevation
angle, based on the location of the station and the surface temperature. It is
tailored to optical wavelengths as used by satellite and lunar laser ranging.
"""

import logging

import astropy.units as u
import numpy as np

logger = logging.getLogger(__name__)

# Coefficients of linear models for the continued fraction parameters a, b and c
# as a function of temperature (degrees C), cos(latitude) and height (m)
_FCUL_A_COEFS = np.array(
    [
        [0.121008e-02, 0.17295e-05, 0.3191e-04, -0.18478e-07],  # a
        [0.304965e-02, 0.2346e-05, -0.1035e-03, -0.1856e-07],  # b
        [0.68777e-01, 0.1972e-04, -0.3458e-02, 0.1060e-06],  # c
    ]
)
# Below this elevation the mapping function is extrapolated beyond its fit
_MIN_ELEVATION_DEG = 1.0


def _continued_fraction(elevation, a, b, c):
    """Marini-style continued fraction evaluated at given elevation angle."""
    # Express formula in terms of zenith angle z to match notation in references
    cos_z = np.sin(elevation)
    topcon = 1.0 + a / (1.0 + b / (1.0 + c))
    return topcon / (cos_z + a / (cos_z + b / (cos_z + c)))


def fcul_a(latitude_deg, height_m, temperature_K, elevation_deg):
    """Global total FCULa mapping function.

    This is considered a low-level function that operates on floats instead of
    Astropy Quantities, sort of like PyERFA. There is no check on the range of
    the inputs; elevations close to the horizon produce large scale factors.

    Parameters
    ----------
    latitude_deg : float or array
        Latitude of station (north positive), in degrees
    height_m : float or array
        Height of station above mean sea level, in metres
    temperature_K : float or array
        Ambient air temperature at surface, in kelvin
    elevation_deg : float or array
        Elevation angle of observation, in degrees

    Returns
    -------
    fcul : float or array
        Scale factor that turns total zenith delay into delay at elevation angle

    Notes
    -----
    This is derived from the FCUL_A function in the International Earth
    Rotation and Reference Systems Service (IERS) Conventions software
    collection, which implements [Mendes2002]_. It is neither distributed nor
    endorsed by the IERS Conventions Center. The coefficients are based on a
    least-squares fit to 87766 ray traces, which used Ciddor's equations for
    refractivity as recommended by the IUGG (1999).

    References
    ----------
    .. [Mendes2002] V.B. Mendes, G. Prates, E.C. Pavlis, D.E. Pavlis,
       R.B. Langley, "Improved mapping functions for atmospheric refraction
       correction in SLR," Geophysical Research Letters, vol. 29, no. 10,
       1414, 2002. DOI: 10.1029/2001GL014394
    """
    elevation_rad = elevation_deg * (np.pi / 180.0)
    temperature_C = temperature_K - 273.15
    cos_phi = np.cos(latitude_deg * (np.pi / 180.0))
    a, b, c = (
        k[0] + k[1] * temperature_C + k[2] * cos_phi + k[3] * height_m
        for k in _FCUL_A_COEFS
    )
    return _continued_fraction(elevation_rad, a, b, c)


class FculMappingFunction:
    """Function that describes the elevation dependence of atmospheric delay.

    This maps total zenith delays to any elevation angle, based on the site
    coordinates and the surface temperature. Unlike radio mapping functions,
    the hydrostatic and wet components share the same mapping, since water
    vapour contributes little to the delay at optical wavelengths.

    Parameters
    ----------
    location : :class:`~astropy.coordinates.EarthLocation`
        Location on Earth of observer (latitude and height enter the model)

    Notes
    -----
    See :func:`fcul_a` for details. The model expects height above mean sea
    level, while `location` provides ellipsoidal height. The difference (up
    to about 100 m) changes the mapping by at most a few parts in 1e6.
    """

    def __init__(self, location):
        self.location = location

    @u.quantity_input(equivalencies=u.temperature())
    def total(self, elevation: u.rad, temperature: u.K) -> u.dimensionless_unscaled:
        """Perform mapping for total (hydrostatic + wet) delay.

        Parameters
        ----------
        elevation : :class:`~astropy.units.Quantity` or
            :class:`~astropy.coordinates.Angle`
            Elevation angle
        temperature : :class:`~astropy.units.Quantity`
            Ambient air temperature at surface

        Returns
        -------
        fcul : :class:`~astropy.units.Quantity`
            Scale factor that turns zenith delay into delay at elevation angle
        """
        elevation_deg = elevation.to_value(u.deg)
        if np.any(elevation_deg < _MIN_ELEVATION_DEG):
            logger.warning(
                "Mapping function evaluated below %g degrees elevation "
                "(lowest %g degrees), where it is of limited validity",
                _MIN_ELEVATION_DEG,
                np.min(elevation_deg),
            )
        fcul = fcul_a(
            self.location.lat.deg,
            self.location.height.to_value(u.m),
            temperature.to_value(u.K, equivalencies=u.temperature()),
            elevation_deg,
        )
        return fcul * u.dimensionless_unscaled
