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


"""Tropospheric delay model for optical wavelengths.

This predicts the propagation delay due to neutral gas in the troposphere and
stratosphere as a function of elevation angle, based on the weather, location
and wavelength of the signal, as used in satellite and lunar laser ranging.
"""

from dataclasses import dataclass, field
from typing import Callable

import astropy.units as u
import numpy as np
from astropy.coordinates import EarthLocation

from .mapping import FculMappingFunction

# Green wavelength of frequency-doubled Nd:YAG lasers, the usual SLR choice
_DEFAULT_WAVELENGTH = 0.532 * u.micron
# CO2 content in ppm, as recommended by the IAG (1999)
_CO2_PPM = 375.0
# Constants of the Ciddor dispersion equation for the hydrostatic component
# (k1 and k3 are k1* and k3* in the references)
_K0 = 238.0185
_K1 = 19990.975
_K2 = 57.362
_K3 = 579.55174
# Constants of the dispersion equation for the non-hydrostatic component
_W0 = 295.235
_W1 = 2.6422
_W2 = -0.032380
_W3 = 0.004028
_MMHG = 133.322387415 * u.Pa


def _dispersion(wavelength_um):
    """Hydrostatic and non-hydrostatic dispersion factors at given wavelength."""
    sigma = 1.0 / wavelength_um
    co2_correction = 1.0 + 0.534e-6 * (_CO2_PPM - 450.0)
    fh = (
        0.01
        * co2_correction
        * (
            (_K1 * (_K0 + sigma**2)) / ((_K0 - sigma**2) ** 2)
            + _K3 * (_K2 + sigma**2) / ((_K2 - sigma**2) ** 2)
        )
    )
    fnh = 0.003101 * (
        _W0 + 3.0 * _W1 * sigma**2 + 5.0 * _W2 * sigma**4 + 7.0 * _W3 * sigma**6
    )
    return fh, fnh


def mendes_pavlis_zenith_delay(
    latitude_deg, height_m, pressure_hPa, water_vapour_pressure_hPa, wavelength_um
):
    """Hydrostatic and non-hydrostatic zenith delay at optical wavelengths.

    This is considered a low-level function that operates on floats instead of
    Astropy Quantities, sort of like PyERFA.

    Parameters
    ----------
    latitude_deg : float or array
        Geodetic latitude of station, in degrees
    height_m : float or array
        Height of station above ellipsoid, in metres
    pressure_hPa : float or array
        Total barometric pressure at surface, in hectopascal or millibars
    water_vapour_pressure_hPa : float or array
        Partial pressure of water vapour at surface, in hectopascal
    wavelength_um : float or array
        Wavelength of signal, in micrometres

    Returns
    -------
    hydrostatic_m, wet_m : float or array
        Hydrostatic and non-hydrostatic zenith delays, in metres

    Notes
    -----
    This is derived from the FCULZD_HPA subroutine in the International Earth
    Rotation and Reference Systems Service (IERS) Conventions software
    collection, which implements [MP2004]_. It is neither distributed nor
    endorsed by the IERS Conventions Center.

    References
    ----------
    .. [MP2004] V.B. Mendes, E.C. Pavlis, "High-accuracy zenith delay
       prediction at optical wavelengths," Geophysical Research Letters,
       vol. 31, L14602, 2004. DOI: 10.1029/2004GL020308
    """
    # Reduce local gravity to the value at the centroid of the atmospheric column
    f = (
        1.0
        - 0.00266 * np.cos(2.0 * np.pi / 180.0 * latitude_deg)
        - 0.00028e-3 * height_m
    )
    fh, fnh = _dispersion(wavelength_um)
    hydrostatic_m = 2.416579e-3 * fh * pressure_hPa / f
    wet_m = 1.0e-4 * (5.316 * fnh - 3.759 * fh) * water_vapour_pressure_hPa / f
    return hydrostatic_m, wet_m


class MendesPavlisZenithDelay:
    """Zenith delay due to the neutral gas in the troposphere and stratosphere.

    This provides separate methods for the "dry" (hydrostatic) and "wet"
    (non-hydrostatic) components of the atmosphere, at optical wavelengths.

    Parameters
    ----------
    location : :class:`~astropy.coordinates.EarthLocation`
        Location on Earth of observer (used to correct local gravity)

    Notes
    -----
    See :func:`mendes_pavlis_zenith_delay` for details.
    """

    def __init__(self, location):
        self._latitude_deg = location.lat.deg
        self._height_m = location.height.to_value(u.m)

    @u.quantity_input
    def hydrostatic(
        self, pressure: u.hPa, wavelength: u.micron = _DEFAULT_WAVELENGTH
    ) -> u.m:
        """Zenith delay due to "dry" (hydrostatic) component of the atmosphere.

        Parameters
        ----------
        pressure : :class:`~astropy.units.Quantity`
            Total barometric pressure at surface
        wavelength : :class:`~astropy.units.Quantity`, optional
            Wavelength of signal (defaults to 532 nm)

        Returns
        -------
        delay : :class:`~astropy.units.Quantity`
            Zenith path delay due to hydrostatic component
        """
        hydrostatic_m, _ = mendes_pavlis_zenith_delay(
            self._latitude_deg,
            self._height_m,
            pressure.to_value(u.hPa),
            0.0,
            wavelength.to_value(u.micron),
        )
        return hydrostatic_m * u.m

    @u.quantity_input
    def wet(
        self, water_vapour_pressure: u.hPa, wavelength: u.micron = _DEFAULT_WAVELENGTH
    ) -> u.m:
        """Zenith delay due to "wet" (non-hydrostatic) component of atmosphere.

        Parameters
        ----------
        water_vapour_pressure : :class:`~astropy.units.Quantity`
            Partial pressure of water vapour at surface
        wavelength : :class:`~astropy.units.Quantity`, optional
            Wavelength of signal (defaults to 532 nm)

        Returns
        -------
        delay : :class:`~astropy.units.Quantity`
            Zenith path delay due to non-hydrostatic component
        """
        _, wet_m = mendes_pavlis_zenith_delay(
            self._latitude_deg,
            self._height_m,
            0.0,
            water_vapour_pressure.to_value(u.hPa),
            wavelength.to_value(u.micron),
        )
        return wet_m * u.m


_ZENITH_DELAY = {"MendesPavlisZenithDelay": MendesPavlisZenithDelay}
_MAPPING_FUNCTION = {"FculMappingFunction": FculMappingFunction}


@u.quantity_input(equivalencies=u.temperature())
def water_vapour_pressure(
    temperature: u.K, relative_humidity: u.dimensionless_unscaled
) -> u.hPa:
    """Partial pressure of water vapour from temperature and relative humidity.

    Parameters
    ----------
    temperature : :class:`~astropy.units.Quantity`
        Ambient air temperature at surface
    relative_humidity : :class:`~astropy.units.Quantity` or float or array
        Relative humidity at surface, as a fraction in range [0, 1]

    Returns
    -------
    pressure : :class:`~astropy.units.Quantity`
        Partial pressure of water vapour
    """
    temp_K = temperature.to_value(u.K, equivalencies=u.temperature())
    # Saturation vapour pressure (in mmHg) from an empirical fit to the
    # Clausius-Clapeyron relation, valid for roughly 1 - 100 degrees C
    saturation_pressure = np.exp(20.386 - 5132.0 / temp_K) * _MMHG
    return (relative_humidity * saturation_pressure).to(u.hPa)


@dataclass(frozen=True)
class TroposphericDelay:
    """Propagation delay due to neutral gas in the troposphere and stratosphere.

    Set up a tropospheric delay model as specified by the model ID with format::

         "<zenith delay>-<mapping function>[-<hydrostatic/wet>]"

    This picks an appropriate zenith delay formula and mapping function, and
    optionally restricts the delays to hydrostatic or wet components only.
    The delays are calculated by calling this object like a function.

    Parameters
    ----------
    location : :class:`~astropy.coordinates.EarthLocation`
        Location on Earth of observer
    model_id : str, optional
        Unique identifier of tropospheric model (defaults to the only model
        implemented so far)

    Raises
    ------
    ValueError
        If the specified tropospheric model is unknown or has wrong format
    """

    location: EarthLocation
    model_id: str = "MendesPavlisZenithDelay-FculMappingFunction"
    _delay: Callable = field(init=False, repr=False, compare=False)
    # EarthLocation is not hashable, but dataclass assumes it is, so disable it
    __hash__ = None

    def __post_init__(self):
        """Initialise main function `_delay` from `location` and `model_id`."""
        model_parts = self.model_id.split("-")
        if len(model_parts) == 2:
            model_parts.append("total")
        if len(model_parts) != 3:
            raise ValueError(
                f"Format for tropospheric delay model ID is '<zenith delay>-"
                f"<mapping function>[-<hydrostatic/wet>]', not {self.model_id!r}"
            )

        def get(mapping, key, name):
            try:
                return mapping[key]
            except KeyError as err:
                raise ValueError(
                    f"Tropospheric delay model {self.model_id!r} has unknown {name} "
                    f"{key!r}, available ones are {list(mapping.keys())}"
                ) from err

        zenith_delay = get(_ZENITH_DELAY, model_parts[0], "zenith delay function")(
            self.location
        )
        mapping_function = get(_MAPPING_FUNCTION, model_parts[1], "mapping function")(
            self.location
        )

        def hydrostatic(p, t, h, el, wl):  # pylint: disable=unused-argument
            return zenith_delay.hydrostatic(p, wl) * mapping_function.total(el, t)

        def wet(p, t, h, el, wl):  # pylint: disable=unused-argument
            wvp = water_vapour_pressure(t, h)
            return zenith_delay.wet(wvp, wl) * mapping_function.total(el, t)

        def total(p, t, h, el, wl):
            zenith = zenith_delay.hydrostatic(p, wl) + zenith_delay.wet(
                water_vapour_pressure(t, h), wl
            )
            return zenith * mapping_function.total(el, t)

        model_types = {"hydrostatic": hydrostatic, "wet": wet, "total": total}
        # Set attribute on base class because this class is frozen
        super().__setattr__("_delay", get(model_types, model_parts[2], "type"))

    @u.quantity_input(equivalencies=u.temperature())
    def __call__(
        self,
        pressure: u.hPa,
        temperature: u.deg_C,
        relative_humidity: u.dimensionless_unscaled,
        elevation: u.rad,
        wavelength: u.micron = _DEFAULT_WAVELENGTH,
    ) -> u.m:
        """Propagation delay due to neutral gas in the troposphere and stratosphere.

        Parameters
        ----------
        pressure : :class:`~astropy.units.Quantity`
            Total barometric pressure at surface
        temperature : :class:`~astropy.units.Quantity`
            Ambient air temperature at surface
        relative_humidity : :class:`~astropy.units.Quantity` or float or array
            Relative humidity at surface, as a fraction in range [0, 1]
        elevation : :class:`~astropy.units.Quantity` or
            :class:`~astropy.coordinates.Angle`
            Elevation angle
        wavelength : :class:`~astropy.units.Quantity`, optional
            Wavelength of signal (defaults to 532 nm)

        Returns
        -------
        delay : :class:`~astropy.units.Quantity`
            Tropospheric propagation delay, as excess path length
        """
        return self._delay(
            pressure,
            temperature,
            relative_humidity,
            elevation,
            wavelength,
        )
