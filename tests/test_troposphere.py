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


"""Tests for the troposphere subpackage."""

import logging
from dataclasses import FrozenInstanceError

import astropy.units as u
import numpy as np
import pytest
from astropy.coordinates import EarthLocation

import geocorr
from geocorr.troposphere.delay import (
    MendesPavlisZenithDelay,
    TroposphericDelay,
    mendes_pavlis_zenith_delay,
    water_vapour_pressure,
)
from geocorr.troposphere.mapping import FculMappingFunction, fcul_a

# McDonald Observatory laser ranging station
_MCDONALD_LATITUDE = 30.67166667
_MCDONALD = EarthLocation.from_geodetic("-104:00:57.0", _MCDONALD_LATITUDE, 2075.0)

_stations = [
    (_MCDONALD_LATITUDE, 2075.0, 300.15),
    (-25.89, 1406.0, 268.15),
    (52.38, 0.0, 283.15),
    (-78.0, 3000.0, 233.15),
    (0.0, -200.0, 313.15),
]


def test_fcul_reference():
    """Check FCUL mapping function against the published test case."""
    fcul = fcul_a(_MCDONALD_LATITUDE, 2075.0, 300.15, 15.0)
    np.testing.assert_allclose(fcul, 3.800243667312344087, rtol=1e-12)


@pytest.mark.parametrize("latitude,height,temperature", _stations)
def test_fcul_zenith(latitude, height, temperature):
    """The mapping function is unity at the zenith by construction."""
    np.testing.assert_allclose(
        fcul_a(latitude, height, temperature, 90.0), 1.0, rtol=1e-15
    )


@pytest.mark.parametrize("latitude,height,temperature", _stations)
def test_fcul_towards_horizon(latitude, height, temperature):
    """The mapping function grows as elevation decreases, but stays finite."""
    elevation = np.array([90.0, 60.0, 30.0, 15.0, 5.0, 1.0, 0.01, 0.0])
    fcul = fcul_a(latitude, height, temperature, elevation)
    assert fcul.shape == elevation.shape
    assert np.all(np.diff(fcul) > 0)
    # Close to 1 / sin(el) for high elevations
    np.testing.assert_allclose(fcul[1], 1.0 / np.sin(np.radians(60.0)), rtol=1e-3)
    # The continued fraction keeps the horizon value finite
    assert np.all(np.isfinite(fcul))
    assert 10.0 < fcul[-1] < 200.0


def test_fcul_broadcast():
    """Station parameters and elevation angles broadcast against each other."""
    latitude, height, temperature = np.array(_stations).T
    elevation = np.arange(5.0, 95.0, 10.0)[:, np.newaxis]
    fcul = fcul_a(latitude, height, temperature, elevation)
    assert fcul.shape == (len(elevation), len(latitude))
    for i, el in enumerate(elevation[:, 0]):
        for j, station in enumerate(_stations):
            np.testing.assert_allclose(fcul[i, j], fcul_a(*station, el), rtol=1e-14)


def test_mapping_function_quantities(caplog):
    """Check Quantity-based mapping function against low-level version."""
    mf = FculMappingFunction(_MCDONALD)
    actual = mf.total(15 * u.deg, 300.15 * u.K)
    assert actual.unit == u.dimensionless_unscaled
    expected = fcul_a(
        _MCDONALD.lat.deg, _MCDONALD.height.to_value(u.m), 300.15, 15.0
    )
    np.testing.assert_allclose(actual.value, expected, rtol=1e-15)
    np.testing.assert_allclose(actual.value, 3.800243667312344087, rtol=1e-9)
    # Check alternative units
    actual = mf.total((15 * u.deg).to(u.rad), 27.0 * u.deg_C)
    np.testing.assert_allclose(actual.value, expected, rtol=1e-12)
    with pytest.raises(u.UnitsError):
        mf.total(15 * u.m, 300.15 * u.K)
    # Low elevations are allowed but flagged
    with caplog.at_level(logging.WARNING, logger="geocorr"):
        low = mf.total(np.array([0.5, 45.0]) * u.deg, 300.15 * u.K)
    assert "limited validity" in caplog.text
    assert np.all(np.isfinite(low))
    assert low[0] > low[1]


def test_mendes_pavlis_reference():
    """Check Mendes-Pavlis zenith delay against regression values."""
    hydrostatic, wet = mendes_pavlis_zenith_delay(
        _MCDONALD_LATITUDE, 2010.344, 798.4188, 14.322, 0.532
    )
    # Produced by geocorr 0.1
    np.testing.assert_allclose(hydrostatic, 1.9329959722362897, rtol=1e-12)
    np.testing.assert_allclose(wet, 0.0022337527316835825, rtol=1e-12)
    np.testing.assert_allclose(hydrostatic + wet, 1.9352297249679733, rtol=1e-12)
    # The IERS FCULZD_HPA test case agrees to a few parts per million only
    np.testing.assert_allclose(hydrostatic, 1.932992176591644462, rtol=5e-6)
    np.testing.assert_allclose(wet, 0.2233748255158703871e-02, rtol=5e-6)


def test_zenith_delay_quantities():
    """Check Quantity-based zenith delay against low-level version."""
    location = EarthLocation.from_geodetic(
        "-104:00:57.0", _MCDONALD_LATITUDE, 2010.344
    )
    zd = MendesPavlisZenithDelay(location)
    hydrostatic = zd.hydrostatic(798.4188 * u.hPa)
    wet = zd.wet(14.322 * u.hPa)
    np.testing.assert_allclose(hydrostatic, 1.9329959722362897 * u.m, rtol=1e-9)
    np.testing.assert_allclose(wet, 0.0022337527316835825 * u.m, rtol=1e-9)
    # Check alternative units
    np.testing.assert_allclose(
        zd.hydrostatic(79.84188 * u.kPa, 532 * u.nm), hydrostatic, rtol=1e-12
    )
    np.testing.assert_allclose(zd.wet(1432.2 * u.Pa, 0.532 * u.um), wet, rtol=1e-12)
    # Delay decreases towards the infrared
    assert zd.hydrostatic(798.4188 * u.hPa, 1064 * u.nm) < hydrostatic
    with pytest.raises(u.UnitsError):
        zd.hydrostatic(798.4188 * u.m)


def test_water_vapour_pressure():
    """Partial pressure of water vapour is sensible and scales with humidity."""
    saturated = water_vapour_pressure(20 * u.deg_C, 1.0)
    # The saturation vapour pressure at 20 degrees C is about 23.4 hPa
    np.testing.assert_allclose(saturated, 23.4 * u.hPa, rtol=0.02)
    half = water_vapour_pressure(293.15 * u.K, 50 * u.percent)
    np.testing.assert_allclose(half, 0.5 * saturated, rtol=1e-12)
    assert water_vapour_pressure(30 * u.deg_C, 0.5) > half


def test_delay_basic():
    """Test basic tropospheric delay properties."""
    with pytest.raises(TypeError):
        TroposphericDelay()  # pylint: disable=no-value-for-parameter
    with pytest.raises(ValueError):
        TroposphericDelay(_MCDONALD, "bad_format")
    with pytest.raises(ValueError):
        TroposphericDelay(_MCDONALD, "unknown-components")
    with pytest.raises(ValueError):
        TroposphericDelay(_MCDONALD, "MendesPavlisZenithDelay-FculMappingFunction-dry")
    tropo = TroposphericDelay(_MCDONALD)
    print(repr(tropo))
    location2 = EarthLocation.from_geodetic("-104:00:57.0", _MCDONALD_LATITUDE, 2075.0)
    tropo2 = geocorr.TroposphericDelay(location2)
    assert tropo == tropo2, "Tropospheric delay models should be equal by value"
    # TroposphericDelay is not hashable yet (prevented by EarthLocation)
    with pytest.raises(TypeError):
        hash(tropo)
    with pytest.raises(FrozenInstanceError):
        tropo.model_id = "it's frozen, so the model_id can't be changed"


_default_model = "MendesPavlisZenithDelay-FculMappingFunction"


@pytest.mark.parametrize("elevation", [90 * u.deg, 45 * u.deg, 15 * u.deg, 5 * u.deg])
def test_tropospheric_delay(elevation):
    """Composite delay is zenith delay scaled by the mapping function."""
    pressure = 798.4188 * u.hPa
    temperature = 27.0 * u.deg_C
    relative_humidity = 0.4
    wavelength = 0.532 * u.micron
    total = TroposphericDelay(_MCDONALD)(
        pressure, temperature, relative_humidity, elevation, wavelength
    )
    hydrostatic = TroposphericDelay(_MCDONALD, _default_model + "-hydrostatic")(
        pressure, temperature, relative_humidity, elevation
    )
    wet = TroposphericDelay(_MCDONALD, _default_model + "-wet")(
        pressure, temperature, relative_humidity, elevation
    )
    assert total.unit.physical_type == "length"
    np.testing.assert_allclose(total, hydrostatic + wet, rtol=1e-14)
    wvp = water_vapour_pressure(temperature, relative_humidity).to_value(u.hPa)
    zhd, zwd = mendes_pavlis_zenith_delay(
        _MCDONALD.lat.deg, _MCDONALD.height.to_value(u.m), 798.4188, wvp, 0.532
    )
    mapping = fcul_a(
        _MCDONALD.lat.deg,
        _MCDONALD.height.to_value(u.m),
        temperature.to_value(u.K, equivalencies=u.temperature()),
        elevation.to_value(u.deg),
    )
    np.testing.assert_allclose(hydrostatic, zhd * mapping * u.m, rtol=1e-12)
    np.testing.assert_allclose(wet, zwd * mapping * u.m, rtol=1e-12)
    # Roughly 2 metres at the zenith, growing towards the horizon
    assert 1.9 * u.m < total / mapping < 2.0 * u.m


def test_tropospheric_delay_low_elevation(caplog):
    """Total delay maps once and warns once near the horizon."""
    tropo = TroposphericDelay(_MCDONALD)
    with caplog.at_level(logging.WARNING, logger="geocorr"):
        delay = tropo(798.4188 * u.hPa, 27.0 * u.deg_C, 0.4, 0.5 * u.deg)
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "limited validity" in warnings[0].getMessage()
    assert np.isfinite(delay)
    assert delay > 10 * u.m
